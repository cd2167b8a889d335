class GameRuleError(ValueError):
    """Una regla del juego impide la operación (saldo, plazas, fechas...)."""


class NotFoundError(LookupError):
    """El registro pedido no existe o no pertenece al jugador."""


class ConflictError(GameRuleError):
    """La operación ya se hizo (inscripción duplicada, miembro repetido...)."""
