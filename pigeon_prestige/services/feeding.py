"""
Lotes diarios de alimentación.

Cada día de juego, a cada paloma activa con mezcla asignada (propia o de su
grupo) se le descuenta del inventario de su dueño la comida que pide la mezcla.
Si falta algo no se descuenta nada: se apunta la escasez, sube la racha y la
paloma pierde salud (5% el primer día, 10% los siguientes).

Cada paloma es una unidad de trabajo con su propio commit. Un fallo de base de
datos en una paloma se registra y el lote sigue con las demás.
"""
import math
import random
from datetime import date, datetime, timezone

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pigeon_prestige.core.config import settings
from pigeon_prestige.db.models.feed_history import PigeonFeedHistory
from pigeon_prestige.db.models.food import UserFoodInventory
from pigeon_prestige.db.models.food_mix import FoodMix
from pigeon_prestige.db.models.game_time import GameTimeState
from pigeon_prestige.db.models.group import PigeonGroup, PigeonGroupMember
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus

logger = structlog.get_logger()

FED = "fed"
SHORTAGE = "shortage"
SKIPPED = "skipped"


# ==============================================================================
# 1. LÓGICA PURA (sin DB)
# ==============================================================================

def build_feeding_plan(
    mix: dict[int, int],
    inventory: dict[int, int],
    rng: random.Random,
    daily_ration: int | None = None,
    fill_percent: int | None = None,
) -> dict[int, int]:
    """
    Devuelve {food_id: unidades necesarias} para una toma.
    Los huecos de la mezcla al 0% se rellenan con otra comida al azar que
    tenga existencias (para gastar lo que sobra).
    """
    daily_ration = daily_ration if daily_ration is not None else settings.daily_ration
    fill_percent = fill_percent if fill_percent is not None else settings.fill_percent

    required: dict[int, int] = {}
    for food_id, percent in mix.items():
        if percent <= 0:
            candidates = sorted(f for f, qty in inventory.items() if qty > 0 and f != food_id)
            if not candidates:
                continue
            food_id = rng.choice(candidates)
            percent = mix.get(food_id) or fill_percent

        units = math.ceil(percent * daily_ration / 100)
        required[food_id] = required.get(food_id, 0) + units

    return required


def has_enough_food(required: dict[int, int], inventory: dict[int, int]) -> bool:
    if not required:
        return False
    return all(inventory.get(food_id, 0) >= units for food_id, units in required.items())


def shortage_penalty(health: float, streak: int) -> float:
    """Salud tras un día sin comida suficiente. Nunca baja de 0."""
    rate = settings.first_shortage_penalty if streak == 0 else settings.repeat_shortage_penalty
    return max(health - health * rate, 0.0)


# ==============================================================================
# 2. UNA PALOMA (read-modify-write + commit)
# ==============================================================================

def _resolve_game_date(db: Session, game_date: date | None) -> date:
    if game_date:
        return game_date
    state = db.query(GameTimeState).order_by(GameTimeState.id.desc()).first()
    return state.current_game_date if state else settings.game_start_date


def _load_inventory(db: Session, owner_id: int) -> dict[int, UserFoodInventory]:
    rows = db.query(UserFoodInventory).filter(UserFoodInventory.user_id == owner_id).all()
    return {row.food_id: row for row in rows}


def _already_fed(db: Session, pigeon_id: int, game_date: date) -> bool:
    return (
        db.query(PigeonFeedHistory.id)
        .filter(PigeonFeedHistory.pigeon_id == pigeon_id, PigeonFeedHistory.game_date == game_date)
        .first()
        is not None
    )


def feed_pigeon(
    db: Session,
    pigeon: Pigeon,
    food_mix: FoodMix,
    game_date: date,
    rng: random.Random,
    group_id: int | None = None,
) -> str:
    """
    Intenta una toma para la paloma con la mezcla dada. No hace commit.
    Devuelve FED, SHORTAGE o SKIPPED (ya comió ese día).
    """
    if _already_fed(db, pigeon.id, game_date):
        return SKIPPED

    rows = _load_inventory(db, pigeon.owner_id)
    inventory = {food_id: row.quantity for food_id, row in rows.items()}
    required = build_feeding_plan(food_mix.allocations, inventory, rng)

    shortage = not has_enough_food(required, inventory)
    if shortage:
        # Todo o nada: no se toca el inventario
        pigeon.health = shortage_penalty(pigeon.health, pigeon.food_shortage_streak)
        pigeon.food_shortage_streak += 1
    else:
        for food_id, units in required.items():
            rows[food_id].quantity -= units
        pigeon.food_shortage_streak = 0

    db.add(PigeonFeedHistory(
        pigeon_id=pigeon.id,
        food_mix_id=food_mix.id,
        group_id=group_id,
        game_date=game_date,
        applied_at=datetime.now(timezone.utc),
        food_shortage=shortage,
    ))
    return SHORTAGE if shortage else FED


def _run_unit(db: Session, report: dict, pigeon_id: int, work) -> None:
    try:
        outcome = work()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Fallo al alimentar paloma", pigeon_id=pigeon_id)
        report["failed"].append(pigeon_id)
        return

    report[outcome] += 1
    if outcome == SHORTAGE:
        logger.warning("Escasez de comida", pigeon_id=pigeon_id)
    else:
        logger.debug("Toma registrada", pigeon_id=pigeon_id, outcome=outcome)


def _new_report(game_date: date) -> dict:
    return {"game_date": game_date, FED: 0, SHORTAGE: 0, SKIPPED: 0, "failed": []}


# ==============================================================================
# 3. LOTES DIARIOS
# ==============================================================================

def update_pigeon_feedings_for_game_day(
    db: Session,
    game_date: date | None = None,
    rng: random.Random | None = None,
) -> dict:
    """
    Alimenta a todas las palomas activas que tienen mezcla propia asignada.
    """
    game_date = _resolve_game_date(db, game_date)
    rng = rng or random.Random()
    report = _new_report(game_date)

    pigeon_ids = [
        pid for (pid,) in (
            db.query(Pigeon.id)
            .filter(Pigeon.status == PigeonStatus.ACTIVE, Pigeon.current_food_mix_id.isnot(None))
            .order_by(Pigeon.id)
            .all()
        )
    ]

    # Con precedencia de grupo, las palomas de un grupo con mezcla las alimenta el otro lote
    grouped = set()
    if settings.feeding_precedence == "group":
        grouped = {
            pid for (pid,) in (
                db.query(PigeonGroupMember.pigeon_id)
                .join(PigeonGroup, PigeonGroup.id == PigeonGroupMember.group_id)
                .filter(PigeonGroup.current_food_mix_id.isnot(None))
                .all()
            )
        }

    for pigeon_id in pigeon_ids:
        if pigeon_id in grouped:
            report[SKIPPED] += 1
            continue

        def work(pigeon_id=pigeon_id):
            pigeon = db.get(Pigeon, pigeon_id)
            if not pigeon or pigeon.current_food_mix_id is None:
                return SKIPPED
            food_mix = db.get(FoodMix, pigeon.current_food_mix_id)
            if not food_mix:
                return SKIPPED
            return feed_pigeon(db, pigeon, food_mix, game_date, rng)

        _run_unit(db, report, pigeon_id, work)

    logger.info("Lote de alimentación individual terminado", **_summary(report))
    return report


def update_group_feedings_for_game_day(
    db: Session,
    game_date: date | None = None,
    rng: random.Random | None = None,
) -> dict:
    """
    Para cada grupo con mezcla asignada, alimenta a todos sus miembros con
    la mezcla del grupo (misma lógica que el lote individual).
    """
    game_date = _resolve_game_date(db, game_date)
    rng = rng or random.Random()
    report = _new_report(game_date)

    groups = (
        db.query(PigeonGroup)
        .filter(PigeonGroup.current_food_mix_id.isnot(None))
        .order_by(PigeonGroup.id)
        .all()
    )

    for group in groups:
        group_id = group.id
        food_mix_id = group.current_food_mix_id
        member_ids = [
            pid for (pid,) in (
                db.query(PigeonGroupMember.pigeon_id)
                .filter(PigeonGroupMember.group_id == group_id)
                .order_by(PigeonGroupMember.pigeon_id)
                .all()
            )
        ]
        if not member_ids:
            continue

        for pigeon_id in member_ids:
            def work(pigeon_id=pigeon_id):
                pigeon = db.get(Pigeon, pigeon_id)
                if not pigeon or pigeon.status != PigeonStatus.ACTIVE:
                    return SKIPPED
                # Con precedencia individual, la mezcla propia manda
                if settings.feeding_precedence == "individual" and pigeon.current_food_mix_id is not None:
                    return SKIPPED
                food_mix = db.get(FoodMix, food_mix_id)
                if not food_mix:
                    return SKIPPED
                return feed_pigeon(db, pigeon, food_mix, game_date, rng, group_id=group_id)

            _run_unit(db, report, pigeon_id, work)

    logger.info("Lote de alimentación por grupos terminado", **_summary(report))
    return report


def _summary(report: dict) -> dict:
    return {
        "game_date": str(report["game_date"]),
        "fed": report[FED],
        "shortages": report[SHORTAGE],
        "skipped": report[SKIPPED],
        "failed": len(report["failed"]),
    }
