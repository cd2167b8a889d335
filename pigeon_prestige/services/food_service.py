from sqlalchemy.orm import Session

from pigeon_prestige.db.models.feed_history import PigeonFeedHistory
from pigeon_prestige.db.models.food import Food, UserFoodInventory
from pigeon_prestige.db.models.food_mix import FoodMix
from pigeon_prestige.db.models.group import PigeonGroup, GroupFeeding
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.db.models.transaction import Transaction
from pigeon_prestige.db.models.user import User
from pigeon_prestige.services.errors import GameRuleError, NotFoundError


def purchase_food(db: Session, user: User, food_id: int, quantity: int) -> UserFoodInventory:
    """
    Compra comida: resta saldo, suma al inventario y apunta la transacción.
    """
    if quantity < 1:
        raise GameRuleError("La cantidad mínima es 1")

    food = db.get(Food, food_id)
    if not food:
        raise NotFoundError("Comida no encontrada")

    total_cost = food.price * quantity
    if user.balance < total_cost:
        raise GameRuleError("Saldo insuficiente")

    user.balance -= total_cost

    row = db.get(UserFoodInventory, {"user_id": user.id, "food_id": food.id})
    if not row:
        row = UserFoodInventory(user_id=user.id, food_id=food.id, quantity=0)
        db.add(row)
    row.quantity += quantity

    db.add(Transaction(
        user_id=user.id,
        type="food_purchase",
        amount=-total_cost,
        description=f"Purchased {quantity}x {food.name}",
        related_id=food.id,
    ))
    db.commit()
    db.refresh(row)
    return row


def create_food_mix(db: Session, user: User, name: str, mix: dict[int, int]) -> FoodMix:
    if sum(mix.values()) != 100:
        raise GameRuleError("Los porcentajes de la mezcla deben sumar 100")

    known = {fid for (fid,) in db.query(Food.id).filter(Food.id.in_(list(mix))).all()}
    unknown = set(mix) - known
    if unknown:
        raise NotFoundError(f"Comidas desconocidas: {sorted(unknown)}")

    food_mix = FoodMix(
        user_id=user.id,
        name=name,
        mix_json={str(food_id): percent for food_id, percent in mix.items()},
    )
    db.add(food_mix)
    db.commit()
    db.refresh(food_mix)
    return food_mix


def delete_food_mix(db: Session, user: User, food_mix_id: int) -> None:
    """
    Borra la mezcla y quita la asignación a palomas y grupos que la usaban.
    """
    food_mix = get_owned_mix(db, user, food_mix_id)

    db.query(Pigeon).filter(Pigeon.current_food_mix_id == food_mix.id).update(
        {Pigeon.current_food_mix_id: None}
    )
    db.query(PigeonGroup).filter(PigeonGroup.current_food_mix_id == food_mix.id).update(
        {PigeonGroup.current_food_mix_id: None}
    )
    db.query(PigeonFeedHistory).filter(PigeonFeedHistory.food_mix_id == food_mix.id).update(
        {PigeonFeedHistory.food_mix_id: None}
    )
    db.query(GroupFeeding).filter(GroupFeeding.food_mix_id == food_mix.id).delete()
    db.delete(food_mix)
    db.commit()


def get_owned_mix(db: Session, user: User, food_mix_id: int) -> FoodMix:
    food_mix = db.get(FoodMix, food_mix_id)
    if not food_mix or food_mix.user_id != user.id:
        raise NotFoundError("Mezcla no encontrada")
    return food_mix


def assign_mix_to_pigeon(db: Session, user: User, pigeon_id: int, food_mix_id: int) -> Pigeon:
    """La paloma se queda con esta mezcla hasta que se le asigne otra."""
    pigeon = db.get(Pigeon, pigeon_id)
    if not pigeon or pigeon.owner_id != user.id:
        raise NotFoundError("Paloma no encontrada")
    if pigeon.status != PigeonStatus.ACTIVE:
        raise GameRuleError("Solo se puede alimentar a palomas activas")

    food_mix = get_owned_mix(db, user, food_mix_id)
    pigeon.current_food_mix_id = food_mix.id
    db.commit()
    db.refresh(pigeon)
    return pigeon


def assign_mix_to_group(db: Session, user: User, group_id: int, food_mix_id: int) -> PigeonGroup:
    group = db.get(PigeonGroup, group_id)
    if not group or group.owner_id != user.id:
        raise NotFoundError("Grupo no encontrado")

    food_mix = get_owned_mix(db, user, food_mix_id)
    group.current_food_mix_id = food_mix.id
    db.add(GroupFeeding(group_id=group.id, food_mix_id=food_mix.id))
    db.commit()
    db.refresh(group)
    return group
