"""
Cría de palomas.

Una pareja (macho y hembra del mismo jugador) intenta criar. La probabilidad
de éxito sale de la fertilidad y la calidad de cría de los padres. Cada stat
visible del pichón se hereda del mejor progenitor (o del peor) con una
variación de ±10%.
"""
import math
import random
from datetime import datetime, timezone

import structlog
from sqlalchemy import or_
from sqlalchemy.orm import Session

from pigeon_prestige.core.config import settings
from pigeon_prestige.db.models.breeding_pair import BreedingPair
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.db.models.user import User
from pigeon_prestige.services.errors import ConflictError, GameRuleError, NotFoundError

logger = structlog.get_logger()

# Las stats ocultas del pichón se quedan con el valor por defecto
INHERITED_STATS = (
    "speed", "endurance", "sky_iq", "aerodynamics", "vision", "wing_power",
    "flapacity", "vanity", "strength", "aggression", "landing", "loyalty",
    "health", "happiness", "fertility", "disease_resistance",
)


def breeding_success_chance(male, female) -> float:
    return (
        male.fertility * 0.3
        + female.fertility * 0.3
        + male.breeding_quality * 0.2
        + female.breeding_quality * 0.2
    ) / 100


def inherit_stat(male_value: float, female_value: float, rng: random.Random) -> int:
    better, worse = max(male_value, female_value), min(male_value, female_value)
    inherited = better if rng.random() < settings.breeding_better_parent_chance else worse
    variation = 0.9 + rng.random() * 0.2
    return max(1, min(100, math.floor(inherited * variation)))


def offspring_stats(male, female, rng: random.Random) -> dict[str, int]:
    return {stat: inherit_stat(getattr(male, stat), getattr(female, stat), rng) for stat in INHERITED_STATS}


def offspring_name(male_name: str, female_name: str, rng: random.Random) -> str:
    """Nombre del padre o de la madre y apellido de uno de los dos."""
    male_parts = male_name.split()
    female_parts = female_name.split()
    first = male_parts[0] if rng.random() > 0.5 else female_parts[0]
    last = male_parts[-1] if rng.random() > 0.5 else female_parts[-1]
    return f"{first} {last}"


def _in_active_pair(db: Session, pigeon_id: int) -> bool:
    return (
        db.query(BreedingPair.id)
        .filter(
            BreedingPair.status == "active",
            or_(BreedingPair.male_pigeon_id == pigeon_id, BreedingPair.female_pigeon_id == pigeon_id),
        )
        .first()
        is not None
    )


def create_breeding_pair(db: Session, user: User, male_pigeon_id: int, female_pigeon_id: int) -> BreedingPair:
    male = db.get(Pigeon, male_pigeon_id)
    female = db.get(Pigeon, female_pigeon_id)
    if not male or not female or male.owner_id != user.id or female.owner_id != user.id:
        raise NotFoundError("Las dos palomas deben ser tuyas")
    if male.gender != "male" or female.gender != "female":
        raise GameRuleError("Hay que elegir un macho y una hembra")
    if male.status != PigeonStatus.ACTIVE or female.status != PigeonStatus.ACTIVE:
        raise GameRuleError("Solo pueden criar palomas activas")
    if _in_active_pair(db, male.id) or _in_active_pair(db, female.id):
        raise ConflictError("Alguna de las palomas ya tiene pareja")

    pair = BreedingPair(owner_id=user.id, male_pigeon_id=male.id, female_pigeon_id=female.id)
    db.add(pair)
    db.commit()
    db.refresh(pair)
    return pair


def get_owned_pair(db: Session, user: User, pair_id: int) -> BreedingPair:
    pair = db.get(BreedingPair, pair_id)
    if not pair or pair.owner_id != user.id:
        raise NotFoundError("Pareja no encontrada")
    return pair


def end_breeding_pair(db: Session, user: User, pair_id: int) -> BreedingPair:
    pair = get_owned_pair(db, user, pair_id)
    if pair.status != "active":
        raise ConflictError("La pareja ya estaba separada")
    pair.status = "ended"
    pair.end_date = datetime.now(timezone.utc)
    db.commit()
    db.refresh(pair)
    return pair


def breed(db: Session, user: User, pair_id: int, rng: random.Random | None = None) -> dict:
    """
    Un intento de cría. Devuelve {"success": bool, "offspring": Pigeon | None}.
    """
    pair = get_owned_pair(db, user, pair_id)
    if pair.status != "active":
        raise GameRuleError("La pareja ya no está activa")

    rng = rng or random.Random()
    male, female = pair.male_pigeon, pair.female_pigeon

    if rng.random() >= breeding_success_chance(male, female):
        logger.info("Cría sin éxito", pair_id=pair.id)
        return {"success": False, "offspring": None}

    stats = offspring_stats(male, female, rng)
    name = offspring_name(male.name, female.name, rng)
    gender = "male" if rng.random() > 0.5 else "female"

    offspring = Pigeon(
        owner_id=pair.owner_id,
        name=name,
        gender=gender,
        age_years=0,
        age_months=0,
        age_days=0,
        status=PigeonStatus.ACTIVE,
        picture_number=rng.randint(1, 50) if gender == "male" else rng.randint(51, 100),
        food_shortage_streak=0,
        **stats,
    )
    db.add(offspring)
    pair.offspring_produced += 1
    pair.successful_breedings += 1
    db.commit()
    db.refresh(offspring)

    logger.info("Nuevo pichón", pair_id=pair.id, pigeon_id=offspring.id)
    return {"success": True, "offspring": offspring}
