import random

from sqlalchemy.orm import Session

from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus, STAT_FIELDS
from pigeon_prestige.db.models.user import User

PIGEON_NAMES = [
    "Rayo", "Centella", "Brisa", "Cometa", "Tornado", "Saeta", "Nube", "Trueno",
    "Flecha", "Aurora", "Halcón", "Pluma", "Ciclón", "Estrella", "Lucero", "Bala",
]


def random_stat(rng: random.Random) -> float:
    """Stat aleatoria en [40, 100] con dos decimales."""
    return round(rng.uniform(40, 100), 2)


def create_starting_pigeons(
    db: Session,
    user: User,
    count: int,
    rng: random.Random | None = None,
) -> list[Pigeon]:
    """
    Crea el palomar inicial de un jugador nuevo. Las fotos 1-50 son de
    machos y 51-100 de hembras.
    """
    rng = rng or random.Random()
    pigeons = []

    for _ in range(count):
        gender = rng.choice(["male", "female"])
        stats = {field: random_stat(rng) for field in STAT_FIELDS}
        stats["health"] = 100.0

        pigeon = Pigeon(
            owner_id=user.id,
            name=rng.choice(PIGEON_NAMES),
            gender=gender,
            age_years=rng.randint(1, 3),
            age_months=rng.randint(0, 11),
            age_days=rng.randint(0, 29),
            status=PigeonStatus.ACTIVE,
            picture_number=rng.randint(1, 50) if gender == "male" else rng.randint(51, 100),
            food_shortage_streak=0,
            **stats,
        )
        db.add(pigeon)
        pigeons.append(pigeon)

    db.commit()
    return pigeons
