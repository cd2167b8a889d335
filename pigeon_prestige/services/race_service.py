import random

import structlog
from sqlalchemy.orm import Session, joinedload

from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.db.models.race import Race
from pigeon_prestige.db.models.race_entry import RaceEntry
from pigeon_prestige.db.models.transaction import Transaction
from pigeon_prestige.db.models.user import User
from pigeon_prestige.schemas.pigeon import PigeonStats
from pigeon_prestige.schemas.race import PigeonRaceResult, RaceConfig, RaceEvent, Weather
from pigeon_prestige.services.errors import ConflictError, GameRuleError, NotFoundError
from pigeon_prestige.services.race_simulation import (
    calculate_standings,
    finish_minute,
    generate_pigeon_race_result,
)

logger = structlog.get_logger()


def race_config_for(race: Race) -> RaceConfig:
    return RaceConfig(
        start_time=race.start_time,
        distance_km=race.distance_km,
        weather=Weather(wind=race.wind or 0.0),
    )


def enter_race(db: Session, user: User, race_id: int, pigeon_id: int) -> RaceEntry:
    """
    Inscribe una paloma del jugador. Cobra la cuota y apunta la transacción.
    Una paloma solo puede correr una carrera por día.
    """
    race = db.get(Race, race_id)
    if not race:
        raise NotFoundError("Carrera no encontrada")
    if race.status != "upcoming":
        raise GameRuleError("La carrera ya no admite inscripciones")

    pigeon = db.get(Pigeon, pigeon_id)
    if not pigeon or pigeon.owner_id != user.id:
        raise NotFoundError("Paloma no encontrada")
    if pigeon.status != PigeonStatus.ACTIVE:
        raise GameRuleError("Solo pueden correr palomas activas")

    existing = (
        db.query(RaceEntry)
        .filter(RaceEntry.race_id == race.id, RaceEntry.pigeon_id == pigeon.id)
        .first()
    )
    if existing:
        raise ConflictError("La paloma ya está inscrita en esta carrera")

    # Otra carrera el mismo día
    same_day = (
        db.query(RaceEntry)
        .join(Race, Race.id == RaceEntry.race_id)
        .filter(RaceEntry.pigeon_id == pigeon.id, Race.id != race.id)
        .all()
    )
    if any(entry.race.start_time.date() == race.start_time.date() for entry in same_day):
        raise ConflictError("La paloma ya participa en una carrera ese día")

    entries_count = db.query(RaceEntry).filter(RaceEntry.race_id == race.id).count()
    if entries_count >= race.max_participants:
        raise GameRuleError("La carrera está completa")

    if user.balance < race.entry_fee:
        raise GameRuleError("Saldo insuficiente")

    user.balance -= race.entry_fee
    db.add(Transaction(
        user_id=user.id,
        type="race_entry",
        amount=-race.entry_fee,
        description="Race entry fee",
        related_id=race.id,
    ))

    entry = RaceEntry(race_id=race.id, pigeon_id=pigeon.id, user_id=user.id)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def run_race(db: Session, race_id: int, rng: random.Random | None = None) -> list[RaceEntry]:
    """
    Simula la carrera para todas las palomas inscritas, guarda el guion de
    eventos en cada inscripción, reparte posiciones y premio y actualiza el
    palmarés de cada paloma.
    """
    race = (
        db.query(Race)
        .options(joinedload(Race.entries).joinedload(RaceEntry.pigeon))
        .filter(Race.id == race_id)
        .first()
    )
    if not race:
        raise NotFoundError("Carrera no encontrada")
    if race.status == "finished":
        raise ConflictError("La carrera ya se ha corrido")

    rng = rng or random.Random()
    config = race_config_for(race)

    arrivals = []
    for entry in race.entries:
        stats = PigeonStats.model_validate(entry.pigeon)
        result = generate_pigeon_race_result(stats, config, rng)

        entry.duration = result.duration
        entry.did_not_finish = result.did_not_finish
        entry.base_speed = result.base_speed
        entry.events = [event.model_dump() for event in result.events]
        entry.stats_snapshot = stats.model_dump(mode="json")
        entry.finish_time = finish_minute(result)

        if entry.finish_time is not None:
            arrivals.append(entry)

    # 🏁 Posiciones: llega antes quien menos minutos tarda
    arrivals.sort(key=lambda e: e.finish_time)
    for position, entry in enumerate(arrivals, start=1):
        entry.finish_position = position

    if arrivals and race.prize_pool > 0:
        winner = arrivals[0]
        winner.prize_won = race.prize_pool
        winner.user.balance += race.prize_pool
        db.add(Transaction(
            user_id=winner.user_id,
            type="race_prize",
            amount=race.prize_pool,
            description=f"Prize for {race.name}",
            related_id=race.id,
        ))

    # Palmarés
    for entry in race.entries:
        pigeon = entry.pigeon
        pigeon.total_races += 1
        if entry.finish_position == 1:
            pigeon.races_won += 1
        else:
            pigeon.races_lost += 1
        if entry.finish_time is not None:
            pigeon.total_distance += race.distance_km
            if pigeon.best_time is None or entry.finish_time < pigeon.best_time:
                pigeon.best_time = entry.finish_time

    race.status = "finished"
    db.commit()

    logger.info(
        "Carrera simulada",
        race_id=race.id,
        entries=len(race.entries),
        finished=len(arrivals),
    )
    return race.entries


def entry_to_result(entry: RaceEntry, race: Race) -> PigeonRaceResult:
    """Reconstruye el resultado guardado en una inscripción ya corrida."""
    return PigeonRaceResult(
        pigeon_id=entry.pigeon_id,
        start_time=race.start_time,
        duration=entry.duration,
        distance_km=race.distance_km,
        base_speed=entry.base_speed,
        events=[RaceEvent(**event) for event in (entry.events or [])],
        stats=PigeonStats(**entry.stats_snapshot),
        did_not_finish=entry.did_not_finish,
    )


def get_race_results(db: Session, race_id: int) -> list[PigeonRaceResult]:
    race = db.get(Race, race_id)
    if not race:
        raise NotFoundError("Carrera no encontrada")
    if race.status != "finished":
        raise GameRuleError("Resultados no disponibles aún")

    return [entry_to_result(entry, race) for entry in race.entries]


def get_race_standings(db: Session, race_id: int, minute: float) -> list[dict]:
    race = db.get(Race, race_id)
    if not race:
        raise NotFoundError("Carrera no encontrada")
    if race.status != "finished":
        raise GameRuleError("Resultados no disponibles aún")

    entries = {entry.pigeon_id: entry for entry in race.entries}
    standings = calculate_standings([entry_to_result(e, race) for e in race.entries], minute)
    for row in standings:
        entry = entries[row["pigeon_id"]]
        row["pigeon_name"] = entry.pigeon.name
        row["owner_id"] = entry.user_id
    return standings
