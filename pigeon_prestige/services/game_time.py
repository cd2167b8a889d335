import random
from datetime import date, datetime, timedelta, timezone

import structlog
from sqlalchemy.orm import Session

from pigeon_prestige.core.config import settings
from pigeon_prestige.db.models.game_time import GameTimeState, GameTimeLog
from pigeon_prestige.services.errors import GameRuleError
from pigeon_prestige.services.feeding import (
    update_group_feedings_for_game_day,
    update_pigeon_feedings_for_game_day,
)

logger = structlog.get_logger()


def get_game_time_state(db: Session) -> GameTimeState:
    """Devuelve la fila de estado, creándola en la fecha inicial si no existe."""
    state = db.query(GameTimeState).order_by(GameTimeState.id.desc()).first()
    if not state:
        state = GameTimeState(current_game_date=settings.game_start_date, update_count=0, is_paused=False)
        db.add(state)
        db.commit()
        db.refresh(state)
    return state


def get_current_game_date(db: Session) -> date:
    return get_game_time_state(db).current_game_date


def set_paused(db: Session, paused: bool) -> GameTimeState:
    state = get_game_time_state(db)
    state.is_paused = paused
    db.commit()
    return state


def advance_game_day(
    db: Session,
    update_type: str = "scheduled",
    rng: random.Random | None = None,
) -> dict:
    """
    Avanza el juego un día y lanza los lotes de alimentación del nuevo día.
    Primero las asignaciones individuales, luego las de grupo.
    """
    state = get_game_time_state(db)
    if state.is_paused:
        raise GameRuleError("El tiempo de juego está en pausa")

    new_date = state.current_game_date + timedelta(days=1)
    state.current_game_date = new_date
    state.update_count += 1
    state.last_update_time = datetime.now(timezone.utc)

    db.add(GameTimeLog(
        game_date=new_date,
        update_time=datetime.now(timezone.utc),
        update_type=update_type,
        description="Avance automático del tiempo de juego" if update_type == "scheduled" else "Avance manual",
    ))
    db.commit()
    logger.info("Día de juego avanzado", game_date=str(new_date), update_type=update_type)

    rng = rng or random.Random()
    individual = update_pigeon_feedings_for_game_day(db, game_date=new_date, rng=rng)
    group = update_group_feedings_for_game_day(db, game_date=new_date, rng=rng)

    return {
        "game_date": new_date,
        "update_count": state.update_count,
        "individual_feeding": individual,
        "group_feeding": group,
    }


def get_game_time_log(db: Session, limit: int = 10) -> list[GameTimeLog]:
    return (
        db.query(GameTimeLog)
        .order_by(GameTimeLog.id.desc())
        .limit(limit)
        .all()
    )
