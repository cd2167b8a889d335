from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session
from pigeon_prestige.core.deps import get_db, require_admin
from pigeon_prestige.services import game_time

router = APIRouter(prefix="/admin", tags=["Admin"])


class GameTimeStateOut(BaseModel):
    current_game_date: date
    update_count: int
    is_paused: bool
    last_update_time: Optional[datetime] = None

    class Config:
        from_attributes = True


class GameTimeLogOut(BaseModel):
    id: int
    game_date: date
    update_time: datetime
    update_type: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class PauseRequest(BaseModel):
    paused: bool


@router.get("/game-time", response_model=GameTimeStateOut)
def game_time_state(db: Session = Depends(get_db), admin = Depends(require_admin)):
    return game_time.get_game_time_state(db)

@router.get("/game-time/log", response_model=list[GameTimeLogOut])
def game_time_log(limit: int = 10, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return game_time.get_game_time_log(db, limit=limit)

@router.post("/game-time/pause", response_model=GameTimeStateOut)
def pause_game_time(data: PauseRequest, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return game_time.set_paused(db, data.paused)

@router.post("/game-time/advance")
def advance_game_day(db: Session = Depends(get_db), admin = Depends(require_admin)):
    """Avance manual de un día (lanza los lotes de alimentación)."""
    return game_time.advance_game_day(db, update_type="manual")
