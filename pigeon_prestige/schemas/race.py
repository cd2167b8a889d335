"""
Tipos de la simulación de carreras: configuración, eventos y resultado.
Los resultados se crean una vez por (paloma, carrera) y no se modifican.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from pigeon_prestige.schemas.pigeon import PigeonStats

EventEffect = Literal["boost", "slowdown", "lost", "recovery"]


class Weather(BaseModel):
    wind: float = 0.0  # km/h

    class Config:
        frozen = True


class RaceConfig(BaseModel):
    start_time: datetime
    distance_km: float = Field(gt=0)
    weather: Weather = Weather()

    class Config:
        frozen = True


class RaceEvent(BaseModel):
    t: int            # minutos desde la salida
    effect: EventEffect
    mod: float        # multiplicador de velocidad
    reason: str

    class Config:
        frozen = True


class PigeonRaceResult(BaseModel):
    pigeon_id: int
    start_time: datetime
    duration: Optional[int]  # None = no terminó
    distance_km: float
    base_speed: float        # km/h
    events: list[RaceEvent]
    stats: PigeonStats
    did_not_finish: bool = False

    class Config:
        frozen = True


# Esquemas de la API
class RaceCreate(BaseModel):
    name: str
    distance_km: float = Field(gt=0)
    start_time: datetime
    wind: float = Field(default=0.0, ge=0)
    entry_fee: float = Field(default=0.0, ge=0)
    prize_pool: float = Field(default=0.0, ge=0)
    max_participants: int = Field(default=20, gt=0)


class RaceOut(BaseModel):
    id: int
    name: str
    distance_km: float
    start_time: datetime
    wind: float
    entry_fee: float
    prize_pool: float
    max_participants: int
    status: str

    class Config:
        from_attributes = True


class RaceEntryOut(BaseModel):
    id: int
    race_id: int
    pigeon_id: int
    user_id: int
    finish_position: Optional[int] = None
    finish_time: Optional[float] = None
    did_not_finish: bool = False
    prize_won: float = 0.0

    class Config:
        from_attributes = True


class StandingOut(BaseModel):
    pigeon_id: int
    pigeon_name: str
    owner_id: int
    distance_km: float
    distance_left: float
    finished: bool
    did_not_finish: bool
