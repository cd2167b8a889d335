from pydantic import BaseModel
from typing import Optional

from pigeon_prestige.db.models.pigeon import PigeonStatus


class PigeonStats(BaseModel):
    """
    Ficha de stats que consume la simulación. Es una copia inmutable:
    la simulación nunca toca la paloma original.
    """
    id: int
    owner_id: int
    status: PigeonStatus = PigeonStatus.ACTIVE

    speed: float
    endurance: float
    sky_iq: float
    aerodynamics: float
    vision: float = 50.0
    wing_power: float = 50.0
    flapacity: float = 50.0
    vanity: float = 50.0
    strength: float = 50.0
    aggression: float = 50.0
    landing: float = 50.0
    loyalty: float = 50.0
    health: float = 100.0
    happiness: float = 50.0
    fertility: float = 50.0
    disease_resistance: float = 50.0
    breeding_quality: float = 50.0
    adaptability: float = 50.0
    recovery_rate: float = 50.0
    laser_focus: float = 50.0
    morale: float = 50.0
    food: float = 50.0

    class Config:
        from_attributes = True
        frozen = True


class PigeonOut(BaseModel):
    id: int
    owner_id: int
    name: str
    gender: str
    status: PigeonStatus
    picture_number: int
    speed: float
    endurance: float
    sky_iq: float
    aerodynamics: float
    health: float
    morale: float
    races_won: int
    races_lost: int
    total_races: int
    best_time: Optional[float] = None
    total_distance: float
    current_food_mix_id: Optional[int] = None
    food_shortage_streak: int

    class Config:
        from_attributes = True


class AssignMix(BaseModel):
    food_mix_id: int
