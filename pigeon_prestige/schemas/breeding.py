from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from pigeon_prestige.schemas.pigeon import PigeonOut


class BreedingPairCreate(BaseModel):
    male_pigeon_id: int
    female_pigeon_id: int


class BreedingPairOut(BaseModel):
    id: int
    owner_id: int
    male_pigeon_id: int
    female_pigeon_id: int
    status: str
    offspring_produced: int
    successful_breedings: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class BreedingResultOut(BaseModel):
    success: bool
    offspring: Optional[PigeonOut] = None
