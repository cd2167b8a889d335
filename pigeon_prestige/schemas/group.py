from pydantic import BaseModel
from typing import Optional


class GroupCreate(BaseModel):
    name: str
    description: Optional[str] = None


class GroupOut(BaseModel):
    id: int
    owner_id: int
    name: str
    description: Optional[str] = None
    current_food_mix_id: Optional[int] = None
    size: int = 0
