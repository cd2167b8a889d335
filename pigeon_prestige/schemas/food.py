from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional


class FoodOut(BaseModel):
    id: int
    name: str
    price: float
    description: Optional[str] = None
    best_for: Optional[str] = None

    class Config:
        from_attributes = True


class InventoryOut(BaseModel):
    food_id: int
    quantity: int

    class Config:
        from_attributes = True


class FoodPurchase(BaseModel):
    food_id: int
    quantity: int = Field(ge=1)


class FoodMixCreate(BaseModel):
    name: str
    mix: dict[int, int]  # {food_id: porcentaje}

    @field_validator("mix")
    @classmethod
    def check_percentages(cls, mix: dict[int, int]) -> dict[int, int]:
        if any(percent < 0 for percent in mix.values()):
            raise ValueError("Los porcentajes no pueden ser negativos")
        if sum(mix.values()) != 100:
            raise ValueError("Los porcentajes de la mezcla deben sumar 100")
        return mix


class FoodMixOut(BaseModel):
    id: int
    user_id: int
    name: str
    mix_json: dict[str, int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FeedHistoryOut(BaseModel):
    id: int
    pigeon_id: int
    food_mix_id: Optional[int] = None
    group_id: Optional[int] = None
    game_date: date
    applied_at: Optional[datetime] = None
    food_shortage: bool

    class Config:
        from_attributes = True
