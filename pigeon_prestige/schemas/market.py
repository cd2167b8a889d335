from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pigeon_prestige.schemas.pigeon import PigeonOut


class ListingCreate(BaseModel):
    pigeon_id: int
    price: float = Field(gt=0)


class ListingOut(BaseModel):
    id: int
    pigeon_id: int
    seller_id: int
    buyer_id: Optional[int] = None
    price: float
    status: str
    created_at: Optional[datetime] = None
    expires_at: datetime
    pigeon: Optional[PigeonOut] = None

    class Config:
        from_attributes = True
