from sqlalchemy import String, Integer, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from typing import List, TYPE_CHECKING
from pigeon_prestige.db.session import Base
from datetime import datetime

if TYPE_CHECKING:
    from pigeon_prestige.db.models.pigeon import Pigeon
    from pigeon_prestige.db.models.food import UserFoodInventory
    from pigeon_prestige.db.models.food_mix import FoodMix
    from pigeon_prestige.db.models.group import PigeonGroup

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, default="user")

    # Monedas del juego (cuotas de inscripción, compra de comida, premios)
    balance: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    pigeons: Mapped[List["Pigeon"]] = relationship("Pigeon", back_populates="owner")
    inventory: Mapped[List["UserFoodInventory"]] = relationship("UserFoodInventory", back_populates="user")
    food_mixes: Mapped[List["FoodMix"]] = relationship("FoodMix", back_populates="user")
    groups: Mapped[List["PigeonGroup"]] = relationship("PigeonGroup", back_populates="owner")
