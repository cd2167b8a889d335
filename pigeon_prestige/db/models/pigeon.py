# pigeon_prestige/db/models/pigeon.py
import enum
from datetime import datetime
from typing import List, TYPE_CHECKING

from sqlalchemy import Integer, String, Float, ForeignKey, DateTime, Enum as SqEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from pigeon_prestige.db.session import Base

if TYPE_CHECKING:
    from pigeon_prestige.db.models.user import User
    from pigeon_prestige.db.models.food_mix import FoodMix
    from pigeon_prestige.db.models.group import PigeonGroupMember


class PigeonStatus(str, enum.Enum):
    ACTIVE = "active"
    INJURED = "injured"
    RETIRED = "retired"
    DECEASED = "deceased"


# Stats visibles y ocultas (rango 40-100, con dos decimales)
STAT_FIELDS = (
    "speed", "endurance", "sky_iq", "aerodynamics", "vision", "wing_power",
    "flapacity", "vanity", "strength", "aggression", "landing", "loyalty",
    "health", "happiness", "fertility", "disease_resistance",
    "breeding_quality", "adaptability", "recovery_rate", "laser_focus",
    "morale", "food",
)


class Pigeon(Base):
    __tablename__ = "pigeons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    gender: Mapped[str] = mapped_column(String, nullable=False)  # "male" / "female"
    age_years: Mapped[int] = mapped_column(Integer, default=0)
    age_months: Mapped[int] = mapped_column(Integer, default=0)
    age_days: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[PigeonStatus] = mapped_column(SqEnum(PigeonStatus), default=PigeonStatus.ACTIVE)
    picture_number: Mapped[int] = mapped_column(Integer, default=1)

    # --- STATS ---
    speed: Mapped[float] = mapped_column(Float, default=50.0)
    endurance: Mapped[float] = mapped_column(Float, default=50.0)
    sky_iq: Mapped[float] = mapped_column(Float, default=50.0)
    aerodynamics: Mapped[float] = mapped_column(Float, default=50.0)
    vision: Mapped[float] = mapped_column(Float, default=50.0)
    wing_power: Mapped[float] = mapped_column(Float, default=50.0)
    flapacity: Mapped[float] = mapped_column(Float, default=50.0)
    vanity: Mapped[float] = mapped_column(Float, default=50.0)
    strength: Mapped[float] = mapped_column(Float, default=50.0)
    aggression: Mapped[float] = mapped_column(Float, default=50.0)
    landing: Mapped[float] = mapped_column(Float, default=50.0)
    loyalty: Mapped[float] = mapped_column(Float, default=50.0)
    health: Mapped[float] = mapped_column(Float, default=100.0)
    happiness: Mapped[float] = mapped_column(Float, default=50.0)
    fertility: Mapped[float] = mapped_column(Float, default=50.0)
    disease_resistance: Mapped[float] = mapped_column(Float, default=50.0)

    # --- STATS OCULTAS ---
    breeding_quality: Mapped[float] = mapped_column(Float, default=50.0)
    adaptability: Mapped[float] = mapped_column(Float, default=50.0)
    recovery_rate: Mapped[float] = mapped_column(Float, default=50.0)
    laser_focus: Mapped[float] = mapped_column(Float, default=50.0)
    morale: Mapped[float] = mapped_column(Float, default=50.0)
    food: Mapped[float] = mapped_column(Float, default=50.0)

    # --- PALMARÉS ---
    races_won: Mapped[int] = mapped_column(Integer, default=0)
    races_lost: Mapped[int] = mapped_column(Integer, default=0)
    total_races: Mapped[int] = mapped_column(Integer, default=0)
    best_time: Mapped[float | None] = mapped_column(Float, nullable=True)  # minutos
    total_distance: Mapped[float] = mapped_column(Float, default=0.0)      # km

    # --- ALIMENTACIÓN ---
    current_food_mix_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("food_mixes.id"), nullable=True)
    food_shortage_streak: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relaciones
    owner: Mapped["User"] = relationship("User", back_populates="pigeons")
    current_food_mix: Mapped["FoodMix"] = relationship("FoodMix")
    group_memberships: Mapped[List["PigeonGroupMember"]] = relationship(
        "PigeonGroupMember", back_populates="pigeon", cascade="all, delete-orphan"
    )
