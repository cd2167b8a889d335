from sqlalchemy import Integer, String, ForeignKey, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from pigeon_prestige.db.session import Base
from datetime import datetime

class FoodMix(Base):
    __tablename__ = "food_mixes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)

    # Ej: {"1": 50, "2": 30, "3": 20} -> {food_id: porcentaje}
    mix_json: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    user: Mapped["User"] = relationship("User", back_populates="food_mixes")

    @property
    def allocations(self) -> dict[int, int]:
        """Mezcla con las claves convertidas a id de comida."""
        return {int(food_id): int(percent) for food_id, percent in (self.mix_json or {}).items()}
