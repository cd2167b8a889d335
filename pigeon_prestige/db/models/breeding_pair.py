from sqlalchemy import Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from pigeon_prestige.db.session import Base
from datetime import datetime

class BreedingPair(Base):
    """
    Pareja de cría (un macho y una hembra del mismo jugador).
    """
    __tablename__ = "breeding_pairs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    male_pigeon_id: Mapped[int] = mapped_column(Integer, ForeignKey("pigeons.id"), nullable=False)
    female_pigeon_id: Mapped[int] = mapped_column(Integer, ForeignKey("pigeons.id"), nullable=False)
    status: Mapped[str] = mapped_column(String, default="active")  # active / ended
    offspring_produced: Mapped[int] = mapped_column(Integer, default=0)
    successful_breedings: Mapped[int] = mapped_column(Integer, default=0)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relaciones
    male_pigeon: Mapped["Pigeon"] = relationship("Pigeon", foreign_keys=[male_pigeon_id])
    female_pigeon: Mapped["Pigeon"] = relationship("Pigeon", foreign_keys=[female_pigeon_id])
