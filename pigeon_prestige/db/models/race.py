# pigeon_prestige/db/models/race.py
from sqlalchemy import Integer, String, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from pigeon_prestige.db.session import Base
from datetime import datetime

class Race(Base):
    __tablename__ = "races"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    distance_km: Mapped[float] = mapped_column(Float, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    wind: Mapped[float] = mapped_column(Float, default=0.0)  # km/h
    entry_fee: Mapped[float] = mapped_column(Float, default=0.0)
    prize_pool: Mapped[float] = mapped_column(Float, default=0.0)
    max_participants: Mapped[int] = mapped_column(Integer, default=20)
    status: Mapped[str] = mapped_column(String, default="upcoming")  # upcoming / finished

    # Relaciones
    entries: Mapped[list["RaceEntry"]] = relationship("RaceEntry", back_populates="race", cascade="all, delete-orphan")
