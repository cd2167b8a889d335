# pigeon_prestige/db/models/feed_history.py
from sqlalchemy import Integer, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from pigeon_prestige.db.session import Base
from datetime import date, datetime

class PigeonFeedHistory(Base):
    """
    Libro de registro de intentos de alimentación (con o sin escasez).
    Solo se inserta, nunca se modifica ni se borra.
    """
    __tablename__ = "pigeon_feed_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    pigeon_id: Mapped[int] = mapped_column(Integer, ForeignKey("pigeons.id"), nullable=False, index=True)
    food_mix_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("food_mixes.id"), nullable=True)
    group_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("pigeon_groups.id"), nullable=True)
    game_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    food_shortage: Mapped[bool] = mapped_column(Boolean, default=False)

    pigeon: Mapped["Pigeon"] = relationship("Pigeon")
