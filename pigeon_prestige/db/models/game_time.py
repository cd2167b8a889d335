from sqlalchemy import Integer, String, Boolean, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from pigeon_prestige.db.session import Base
from datetime import date, datetime, timezone

class GameTimeState(Base):
    """
    Fila única con la fecha actual del juego.
    """
    __tablename__ = "game_time_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    current_game_date: Mapped[date] = mapped_column(Date, nullable=False)
    update_count: Mapped[int] = mapped_column(Integer, default=0)
    is_paused: Mapped[bool] = mapped_column(Boolean, default=False)
    last_update_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class GameTimeLog(Base):
    __tablename__ = "game_time_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_date: Mapped[date] = mapped_column(Date, nullable=False)
    update_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    update_type: Mapped[str] = mapped_column(String, default="scheduled")  # scheduled / manual
    description: Mapped[str | None] = mapped_column(String, nullable=True)
