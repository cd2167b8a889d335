# pigeon_prestige/db/models/race_entry.py
from sqlalchemy import Integer, Float, Boolean, ForeignKey, UniqueConstraint, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from pigeon_prestige.db.session import Base

class RaceEntry(Base):
    __tablename__ = "race_entries"
    __table_args__ = (
        # Una paloma solo puede inscribirse una vez en cada carrera
        UniqueConstraint("race_id", "pigeon_id", name="uq_race_pigeon"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    race_id: Mapped[int] = mapped_column(Integer, ForeignKey("races.id"), nullable=False)
    pigeon_id: Mapped[int] = mapped_column(Integer, ForeignKey("pigeons.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    # Se rellenan al correr la carrera
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)        # minutos previstos (null = DNF)
    finish_time: Mapped[float | None] = mapped_column(Float, nullable=True)     # minutos reales tras eventos
    finish_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    did_not_finish: Mapped[bool] = mapped_column(Boolean, default=False)
    base_speed: Mapped[float | None] = mapped_column(Float, nullable=True)
    events: Mapped[list | None] = mapped_column(JSON, nullable=True)
    stats_snapshot: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    prize_won: Mapped[float] = mapped_column(Float, default=0.0)

    # Relaciones
    race: Mapped["Race"] = relationship("Race", back_populates="entries")
    pigeon: Mapped["Pigeon"] = relationship("Pigeon")
    user: Mapped["User"] = relationship("User")
