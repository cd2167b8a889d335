from sqlalchemy import Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from pigeon_prestige.db.session import Base
from datetime import datetime

class MarketListing(Base):
    """
    Paloma puesta a la venta en el mercado. Caduca en expires_at.
    """
    __tablename__ = "market_listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    pigeon_id: Mapped[int] = mapped_column(Integer, ForeignKey("pigeons.id"), nullable=False, index=True)
    seller_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    buyer_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String, default="active")  # active / sold / cancelled
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relaciones
    pigeon: Mapped["Pigeon"] = relationship("Pigeon")
    seller: Mapped["User"] = relationship("User", foreign_keys=[seller_id])
