from sqlalchemy import Integer, String, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from pigeon_prestige.db.session import Base

class Food(Base):
    """
    Tipo de comida del catálogo (maíz, guisantes, trigo...).
    """
    __tablename__ = "foods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    best_for: Mapped[str | None] = mapped_column(String, nullable=True)


class UserFoodInventory(Base):
    """
    Existencias de comida de un jugador. Clave compuesta (usuario, comida).
    """
    __tablename__ = "user_food_inventory"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    food_id: Mapped[int] = mapped_column(ForeignKey("foods.id"), primary_key=True)
    quantity: Mapped[int] = mapped_column(Integer, default=0)

    # Relaciones
    user: Mapped["User"] = relationship("User", back_populates="inventory")
    food: Mapped["Food"] = relationship("Food")
