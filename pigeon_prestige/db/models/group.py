from sqlalchemy import Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from typing import List
from pigeon_prestige.db.session import Base
from datetime import datetime

class PigeonGroup(Base):
    """
    Grupo guardado de palomas de un jugador. Si tiene mezcla asignada,
    el lote diario alimenta a todos sus miembros con ella.
    """
    __tablename__ = "pigeon_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    current_food_mix_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("food_mixes.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relaciones
    owner: Mapped["User"] = relationship("User", back_populates="groups")
    current_food_mix: Mapped["FoodMix"] = relationship("FoodMix")
    members: Mapped[List["PigeonGroupMember"]] = relationship(
        "PigeonGroupMember", back_populates="group", cascade="all, delete-orphan"
    )
    feedings: Mapped[List["GroupFeeding"]] = relationship("GroupFeeding", cascade="all, delete-orphan")


class PigeonGroupMember(Base):
    """
    Tabla intermedia grupo <-> paloma. Una paloma no puede estar dos veces en el mismo grupo.
    """
    __tablename__ = "pigeon_group_members"

    group_id: Mapped[int] = mapped_column(ForeignKey("pigeon_groups.id"), primary_key=True)
    pigeon_id: Mapped[int] = mapped_column(ForeignKey("pigeons.id"), primary_key=True)

    # Relaciones
    group: Mapped["PigeonGroup"] = relationship("PigeonGroup", back_populates="members")
    pigeon: Mapped["Pigeon"] = relationship("Pigeon", back_populates="group_memberships")


class GroupFeeding(Base):
    """
    Registro de cada vez que se asigna una mezcla a un grupo.
    """
    __tablename__ = "group_feedings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey("pigeon_groups.id"), nullable=False)
    food_mix_id: Mapped[int] = mapped_column(Integer, ForeignKey("food_mixes.id"), nullable=False)
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
