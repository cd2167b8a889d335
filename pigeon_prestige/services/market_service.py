"""
Mercado de palomas entre jugadores.
"""
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import or_
from sqlalchemy.orm import Session

from pigeon_prestige.core.config import settings
from pigeon_prestige.db.models.breeding_pair import BreedingPair
from pigeon_prestige.db.models.group import PigeonGroupMember
from pigeon_prestige.db.models.market_listing import MarketListing
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.db.models.race import Race
from pigeon_prestige.db.models.race_entry import RaceEntry
from pigeon_prestige.db.models.transaction import Transaction
from pigeon_prestige.db.models.user import User
from pigeon_prestige.services.errors import ConflictError, GameRuleError, NotFoundError

logger = structlog.get_logger()


def _active_listings(db: Session):
    now = datetime.now(timezone.utc)
    return db.query(MarketListing).filter(
        MarketListing.status == "active",
        MarketListing.expires_at > now,
    )


def list_active_listings(db: Session) -> list[MarketListing]:
    return _active_listings(db).order_by(MarketListing.id.desc()).all()


def list_pigeon_for_sale(db: Session, user: User, pigeon_id: int, price: float) -> MarketListing:
    if price <= 0:
        raise GameRuleError("El precio debe ser positivo")

    pigeon = db.get(Pigeon, pigeon_id)
    if not pigeon or pigeon.owner_id != user.id:
        raise NotFoundError("Paloma no encontrada")
    if pigeon.status != PigeonStatus.ACTIVE:
        raise GameRuleError("Solo se pueden vender palomas activas")

    if _active_listings(db).filter(MarketListing.pigeon_id == pigeon.id).first():
        raise ConflictError("La paloma ya está a la venta")

    pending_race = (
        db.query(RaceEntry.id)
        .join(Race, Race.id == RaceEntry.race_id)
        .filter(RaceEntry.pigeon_id == pigeon.id, Race.status == "upcoming")
        .first()
    )
    if pending_race:
        raise GameRuleError("La paloma está inscrita en una carrera pendiente")

    listing = MarketListing(
        pigeon_id=pigeon.id,
        seller_id=user.id,
        price=price,
        expires_at=datetime.now(timezone.utc) + timedelta(days=settings.market_listing_days),
    )
    db.add(listing)
    db.commit()
    db.refresh(listing)
    return listing


def cancel_listing(db: Session, user: User, listing_id: int) -> MarketListing:
    listing = db.get(MarketListing, listing_id)
    if not listing or listing.seller_id != user.id:
        raise NotFoundError("Anuncio no encontrado")
    if listing.status != "active":
        raise ConflictError("El anuncio ya no está activo")

    listing.status = "cancelled"
    db.commit()
    db.refresh(listing)
    return listing


def purchase_pigeon(db: Session, buyer: User, listing_id: int) -> Pigeon:
    """
    Compra la paloma del anuncio: cobra al comprador, paga al vendedor,
    cambia el dueño y apunta las dos transacciones.
    """
    listing = _active_listings(db).filter(MarketListing.id == listing_id).first()
    if not listing:
        raise NotFoundError("Anuncio no encontrado o ya no está activo")
    if listing.seller_id == buyer.id:
        raise GameRuleError("No puedes comprar tu propia paloma")
    if buyer.balance < listing.price:
        raise GameRuleError("Saldo insuficiente")

    pigeon = listing.pigeon
    seller = listing.seller

    # La paloma deja atrás todo lo del vendedor: mezcla, grupos y pareja
    pigeon.owner_id = buyer.id
    pigeon.current_food_mix_id = None
    db.query(PigeonGroupMember).filter(PigeonGroupMember.pigeon_id == pigeon.id).delete()
    db.query(BreedingPair).filter(
        BreedingPair.status == "active",
        or_(BreedingPair.male_pigeon_id == pigeon.id, BreedingPair.female_pigeon_id == pigeon.id),
    ).update({BreedingPair.status: "ended", BreedingPair.end_date: datetime.now(timezone.utc)})

    buyer.balance -= listing.price
    seller.balance += listing.price
    listing.status = "sold"
    listing.buyer_id = buyer.id

    db.add_all([
        Transaction(
            user_id=buyer.id,
            type="market_purchase",
            amount=-listing.price,
            description=f"Purchased pigeon: {pigeon.name}",
            related_id=pigeon.id,
        ),
        Transaction(
            user_id=seller.id,
            type="market_sale",
            amount=listing.price,
            description=f"Sold pigeon: {pigeon.name}",
            related_id=pigeon.id,
        ),
    ])
    db.commit()
    db.refresh(pigeon)

    logger.info("Paloma vendida", listing_id=listing.id, pigeon_id=pigeon.id, price=listing.price)
    return pigeon
