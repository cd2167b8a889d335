from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pigeon_prestige.core.deps import get_current_user, get_db
from pigeon_prestige.schemas.market import ListingCreate, ListingOut
from pigeon_prestige.schemas.pigeon import PigeonOut
from pigeon_prestige.services import market_service

router = APIRouter(prefix="/market", tags=["Market"])

@router.get("/", response_model=list[ListingOut])
def active_listings(db: Session = Depends(get_db)):
    return market_service.list_active_listings(db)

@router.post("/", response_model=ListingOut, status_code=201)
def sell_pigeon(data: ListingCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return market_service.list_pigeon_for_sale(db, current_user, data.pigeon_id, data.price)

@router.post("/{listing_id}/buy", response_model=PigeonOut)
def buy_pigeon(listing_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return market_service.purchase_pigeon(db, current_user, listing_id)

@router.delete("/{listing_id}", response_model=ListingOut)
def cancel_listing(listing_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return market_service.cancel_listing(db, current_user, listing_id)
