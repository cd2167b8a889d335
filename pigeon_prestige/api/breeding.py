from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pigeon_prestige.core.deps import get_current_user, get_db
from pigeon_prestige.db.models.breeding_pair import BreedingPair
from pigeon_prestige.schemas.breeding import BreedingPairCreate, BreedingPairOut, BreedingResultOut
from pigeon_prestige.services import breeding_service

router = APIRouter(prefix="/breeding", tags=["Breeding"])

@router.get("/pairs", response_model=list[BreedingPairOut])
def my_pairs(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return (
        db.query(BreedingPair)
        .filter(BreedingPair.owner_id == current_user.id, BreedingPair.status == "active")
        .order_by(BreedingPair.id.desc())
        .all()
    )

@router.post("/pairs", response_model=BreedingPairOut, status_code=201)
def create_pair(data: BreedingPairCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return breeding_service.create_breeding_pair(db, current_user, data.male_pigeon_id, data.female_pigeon_id)

@router.post("/pairs/{pair_id}/breed", response_model=BreedingResultOut)
def breed(pair_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return breeding_service.breed(db, current_user, pair_id)

@router.delete("/pairs/{pair_id}", response_model=BreedingPairOut)
def end_pair(pair_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return breeding_service.end_breeding_pair(db, current_user, pair_id)
