from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from pigeon_prestige.core.deps import get_current_user, get_db
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.db.models.feed_history import PigeonFeedHistory
from pigeon_prestige.schemas.pigeon import PigeonOut, AssignMix
from pigeon_prestige.schemas.food import FeedHistoryOut
from pigeon_prestige.services.food_service import assign_mix_to_pigeon

router = APIRouter(prefix="/pigeons", tags=["Pigeons"])

def get_owned_pigeon(db: Session, pigeon_id: int, user) -> Pigeon:
    pigeon = db.get(Pigeon, pigeon_id)
    if not pigeon or pigeon.owner_id != user.id:
        raise HTTPException(status_code=404, detail="Paloma no encontrada")
    return pigeon

@router.get("/", response_model=list[PigeonOut])
def list_my_pigeons(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return (
        db.query(Pigeon)
        .filter(Pigeon.owner_id == current_user.id)
        .order_by(Pigeon.id)
        .all()
    )

@router.get("/shortages", response_model=list[PigeonOut])
def pigeons_with_food_shortage(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    """Palomas activas del jugador con racha de escasez abierta."""
    return (
        db.query(Pigeon)
        .filter(
            Pigeon.owner_id == current_user.id,
            Pigeon.status == PigeonStatus.ACTIVE,
            Pigeon.food_shortage_streak > 0,
        )
        .order_by(Pigeon.food_shortage_streak.desc())
        .all()
    )

@router.get("/{pigeon_id}", response_model=PigeonOut)
def get_pigeon(pigeon_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return get_owned_pigeon(db, pigeon_id, current_user)

@router.put("/{pigeon_id}/mix", response_model=PigeonOut)
def assign_mix(
    pigeon_id: int,
    data: AssignMix,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return assign_mix_to_pigeon(db, current_user, pigeon_id, data.food_mix_id)

@router.delete("/{pigeon_id}/mix", response_model=PigeonOut)
def clear_mix(pigeon_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    pigeon = get_owned_pigeon(db, pigeon_id, current_user)
    pigeon.current_food_mix_id = None
    db.commit()
    db.refresh(pigeon)
    return pigeon

@router.get("/{pigeon_id}/feed-history", response_model=list[FeedHistoryOut])
def feed_history(pigeon_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    get_owned_pigeon(db, pigeon_id, current_user)
    return (
        db.query(PigeonFeedHistory)
        .filter(PigeonFeedHistory.pigeon_id == pigeon_id)
        .order_by(PigeonFeedHistory.game_date.desc(), PigeonFeedHistory.id.desc())
        .all()
    )
