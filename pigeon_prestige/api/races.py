from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.orm import Session
from pigeon_prestige.core.deps import get_current_user, get_db, require_admin
from pigeon_prestige.db.models.race import Race
from pigeon_prestige.db.models.race_entry import RaceEntry
from pigeon_prestige.schemas.race import RaceCreate, RaceOut, RaceEntryOut, StandingOut, PigeonRaceResult
from pigeon_prestige.services import race_service

router = APIRouter(prefix="/races", tags=["Races"])

@router.get("/", response_model=list[RaceOut])
def list_races(status: str | None = None, db: Session = Depends(get_db)):
    query = db.query(Race)
    if status:
        query = query.filter(Race.status == status)
    return query.order_by(Race.start_time).all()

@router.post("/", response_model=RaceOut, status_code=201)
def create_race(data: RaceCreate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    race = Race(**data.model_dump())
    db.add(race)
    db.commit()
    db.refresh(race)
    return race

@router.get("/{race_id}", response_model=RaceOut)
def get_race(race_id: int, db: Session = Depends(get_db)):
    race = db.get(Race, race_id)
    if not race:
        raise HTTPException(status_code=404, detail="Carrera no encontrada")
    return race

@router.get("/{race_id}/entries", response_model=list[RaceEntryOut])
def race_entries(race_id: int, db: Session = Depends(get_db)):
    return (
        db.query(RaceEntry)
        .filter(RaceEntry.race_id == race_id)
        .order_by(RaceEntry.finish_position.is_(None), RaceEntry.finish_position, RaceEntry.id)
        .all()
    )

@router.post("/{race_id}/enter/{pigeon_id}", response_model=RaceEntryOut, status_code=201)
def enter_race(race_id: int, pigeon_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return race_service.enter_race(db, current_user, race_id, pigeon_id)

@router.post("/{race_id}/run", response_model=list[RaceEntryOut])
def run_race(race_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    entries = race_service.run_race(db, race_id)
    return sorted(entries, key=lambda e: (e.finish_position is None, e.finish_position or 0, e.id))

@router.get("/{race_id}/results", response_model=list[PigeonRaceResult])
def race_results(race_id: int, db: Session = Depends(get_db)):
    """Guion completo de cada paloma (eventos y stats) para la repetición."""
    return race_service.get_race_results(db, race_id)

@router.get("/{race_id}/standings", response_model=list[StandingOut])
def race_standings(race_id: int, minute: float = Query(ge=0), db: Session = Depends(get_db)):
    return race_service.get_race_standings(db, race_id, minute)
