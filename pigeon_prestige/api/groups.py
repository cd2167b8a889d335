from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session, joinedload
from pigeon_prestige.core.deps import get_current_user, get_db
from pigeon_prestige.db.models.group import PigeonGroup, PigeonGroupMember
from pigeon_prestige.db.models.pigeon import Pigeon
from pigeon_prestige.db.models.feed_history import PigeonFeedHistory
from pigeon_prestige.schemas.group import GroupCreate, GroupOut
from pigeon_prestige.schemas.pigeon import AssignMix, PigeonOut
from pigeon_prestige.services.food_service import assign_mix_to_group

router = APIRouter(prefix="/groups", tags=["Pigeon Groups"])

def group_out(group: PigeonGroup) -> dict:
    return {
        "id": group.id,
        "owner_id": group.owner_id,
        "name": group.name,
        "description": group.description,
        "current_food_mix_id": group.current_food_mix_id,
        "size": len(group.members),
    }

def get_owned_group(db: Session, group_id: int, user) -> PigeonGroup:
    group = db.get(PigeonGroup, group_id)
    if not group or group.owner_id != user.id:
        raise HTTPException(status_code=404, detail="Grupo no encontrado")
    return group

@router.get("/", response_model=list[GroupOut])
def list_groups(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    groups = (
        db.query(PigeonGroup)
        .options(joinedload(PigeonGroup.members))
        .filter(PigeonGroup.owner_id == current_user.id)
        .order_by(PigeonGroup.id)
        .all()
    )
    return [group_out(g) for g in groups]

@router.post("/", response_model=GroupOut, status_code=201)
def create_group(data: GroupCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    group = PigeonGroup(owner_id=current_user.id, name=data.name, description=data.description)
    db.add(group)
    db.commit()
    db.refresh(group)
    return group_out(group)

@router.delete("/{group_id}")
def delete_group(group_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    group = get_owned_group(db, group_id, current_user)
    # El historial se conserva, sin referencia al grupo
    db.query(PigeonFeedHistory).filter(PigeonFeedHistory.group_id == group.id).update(
        {PigeonFeedHistory.group_id: None}
    )
    db.delete(group)
    db.commit()
    return {"message": "Grupo eliminado"}

@router.get("/{group_id}/pigeons", response_model=list[PigeonOut])
def group_pigeons(group_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    group = get_owned_group(db, group_id, current_user)
    return [m.pigeon for m in group.members]

@router.post("/{group_id}/pigeons/{pigeon_id}", response_model=GroupOut)
def add_pigeon(group_id: int, pigeon_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    group = get_owned_group(db, group_id, current_user)

    pigeon = db.get(Pigeon, pigeon_id)
    if not pigeon or pigeon.owner_id != current_user.id:
        raise HTTPException(status_code=404, detail="Paloma no encontrada")

    if db.get(PigeonGroupMember, {"group_id": group.id, "pigeon_id": pigeon.id}):
        raise HTTPException(status_code=409, detail="La paloma ya está en el grupo")

    db.add(PigeonGroupMember(group_id=group.id, pigeon_id=pigeon.id))
    db.commit()
    db.refresh(group)
    return group_out(group)

@router.delete("/{group_id}/pigeons/{pigeon_id}", response_model=GroupOut)
def remove_pigeon(group_id: int, pigeon_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    group = get_owned_group(db, group_id, current_user)

    member = db.get(PigeonGroupMember, {"group_id": group.id, "pigeon_id": pigeon_id})
    if not member:
        raise HTTPException(status_code=404, detail="La paloma no está en el grupo")

    db.delete(member)
    db.commit()
    db.refresh(group)
    return group_out(group)

@router.put("/{group_id}/mix", response_model=GroupOut)
def assign_mix(group_id: int, data: AssignMix, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    group = assign_mix_to_group(db, current_user, group_id, data.food_mix_id)
    return group_out(group)
