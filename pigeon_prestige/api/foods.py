from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pigeon_prestige.core.deps import get_current_user, get_db
from pigeon_prestige.db.models.food import Food, UserFoodInventory
from pigeon_prestige.db.models.food_mix import FoodMix
from pigeon_prestige.schemas.food import FoodOut, InventoryOut, FoodPurchase, FoodMixCreate, FoodMixOut
from pigeon_prestige.services import food_service

router = APIRouter(prefix="/foods", tags=["Food"])

@router.get("/", response_model=list[FoodOut])
def list_foods(db: Session = Depends(get_db)):
    return db.query(Food).order_by(Food.name).all()

@router.get("/inventory", response_model=list[InventoryOut])
def my_inventory(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return (
        db.query(UserFoodInventory)
        .filter(UserFoodInventory.user_id == current_user.id)
        .order_by(UserFoodInventory.food_id)
        .all()
    )

@router.post("/purchase", response_model=InventoryOut)
def purchase(data: FoodPurchase, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return food_service.purchase_food(db, current_user, data.food_id, data.quantity)

# -----------------------
# Mezclas
# -----------------------
@router.get("/mixes", response_model=list[FoodMixOut])
def list_mixes(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return (
        db.query(FoodMix)
        .filter(FoodMix.user_id == current_user.id)
        .order_by(FoodMix.id.desc())
        .all()
    )

@router.post("/mixes", response_model=FoodMixOut, status_code=201)
def create_mix(data: FoodMixCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return food_service.create_food_mix(db, current_user, data.name, data.mix)

@router.delete("/mixes/{food_mix_id}")
def delete_mix(food_mix_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    food_service.delete_food_mix(db, current_user, food_mix_id)
    return {"message": "Mezcla eliminada"}
