import random
from datetime import datetime, timedelta

from pigeon_prestige.db.session import SessionLocal, engine, Base
from pigeon_prestige.db.models import _all
from pigeon_prestige.db.models.user import User
from pigeon_prestige.db.models.food import Food, UserFoodInventory
from pigeon_prestige.db.models.food_mix import FoodMix
from pigeon_prestige.db.models.group import PigeonGroup, PigeonGroupMember
from pigeon_prestige.db.models.race import Race
from pigeon_prestige.core.config import settings
from pigeon_prestige.core.security import hash_password
from pigeon_prestige.services.pigeon_factory import create_starting_pigeons

# --- CONFIGURACIÓN ---
NUM_USERS = 6
STARTING_FOOD_UNITS = 500

FOODS = [
    ("Maíz", 2.0, "Energía para vuelos largos", "endurance"),
    ("Guisantes", 2.5, "Proteína para músculo de ala", "speed"),
    ("Trigo", 1.5, "Base barata para cualquier mezcla", "maintenance"),
    ("Cebada", 1.8, "Ligera y fácil de digerir", "recovery"),
    ("Cañamones", 4.0, "Grasa para días de frío", "endurance"),
    ("Mezcla de cría", 3.5, "Refuerza la cría", "breeding"),
    ("Mezcla de carrera", 4.5, "Aumenta la velocidad", "racing"),
]


def clean_db():
    print("🧹 Limpiando base de datos...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def create_foods(db):
    print("🌽 Creando catálogo de comida...")
    foods = []
    for name, price, description, best_for in FOODS:
        food = Food(name=name, price=price, description=description, best_for=best_for)
        db.add(food)
        foods.append(food)
    db.commit()
    return foods


def create_users(db, rng):
    print("👥 Creando jugadores y palomares...")
    users = [
        User(email="admin@test.com", username="ADMIN", hashed_password=hash_password("123"), role="admin",
             balance=settings.starting_balance),
    ]
    for i in range(NUM_USERS - 1):
        users.append(User(
            email=f"criador{i}@test.com",
            username=f"Criador_{i+1}",
            hashed_password=hash_password("123"),
            role="user",
            balance=settings.starting_balance,
        ))
    db.add_all(users)
    db.commit()

    for user in users:
        create_starting_pigeons(db, user, settings.starting_pigeons, rng=rng)
    return users


def stock_lofts(db, users, foods, rng):
    print("🥣 Llenando despensas y preparando mezclas...")
    for user in users:
        for food in foods:
            db.add(UserFoodInventory(user_id=user.id, food_id=food.id, quantity=STARTING_FOOD_UNITS))

        main_foods = rng.sample(foods, 3)
        mix = FoodMix(
            user_id=user.id,
            name="Mezcla de diario",
            mix_json={str(main_foods[0].id): 50, str(main_foods[1].id): 30, str(main_foods[2].id): 20},
        )
        db.add(mix)
        db.commit()

        # La mitad del palomar con mezcla propia, el resto en un grupo
        pigeons = sorted(user.pigeons, key=lambda p: p.id)
        half = len(pigeons) // 2
        for pigeon in pigeons[:half]:
            pigeon.current_food_mix_id = mix.id

        group = PigeonGroup(owner_id=user.id, name="Equipo de carreras", current_food_mix_id=mix.id)
        db.add(group)
        db.commit()
        for pigeon in pigeons[half:]:
            db.add(PigeonGroupMember(group_id=group.id, pigeon_id=pigeon.id))
    db.commit()


def create_races(db):
    print("🏁 Creando carreras...")
    now = datetime.now().replace(minute=0, second=0, microsecond=0)
    races = [
        Race(name="Vuelo de bienvenida", distance_km=150, start_time=now + timedelta(days=1),
             wind=5, entry_fee=0, prize_pool=100),
        Race(name="Clásica del Norte", distance_km=500, start_time=now + timedelta(days=3),
             wind=25, entry_fee=50, prize_pool=1000),
    ]
    db.add_all(races)
    db.commit()
    return races


def seed(db, rng=None):
    rng = rng or random.Random()
    foods = create_foods(db)
    users = create_users(db, rng)
    stock_lofts(db, users, foods, rng)
    create_races(db)
    print("✅ Datos de prueba creados")


def main():
    clean_db()
    db = SessionLocal()
    try:
        seed(db)
    except Exception:
        db.rollback()
        print("❌ Error creando los datos de prueba")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
