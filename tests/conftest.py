import os

# Base de datos en memoria antes de importar la app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "clave-de-test")

import pytest
from fastapi.testclient import TestClient

from pigeon_prestige.core.deps import get_db
from pigeon_prestige.core.security import create_access_token
from pigeon_prestige.db.session import Base, SessionLocal, engine
from pigeon_prestige.db.models import _all
from pigeon_prestige.db.models.food import Food, UserFoodInventory
from pigeon_prestige.db.models.food_mix import FoodMix
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.db.models.user import User


class StubRng:
    """Sustituto de random.Random con resultados fijados de antemano."""

    def __init__(self, values=(), default=0.99):
        self.values = list(values)
        self.default = default

    def random(self):
        return self.values.pop(0) if self.values else self.default

    def choice(self, seq):
        return seq[0]

    def randint(self, a, b):
        return a


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# -----------------------
# Factorías
# -----------------------
@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="user", balance=1000.0, username=None):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=f"user{n}@test.com",
            username=username or f"user{n}",
            hashed_password="x",
            role=role,
            balance=balance,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_pigeon(db):
    def _make(owner, status=PigeonStatus.ACTIVE, name="Rayo", gender="male", **stats):
        defaults = {"speed": 60.0, "endurance": 60.0, "sky_iq": 50.0, "aerodynamics": 60.0, "health": 100.0}
        defaults.update(stats)
        pigeon = Pigeon(
            owner_id=owner.id,
            name=name,
            gender=gender,
            status=status,
            picture_number=1,
            food_shortage_streak=0,
            **defaults,
        )
        db.add(pigeon)
        db.commit()
        db.refresh(pigeon)
        return pigeon

    return _make


@pytest.fixture
def make_food(db):
    counter = {"n": 0}

    def _make(price=1.0):
        counter["n"] += 1
        food = Food(name=f"Comida {counter['n']}", price=price)
        db.add(food)
        db.commit()
        db.refresh(food)
        return food

    return _make


@pytest.fixture
def stock(db):
    def _stock(user, food, quantity):
        row = db.get(UserFoodInventory, {"user_id": user.id, "food_id": food.id})
        if not row:
            row = UserFoodInventory(user_id=user.id, food_id=food.id, quantity=0)
            db.add(row)
        row.quantity = quantity
        db.commit()
        return row

    return _stock


@pytest.fixture
def make_mix(db):
    def _make(user, allocations, name="Mezcla"):
        food_mix = FoodMix(
            user_id=user.id,
            name=name,
            mix_json={str(food_id): percent for food_id, percent in allocations.items()},
        )
        db.add(food_mix)
        db.commit()
        db.refresh(food_mix)
        return food_mix

    return _make


def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}
