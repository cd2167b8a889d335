import pytest

from pigeon_prestige.db.models.breeding_pair import BreedingPair
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.services.breeding_service import (
    breed,
    breeding_success_chance,
    create_breeding_pair,
    end_breeding_pair,
    inherit_stat,
    offspring_name,
)
from pigeon_prestige.services.errors import ConflictError, GameRuleError, NotFoundError
from conftest import StubRng, auth_headers


@pytest.fixture
def couple(make_user, make_pigeon):
    user = make_user()
    male = make_pigeon(user, name="Rayo", gender="male", speed=80.0, endurance=60.0)
    female = make_pigeon(user, name="Brisa", gender="female", speed=60.0, endurance=60.0)
    return {"user": user, "male": male, "female": female}


# -----------------------
# Lógica pura
# -----------------------
def test_success_chance_from_fertility_and_breeding_quality():
    male = Pigeon(fertility=80.0, breeding_quality=50.0)
    female = Pigeon(fertility=60.0, breeding_quality=70.0)

    assert breeding_success_chance(male, female) == pytest.approx(0.66)


def test_inherit_from_better_parent_with_variation():
    assert inherit_stat(80.0, 60.0, StubRng([0.0, 0.0])) == 72


def test_inherit_from_worse_parent():
    assert inherit_stat(80.0, 60.0, StubRng([0.99, 0.5])) == 60


def test_inherited_stat_stays_in_range():
    assert inherit_stat(100.0, 95.0, StubRng([0.0, 0.999])) == 100
    assert inherit_stat(1.0, 0.5, StubRng([0.99, 0.0])) == 1


def test_offspring_name_mixes_parents():
    assert offspring_name("Rayo Veloz", "Brisa del Mar", StubRng([0.99, 0.0])) == "Rayo Mar"
    assert offspring_name("Rayo Veloz", "Brisa del Mar", StubRng([0.0, 0.99])) == "Brisa Veloz"


# -----------------------
# Parejas
# -----------------------
def test_create_pair(db, couple):
    pair = create_breeding_pair(db, couple["user"], couple["male"].id, couple["female"].id)

    assert pair.status == "active"
    assert pair.owner_id == couple["user"].id
    assert pair.offspring_produced == 0


def test_pair_needs_male_and_female(db, couple):
    with pytest.raises(GameRuleError):
        create_breeding_pair(db, couple["user"], couple["female"].id, couple["male"].id)


def test_pair_needs_own_pigeons(db, couple, make_user, make_pigeon):
    stranger = make_pigeon(make_user(), gender="female")

    with pytest.raises(NotFoundError):
        create_breeding_pair(db, couple["user"], couple["male"].id, stranger.id)


def test_pair_needs_active_pigeons(db, couple):
    couple["female"].status = PigeonStatus.RETIRED
    db.commit()

    with pytest.raises(GameRuleError):
        create_breeding_pair(db, couple["user"], couple["male"].id, couple["female"].id)


def test_pigeon_in_one_active_pair_at_a_time(db, couple, make_pigeon):
    create_breeding_pair(db, couple["user"], couple["male"].id, couple["female"].id)
    other_female = make_pigeon(couple["user"], gender="female")

    with pytest.raises(ConflictError):
        create_breeding_pair(db, couple["user"], couple["male"].id, other_female.id)


# -----------------------
# Cría
# -----------------------
def test_successful_breeding_creates_offspring(db, couple):
    pair = create_breeding_pair(db, couple["user"], couple["male"].id, couple["female"].id)

    # 0.0 en todas las tiradas: éxito, mejor progenitor, -10%, nombre y sexo de la madre
    result = breed(db, couple["user"], pair.id, StubRng(default=0.0))

    assert result["success"]
    chick = result["offspring"]
    assert chick.owner_id == couple["user"].id
    assert chick.name == "Brisa Brisa"
    assert chick.gender == "female"
    assert chick.picture_number == 51
    assert chick.speed == 72
    assert chick.endurance == 54
    assert chick.status == PigeonStatus.ACTIVE
    assert (chick.age_years, chick.age_months, chick.age_days) == (0, 0, 0)

    db.refresh(pair)
    assert pair.offspring_produced == 1
    assert pair.successful_breedings == 1


def test_failed_breeding(db, couple):
    pair = create_breeding_pair(db, couple["user"], couple["male"].id, couple["female"].id)
    pigeons_before = db.query(Pigeon).count()

    # Probabilidad 0.5 con las stats por defecto
    result = breed(db, couple["user"], pair.id, StubRng([0.99]))

    assert result == {"success": False, "offspring": None}
    assert db.query(Pigeon).count() == pigeons_before
    db.refresh(pair)
    assert pair.offspring_produced == 0


def test_ended_pair_cannot_breed(db, couple):
    pair = create_breeding_pair(db, couple["user"], couple["male"].id, couple["female"].id)
    end_breeding_pair(db, couple["user"], pair.id)

    with pytest.raises(GameRuleError):
        breed(db, couple["user"], pair.id, StubRng(default=0.0))

    # Separados, pueden volver a emparejarse
    again = create_breeding_pair(db, couple["user"], couple["male"].id, couple["female"].id)
    assert again.status == "active"


# -----------------------
# API
# -----------------------
def test_breeding_api(client, db, couple):
    headers = auth_headers(couple["user"])

    created = client.post("/breeding/pairs", json={
        "male_pigeon_id": couple["male"].id,
        "female_pigeon_id": couple["female"].id,
    }, headers=headers)
    assert created.status_code == 201
    pair_id = created.json()["id"]

    assert [p["id"] for p in client.get("/breeding/pairs", headers=headers).json()] == [pair_id]

    attempt = client.post(f"/breeding/pairs/{pair_id}/breed", headers=headers)
    assert attempt.status_code == 200
    body = attempt.json()
    if body["success"]:
        assert body["offspring"]["owner_id"] == couple["user"].id
    else:
        assert body["offspring"] is None

    ended = client.delete(f"/breeding/pairs/{pair_id}", headers=headers)
    assert ended.json()["status"] == "ended"
    assert client.get("/breeding/pairs", headers=headers).json() == []
    assert db.get(BreedingPair, pair_id).end_date is not None


def test_breeding_api_rejects_same_gender(client, couple, make_pigeon):
    other_male = make_pigeon(couple["user"], gender="male")

    response = client.post("/breeding/pairs", json={
        "male_pigeon_id": couple["male"].id,
        "female_pigeon_id": other_male.id,
    }, headers=auth_headers(couple["user"]))
    assert response.status_code == 400
