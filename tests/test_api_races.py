from datetime import datetime

import pytest

from pigeon_prestige.db.models.race import Race
from pigeon_prestige.db.models.transaction import Transaction
from conftest import auth_headers


@pytest.fixture
def race_day(db, make_user, make_pigeon):
    admin = make_user(role="admin")
    player = make_user(balance=100.0)
    rival = make_user(balance=100.0)
    # Sin azar: sky_iq >= 30 y moral <= 80
    fast = make_pigeon(player, speed=90, endurance=80)
    slow = make_pigeon(rival, speed=50, endurance=60)
    return {"admin": admin, "player": player, "rival": rival, "fast": fast, "slow": slow}


def create_race(client, admin, **overrides):
    payload = {
        "name": "Clásica",
        "distance_km": 300,
        "start_time": "2024-05-01T09:00:00",
        "wind": 5,
        "entry_fee": 10,
        "prize_pool": 500,
    }
    payload.update(overrides)
    return client.post("/races/", json=payload, headers=auth_headers(admin))


def test_only_admin_creates_races(client, race_day):
    assert create_race(client, race_day["player"]).status_code == 403

    response = create_race(client, race_day["admin"])
    assert response.status_code == 201
    assert response.json()["status"] == "upcoming"
    assert len(client.get("/races/").json()) == 1


def test_enter_race_charges_fee(client, db, race_day):
    race_id = create_race(client, race_day["admin"]).json()["id"]
    player, fast = race_day["player"], race_day["fast"]

    response = client.post(f"/races/{race_id}/enter/{fast.id}", headers=auth_headers(player))

    assert response.status_code == 201
    db.refresh(player)
    assert player.balance == 90.0
    fee = db.query(Transaction).filter(Transaction.user_id == player.id).one()
    assert fee.type == "race_entry"
    assert fee.related_id == race_id

    duplicate = client.post(f"/races/{race_id}/enter/{fast.id}", headers=auth_headers(player))
    assert duplicate.status_code == 409


def test_cannot_enter_someone_elses_pigeon(client, race_day):
    race_id = create_race(client, race_day["admin"]).json()["id"]

    response = client.post(f"/races/{race_id}/enter/{race_day['slow'].id}", headers=auth_headers(race_day["player"]))
    assert response.status_code == 404


def test_one_race_per_day(client, race_day):
    first = create_race(client, race_day["admin"]).json()["id"]
    second = create_race(client, race_day["admin"], name="Vespertina", start_time="2024-05-01T18:00:00").json()["id"]
    other_day = create_race(client, race_day["admin"], name="Domingo", start_time="2024-05-05T09:00:00").json()["id"]
    headers = auth_headers(race_day["player"])
    pigeon_id = race_day["fast"].id

    assert client.post(f"/races/{first}/enter/{pigeon_id}", headers=headers).status_code == 201
    assert client.post(f"/races/{second}/enter/{pigeon_id}", headers=headers).status_code == 409
    assert client.post(f"/races/{other_day}/enter/{pigeon_id}", headers=headers).status_code == 201


def test_entry_fee_needs_balance(client, db, race_day):
    race_id = create_race(client, race_day["admin"], entry_fee=1000).json()["id"]

    response = client.post(f"/races/{race_id}/enter/{race_day['fast'].id}", headers=auth_headers(race_day["player"]))
    assert response.status_code == 400


def test_full_race(client, race_day):
    race_id = create_race(client, race_day["admin"], max_participants=1).json()["id"]

    assert client.post(f"/races/{race_id}/enter/{race_day['fast'].id}", headers=auth_headers(race_day["player"])).status_code == 201
    assert client.post(f"/races/{race_id}/enter/{race_day['slow'].id}", headers=auth_headers(race_day["rival"])).status_code == 400


def test_run_race_results_and_standings(client, db, race_day):
    admin, player, rival = race_day["admin"], race_day["player"], race_day["rival"]
    fast, slow = race_day["fast"], race_day["slow"]
    race_id = create_race(client, admin).json()["id"]
    client.post(f"/races/{race_id}/enter/{fast.id}", headers=auth_headers(player))
    client.post(f"/races/{race_id}/enter/{slow.id}", headers=auth_headers(rival))

    # Sin correr no hay resultados
    assert client.get(f"/races/{race_id}/results").status_code == 400

    run = client.post(f"/races/{race_id}/run", headers=auth_headers(admin))
    assert run.status_code == 200
    entries = run.json()
    assert [(e["pigeon_id"], e["finish_position"]) for e in entries] == [(fast.id, 1), (slow.id, 2)]
    assert entries[0]["prize_won"] == 500

    # Correr dos veces no se permite
    assert client.post(f"/races/{race_id}/run", headers=auth_headers(admin)).status_code == 409

    db.refresh(player)
    assert player.balance == 590.0
    db.refresh(fast)
    db.refresh(slow)
    assert (fast.races_won, fast.total_races) == (1, 1)
    assert (slow.races_lost, slow.total_races) == (1, 1)
    assert fast.best_time == pytest.approx(entries[0]["finish_time"])
    assert fast.total_distance == 300

    results = client.get(f"/races/{race_id}/results").json()
    by_pigeon = {r["pigeon_id"]: r for r in results}
    # base 88 km/h -> 205 min; el sprint final empieza en el minuto 105
    assert by_pigeon[fast.id]["base_speed"] == pytest.approx(88.0)
    assert by_pigeon[fast.id]["duration"] == 205
    assert by_pigeon[fast.id]["events"] == [{"t": 105, "effect": "boost", "mod": 1.2, "reason": "final sprint"}]
    assert by_pigeon[slow.id]["events"] == []

    standings = client.get(f"/races/{race_id}/standings", params={"minute": 60}).json()
    assert [row["pigeon_id"] for row in standings] == [fast.id, slow.id]
    assert standings[0]["distance_km"] == pytest.approx(88.0)
    assert standings[1]["distance_km"] == pytest.approx(52.0)
    assert standings[0]["pigeon_name"] == fast.name

    final = client.get(f"/races/{race_id}/standings", params={"minute": 1000}).json()
    assert all(row["finished"] for row in final)

    race = db.get(Race, race_id)
    assert race.status == "finished"


def test_cannot_enter_finished_race(client, race_day):
    race_id = create_race(client, race_day["admin"]).json()["id"]
    client.post(f"/races/{race_id}/run", headers=auth_headers(race_day["admin"]))

    response = client.post(f"/races/{race_id}/enter/{race_day['fast'].id}", headers=auth_headers(race_day["player"]))
    assert response.status_code == 400
