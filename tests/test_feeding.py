from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from pigeon_prestige.db.models.feed_history import PigeonFeedHistory
from pigeon_prestige.db.models.food import UserFoodInventory
from pigeon_prestige.db.models.pigeon import Pigeon, PigeonStatus
from pigeon_prestige.services import feeding
from pigeon_prestige.services.feeding import (
    build_feeding_plan,
    has_enough_food,
    shortage_penalty,
    update_pigeon_feedings_for_game_day,
)
from conftest import StubRng

DAY = date(1900, 1, 2)


@pytest.fixture
def loft(db, make_user, make_food, stock, make_mix, make_pigeon):
    """Jugador con dos comidas, una mezcla 60/40 y una paloma con la mezcla asignada."""
    user = make_user()
    corn, peas = make_food(), make_food()
    stock(user, corn, 100)
    stock(user, peas, 100)
    food_mix = make_mix(user, {corn.id: 60, peas.id: 40})
    pigeon = make_pigeon(user, current_food_mix_id=food_mix.id)
    return {"user": user, "corn": corn, "peas": peas, "mix": food_mix, "pigeon": pigeon}


def quantity(db, user, food):
    return db.get(UserFoodInventory, {"user_id": user.id, "food_id": food.id}).quantity


def history(db, pigeon):
    return db.query(PigeonFeedHistory).filter(PigeonFeedHistory.pigeon_id == pigeon.id).all()


# -----------------------
# Lógica pura
# -----------------------
def test_plan_uses_daily_ration_and_rounds_up():
    assert build_feeding_plan({1: 60, 2: 40}, {1: 100, 2: 100}, StubRng()) == {1: 60, 2: 40}
    assert build_feeding_plan({1: 33, 2: 67}, {}, StubRng(), daily_ration=10) == {1: 4, 2: 7}


def test_plan_fills_empty_slot_with_stocked_food():
    plan = build_feeding_plan({1: 0, 2: 100}, {1: 0, 2: 0, 3: 50}, StubRng())

    # El hueco del 0% pasa a la comida 3, al porcentaje de relleno
    assert plan == {3: 10, 2: 100}


def test_plan_reuses_mix_percentage_for_substitute():
    plan = build_feeding_plan({1: 0, 2: 100}, {1: 0, 2: 500}, StubRng())
    assert plan == {2: 200}


def test_empty_plan_is_a_shortage():
    plan = build_feeding_plan({1: 0}, {1: 0}, StubRng())

    assert plan == {}
    assert not has_enough_food(plan, {1: 0})


def test_has_enough_food():
    assert has_enough_food({1: 60, 2: 40}, {1: 60, 2: 40})
    assert not has_enough_food({1: 60, 2: 40}, {1: 60, 2: 39})
    assert not has_enough_food({1: 60}, {})


def test_shortage_penalty():
    assert shortage_penalty(100.0, 0) == pytest.approx(95.0)
    assert shortage_penalty(95.0, 1) == pytest.approx(85.5)
    assert shortage_penalty(33.33, 0) == pytest.approx(31.6635)
    assert shortage_penalty(33.33, 3) == pytest.approx(29.997)
    assert shortage_penalty(0.0, 5) == 0.0


# -----------------------
# Lote individual
# -----------------------
def test_fully_stocked_pigeon_is_fed(db, loft):
    report = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert report["fed"] == 1
    assert report["shortage"] == 0
    assert report["failed"] == []
    assert quantity(db, loft["user"], loft["corn"]) == 40
    assert quantity(db, loft["user"], loft["peas"]) == 60

    db.refresh(loft["pigeon"])
    assert loft["pigeon"].food_shortage_streak == 0
    assert loft["pigeon"].health == 100.0

    rows = history(db, loft["pigeon"])
    assert len(rows) == 1
    assert rows[0].game_date == DAY
    assert rows[0].food_mix_id == loft["mix"].id
    assert rows[0].group_id is None
    assert not rows[0].food_shortage


def test_shortage_is_all_or_nothing(db, loft, stock):
    stock(loft["user"], loft["corn"], 0)

    report = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert report["shortage"] == 1
    # No se descuenta nada, ni siquiera la comida que sí había
    assert quantity(db, loft["user"], loft["peas"]) == 100

    pigeon = loft["pigeon"]
    db.refresh(pigeon)
    assert pigeon.health == pytest.approx(95.0)
    assert pigeon.food_shortage_streak == 1
    assert history(db, pigeon)[0].food_shortage


def test_repeated_shortage_costs_more(db, loft, stock):
    stock(loft["user"], loft["corn"], 0)
    pigeon = loft["pigeon"]
    pigeon.health = 95.0
    pigeon.food_shortage_streak = 1
    db.commit()

    update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    db.refresh(pigeon)
    assert pigeon.health == pytest.approx(85.5)
    assert pigeon.food_shortage_streak == 2


def test_feeding_resets_shortage_streak(db, loft):
    pigeon = loft["pigeon"]
    pigeon.food_shortage_streak = 3
    pigeon.health = 70.0
    db.commit()

    update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    db.refresh(pigeon)
    assert pigeon.food_shortage_streak == 0
    assert pigeon.health == 70.0


def test_pigeon_without_mix_is_ignored(db, make_user, make_pigeon):
    pigeon = make_pigeon(make_user())

    report = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert report["fed"] == report["shortage"] == report["skipped"] == 0
    assert history(db, pigeon) == []


def test_inactive_pigeon_is_not_fed(db, loft):
    loft["pigeon"].status = PigeonStatus.INJURED
    db.commit()

    report = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert report["fed"] == 0
    assert quantity(db, loft["user"], loft["corn"]) == 100


def test_same_game_day_runs_once(db, loft):
    update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())
    second = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert second["fed"] == 0
    assert second["skipped"] == 1
    assert quantity(db, loft["user"], loft["corn"]) == 40
    assert len(history(db, loft["pigeon"])) == 1


def test_next_game_day_feeds_again(db, loft, stock):
    stock(loft["user"], loft["corn"], 120)
    stock(loft["user"], loft["peas"], 80)

    update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())
    update_pigeon_feedings_for_game_day(db, game_date=date(1900, 1, 3), rng=StubRng())

    assert quantity(db, loft["user"], loft["corn"]) == 0
    assert quantity(db, loft["user"], loft["peas"]) == 0
    assert not any(row.food_shortage for row in history(db, loft["pigeon"]))
    assert len(history(db, loft["pigeon"])) == 2


def test_default_game_date_is_current_game_date(db, loft):
    report = update_pigeon_feedings_for_game_day(db, rng=StubRng())

    assert report["game_date"] == date(1900, 1, 1)
    assert history(db, loft["pigeon"])[0].game_date == date(1900, 1, 1)


def test_failure_in_one_pigeon_does_not_stop_the_batch(db, loft, monkeypatch, make_user, make_food, stock, make_mix, make_pigeon):
    other = make_user()
    seed = make_food()
    stock(other, seed, 100)
    other_pigeon = make_pigeon(other, current_food_mix_id=make_mix(other, {seed.id: 100}).id)

    original = feeding._load_inventory
    broken_owner = loft["user"].id

    def flaky_inventory(session, owner_id):
        if owner_id == broken_owner:
            raise OperationalError("SELECT inventory", {}, Exception("database is locked"))
        return original(session, owner_id)

    monkeypatch.setattr(feeding, "_load_inventory", flaky_inventory)

    report = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert report["failed"] == [loft["pigeon"].id]
    assert report["fed"] == 1
    assert history(db, loft["pigeon"]) == []
    assert len(history(db, other_pigeon)) == 1
    assert quantity(db, other, seed) == 0
    assert quantity(db, loft["user"], loft["corn"]) == 100


def test_owner_without_any_stock(db, make_user, make_food, make_mix, make_pigeon):
    user = make_user()
    corn, peas = make_food(), make_food()
    pigeon = make_pigeon(user, health=80.0, current_food_mix_id=make_mix(user, {corn.id: 60, peas.id: 40}).id)
    assert db.query(UserFoodInventory).filter(UserFoodInventory.user_id == user.id).count() == 0

    report = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert report["shortage"] == 1
    assert report["failed"] == []
    db.refresh(pigeon)
    assert pigeon.health == pytest.approx(76.0)
    assert pigeon.food_shortage_streak == 1
    rows = history(db, pigeon)
    assert len(rows) == 1
    assert rows[0].food_shortage
    assert rows[0].game_date == DAY


def test_shortage_penalty_is_not_rounded(db, make_user, make_food, make_mix, make_pigeon):
    user = make_user()
    pigeon = make_pigeon(user, health=33.33, current_food_mix_id=make_mix(user, {make_food().id: 100}).id)

    update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    db.refresh(pigeon)
    assert pigeon.health == pytest.approx(33.33 * 0.95)


def test_pigeon_gone_mid_batch_is_skipped(db, loft, monkeypatch, make_user, make_food, stock, make_mix, make_pigeon):
    other = make_user()
    seed = make_food()
    stock(other, seed, 100)
    other_pigeon = make_pigeon(other, current_food_mix_id=make_mix(other, {seed.id: 100}).id)

    gone_id = loft["pigeon"].id
    original_get = db.get

    def get_without_first_pigeon(model, ident, *args, **kwargs):
        if model is Pigeon and ident == gone_id:
            return None
        return original_get(model, ident, *args, **kwargs)

    monkeypatch.setattr(db, "get", get_without_first_pigeon)

    report = update_pigeon_feedings_for_game_day(db, game_date=DAY, rng=StubRng())

    assert report["skipped"] == 1
    assert report["fed"] == 1
    assert report["failed"] == []
    assert len(history(db, other_pigeon)) == 1
