"""Tests for the SQLite data store against a temporary database."""

from datetime import datetime, timedelta, timezone

import pytest

from car_rental_api.app.core.db import get_cursor, init_db, to_db_timestamp, from_db_timestamp
from car_rental_api.app.models import CarQuery, RentalQuery, SQLiteCarModel, SQLiteUserCarModel
from car_rental_api.app.schemas.car import CarSize

START = datetime(2030, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def cars(db_path):
    return SQLiteCarModel()


@pytest.fixture
def rentals(db_path):
    return SQLiteUserCarModel()


def car_attrs(**overrides):
    attrs = {
        "name": "mobil test",
        "price": 100000,
        "size": "large",
        "image": "gambar-test.png",
        "is_currently_rented": False,
    }
    attrs.update(overrides)
    return attrs


def test_init_db_is_idempotent(db_path):
    init_db()

    with get_cursor() as cursor:
        versions = [row["version"] for row in cursor.execute("SELECT version FROM migrations ORDER BY version")]
    assert versions == [1, 2]


def test_timestamps_round_trip_as_utc():
    local = datetime(2030, 3, 1, 16, 0, tzinfo=timezone(timedelta(hours=7)))

    stored = to_db_timestamp(local)

    assert stored == "2030-03-01 09:00:00.000000"
    assert from_db_timestamp(stored) == START


async def test_create_and_find_by_pk(cars):
    car = await cars.create(car_attrs(size=CarSize.MEDIUM))

    assert car.id is not None
    assert car.size == "medium"
    assert car.created_at is not None and car.created_at == car.updated_at

    found = await cars.find_by_pk(car.id)
    assert found == car


async def test_find_by_pk_unknown_returns_none(cars):
    assert await cars.find_by_pk(12345) is None


async def test_update_through_record(cars):
    car = await cars.create(car_attrs())

    updated = await car.update({"price": 250000, "is_currently_rented": True, "unknown": "ignored"})

    assert updated is car
    assert car.price == 250000
    assert car.is_currently_rented is True
    assert (await cars.find_by_pk(car.id)).price == 250000


async def test_destroy_through_record(cars):
    car = await cars.create(car_attrs())

    await car.destroy()

    assert await cars.find_by_pk(car.id) is None


async def test_find_all_filters_and_counts(cars):
    await cars.create(car_attrs(name="Avanza", size="medium"))
    await cars.create(car_attrs(name="Innova", size="large"))
    await cars.create(car_attrs(name="Avanza Veloz", size="large"))

    large = CarQuery(size="large", limit=10)
    assert {car.name for car in await cars.find_all(large)} == {"Innova", "Avanza Veloz"}
    assert await cars.count(large) == 2

    by_name = CarQuery(name="avanza", limit=10)
    assert {car.name for car in await cars.find_all(by_name)} == {"Avanza", "Avanza Veloz"}
    assert await cars.count(by_name) == 2

    assert await cars.count(CarQuery()) == 3


async def test_find_all_pages_newest_first(cars):
    for index in range(5):
        await cars.create(car_attrs(name=f"car {index}"))

    first_page = await cars.find_all(CarQuery(offset=0, limit=2))
    last_page = await cars.find_all(CarQuery(offset=4, limit=2))
    past_the_end = await cars.find_all(CarQuery(offset=10, limit=2))

    assert [car.name for car in first_page] == ["car 4", "car 3"]
    assert [car.name for car in last_page] == ["car 0"]
    assert past_the_end == []
    assert await cars.count(CarQuery(offset=10, limit=2)) == 5


async def test_find_all_attaches_rental_running_at_available_at(cars, rentals):
    busy = await cars.create(car_attrs(name="busy"))
    free = await cars.create(car_attrs(name="free"))
    await rentals.create(
        {"user_id": 1, "car_id": busy.id, "rent_started_at": START, "rent_ended_at": START + timedelta(days=1)}
    )
    await rentals.create(
        {"user_id": 1, "car_id": free.id, "rent_started_at": START - timedelta(days=3), "rent_ended_at": START}
    )

    listed = {car.name: car for car in await cars.find_all(CarQuery(available_at=START + timedelta(hours=1), limit=10))}

    assert listed["busy"].user_car is not None
    assert listed["busy"].user_car.rent_ended_at == START + timedelta(days=1)
    assert listed["free"].user_car is None

    without_time = await cars.find_all(CarQuery(limit=10))
    assert all(car.user_car is None for car in without_time)


async def test_find_all_skips_rental_not_started_at_available_at(cars, rentals):
    car = await cars.create(car_attrs())
    running = await rentals.create(
        {"user_id": 1, "car_id": car.id, "rent_started_at": START, "rent_ended_at": START + timedelta(days=1)}
    )
    await rentals.create(
        {
            "user_id": 2,
            "car_id": car.id,
            "rent_started_at": START + timedelta(days=10),
            "rent_ended_at": START + timedelta(days=11),
        }
    )

    [listed] = await cars.find_all(CarQuery(available_at=START + timedelta(hours=1), limit=10))
    [between] = await cars.find_all(CarQuery(available_at=START + timedelta(days=5), limit=10))

    assert listed.user_car.id == running.id
    assert between.user_car is None


async def test_rental_find_one_matches_rentals_ending_after(cars, rentals):
    car = await cars.create(car_attrs())
    created = await rentals.create(
        {"user_id": 3, "car_id": car.id, "rent_started_at": START, "rent_ended_at": START + timedelta(days=1)}
    )

    assert created.id is not None
    assert created.user_id == 3
    assert created.rent_started_at == START

    assert await rentals.find_one(RentalQuery(car_id=car.id, ends_after=START + timedelta(hours=5))) == created
    assert await rentals.find_one(RentalQuery(car_id=car.id, ends_after=START + timedelta(days=1))) is None
    assert await rentals.find_one(RentalQuery(car_id=car.id + 1, ends_after=START)) is None


async def test_deleting_car_removes_its_rentals(cars, rentals):
    car = await cars.create(car_attrs())
    await rentals.create(
        {"user_id": 1, "car_id": car.id, "rent_started_at": START, "rent_ended_at": START + timedelta(days=1)}
    )

    await car.destroy()

    assert await rentals.find_one(RentalQuery(car_id=car.id, ends_after=START)) is None
