from unittest.mock import AsyncMock

import pytest

from car_rental_api.app.core.errors import NotFoundError, ValidationError
from car_rental_api.app.models.base import Car, CarQuery
from car_rental_api.app.schemas.car import CarCreate, CarFilter, CarSize
from car_rental_api.app.services.car_service import CarService

CAR_INPUT = {
    "name": "mobil test",
    "price": 100000,
    "size": "large",
    "image": "gambar-test.png",
    "isCurrentlyRented": False,
}


class TestListCars:
    async def test_returns_cars_and_store_count(self, mock_car_model, mock_car):
        mock_car_model.find_all.return_value = [mock_car]
        mock_car_model.count.return_value = 10
        service = CarService(car_model=mock_car_model, user_car_model=AsyncMock())

        cars, count = await service.list_cars(CarFilter(), page=1, page_size=10)

        assert cars == [mock_car]
        assert count == 10
        pagination = service.build_pagination(1, 10, count)
        assert pagination.model_dump(by_alias=True) == {
            "page": 1,
            "pageCount": 1,
            "pageSize": 10,
            "count": 10,
        }

    async def test_translates_page_into_offset_and_limit(self, mock_car_model):
        mock_car_model.find_all.return_value = []
        mock_car_model.count.return_value = 0
        service = CarService(car_model=mock_car_model)

        await service.list_cars(CarFilter(size=CarSize.SMALL, name="avanza"), page=3, page_size=2)

        query = mock_car_model.find_all.await_args.args[0]
        assert query == CarQuery(size="small", name="avanza", available_at=None, offset=4, limit=2)

    async def test_defaults_to_first_page_of_default_size(self, mock_car_model):
        mock_car_model.find_all.return_value = []
        mock_car_model.count.return_value = 0
        service = CarService(car_model=mock_car_model)

        await service.list_cars()

        query = mock_car_model.find_all.await_args.args[0]
        assert query.offset == 0
        assert query.limit == 10

    async def test_page_past_the_end_is_empty(self, mock_car_model):
        mock_car_model.find_all.return_value = []
        mock_car_model.count.return_value = 3
        service = CarService(car_model=mock_car_model)

        cars, count = await service.list_cars(page=5, page_size=10)

        assert cars == []
        assert service.build_pagination(5, 10, count).page_count == 1

    async def test_rejects_non_positive_page(self, mock_car_model):
        service = CarService(car_model=mock_car_model)

        with pytest.raises(ValidationError):
            await service.list_cars(page=0)
        mock_car_model.find_all.assert_not_awaited()


class TestGetCar:
    async def test_returns_car(self, mock_car_model, mock_car):
        mock_car_model.find_by_pk.return_value = mock_car
        service = CarService(car_model=mock_car_model)

        assert await service.get_car(1) is mock_car
        mock_car_model.find_by_pk.assert_awaited_once_with(1)

    async def test_unknown_id_raises_not_found(self, mock_car_model):
        mock_car_model.find_by_pk.return_value = None
        service = CarService(car_model=mock_car_model)

        with pytest.raises(NotFoundError):
            await service.get_car(99)


class TestCreateCar:
    async def test_returns_created_car(self, mock_car_model):
        car = Car(name="mobil test", price=100000, size="large", image="gambar-test.png", is_currently_rented=False)
        mock_car_model.create.return_value = car
        service = CarService(car_model=mock_car_model)

        created = await service.create_car(dict(CAR_INPUT))

        assert created is car
        mock_car_model.create.assert_awaited_once_with(
            {
                "name": "mobil test",
                "price": 100000,
                "size": "large",
                "image": "gambar-test.png",
                "is_currently_rented": False,
            }
        )

    async def test_accepts_schema_instance(self, mock_car_model, mock_car):
        mock_car_model.create.return_value = mock_car
        service = CarService(car_model=mock_car_model)

        await service.create_car(CarCreate(**CAR_INPUT))

        assert mock_car_model.create.await_args.args[0]["size"] == "large"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": 0},
            {"price": -100},
            {"size": "huge"},
            {"name": ""},
            {"name": None},
        ],
    )
    async def test_invalid_input_never_reaches_store(self, mock_car_model, overrides):
        service = CarService(car_model=mock_car_model)

        with pytest.raises(ValidationError):
            await service.create_car({**CAR_INPUT, **overrides})
        mock_car_model.create.assert_not_awaited()

    async def test_store_failure_propagates(self, mock_car_model):
        mock_car_model.create.side_effect = RuntimeError("Something")
        service = CarService(car_model=mock_car_model)

        with pytest.raises(RuntimeError, match="Something"):
            await service.create_car(dict(CAR_INPUT))


class TestUpdateCar:
    async def test_merges_patch_and_returns_car(self, mock_car_model, mock_car):
        mock_car.update = AsyncMock(return_value=mock_car)
        mock_car_model.find_by_pk.return_value = mock_car
        service = CarService(car_model=mock_car_model)

        updated = await service.update_car(1, {"price": 150000, "isCurrentlyRented": True})

        assert updated is mock_car
        mock_car.update.assert_awaited_once_with({"price": 150000, "is_currently_rented": True})

    async def test_unknown_id_raises_not_found(self, mock_car_model):
        mock_car_model.find_by_pk.return_value = None
        service = CarService(car_model=mock_car_model)

        with pytest.raises(NotFoundError):
            await service.update_car(1, {"price": 1})

    async def test_invalid_patch_raises_validation_error(self, mock_car_model, mock_car):
        mock_car.update = AsyncMock()
        mock_car_model.find_by_pk.return_value = mock_car
        service = CarService(car_model=mock_car_model)

        with pytest.raises(ValidationError):
            await service.update_car(1, {"size": "huge"})
        mock_car.update.assert_not_awaited()


class TestDeleteCar:
    async def test_destroys_car(self, mock_car_model, mock_car):
        mock_car.destroy = AsyncMock()
        mock_car_model.find_by_pk.return_value = mock_car
        service = CarService(car_model=mock_car_model)

        assert await service.delete_car(1) is None
        mock_car.destroy.assert_awaited_once()

    async def test_unknown_id_raises_not_found(self, mock_car_model):
        mock_car_model.find_by_pk.return_value = None
        service = CarService(car_model=mock_car_model)

        with pytest.raises(NotFoundError):
            await service.delete_car(1)

    async def test_get_after_delete_raises_not_found(self, mock_car_model, mock_car):
        mock_car.destroy = AsyncMock()
        mock_car_model.find_by_pk.side_effect = [mock_car, None]
        service = CarService(car_model=mock_car_model)

        await service.delete_car(1)
        with pytest.raises(NotFoundError):
            await service.get_car(1)


async def test_unbound_car_cannot_be_persisted():
    car = Car(name="mobil test", price=100000, size="large")

    with pytest.raises(RuntimeError):
        await car.update({"price": 1})
    with pytest.raises(RuntimeError):
        await car.destroy()
