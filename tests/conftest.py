from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from car_rental_api.app.core.config import settings
from car_rental_api.app.core.db import init_db
from car_rental_api.app.core.security import create_access_token
from car_rental_api.app.main import app
from car_rental_api.app.models.base import Car


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the application at a fresh, migrated SQLite file."""
    path = tmp_path / "car_rental_test.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture
def client(db_path):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "1", "user_id": 1})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def mock_car():
    return Car(
        id=1,
        name="mobil test",
        price=100000,
        size="large",
        image="gambar-test.png",
        is_currently_rented=False,
        created_at=datetime(2022, 11, 17, 5, 11, 1, 429000, tzinfo=timezone.utc),
        updated_at=datetime(2022, 11, 17, 5, 11, 1, 429000, tzinfo=timezone.utc),
        user_car=None,
    )


@pytest.fixture
def mock_car_model():
    return AsyncMock()


@pytest.fixture
def mock_user_car_model():
    return AsyncMock()
