"""SQLite implementation of ``UserCarModel`` (the ``user_cars`` table)."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..core.db import from_db_timestamp, get_connection, to_db_timestamp
from .base import RentalQuery, UserCar, UserCarModel


def row_to_user_car(row) -> UserCar:
    return UserCar(
        id=row["id"],
        user_id=row["user_id"],
        car_id=row["car_id"],
        rent_started_at=from_db_timestamp(row["rent_started_at"]),
        rent_ended_at=from_db_timestamp(row["rent_ended_at"]),
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


class SQLiteUserCarModel(UserCarModel):
    async def find_one(self, query: RentalQuery) -> Optional[UserCar]:
        """Return the latest-ending rental of the car matching ``query``."""
        conn = get_connection()
        try:
            row = conn.execute(
                """
                SELECT * FROM user_cars
                WHERE car_id = ? AND rent_ended_at > ?
                ORDER BY rent_ended_at DESC, id DESC
                LIMIT 1
                """,
                (query.car_id, to_db_timestamp(query.ends_after)),
            ).fetchone()
            return row_to_user_car(row) if row else None
        finally:
            conn.close()

    async def create(self, attrs: Dict[str, Any]) -> UserCar:
        now = to_db_timestamp(datetime.now(timezone.utc))
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO user_cars (user_id, car_id, rent_started_at, rent_ended_at, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    attrs["user_id"],
                    attrs["car_id"],
                    to_db_timestamp(attrs["rent_started_at"]),
                    to_db_timestamp(attrs["rent_ended_at"]),
                    now,
                    now,
                ),
            )
            rental_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute("SELECT * FROM user_cars WHERE id = ?", (rental_id,)).fetchone()
            return row_to_user_car(row)
        finally:
            conn.close()
