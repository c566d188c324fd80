"""
SQLite implementation of ``CarModel``.

All queries use parameterized statements.  Each call opens its own
connection and closes it before returning.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import from_db_timestamp, get_connection, to_db_timestamp
from .base import Car, CarModel, CarQuery, UserCar
from .user_car import row_to_user_car

CAR_COLUMNS = ("name", "price", "size", "image", "is_currently_rented")


class SQLiteCarModel(CarModel):
    """Car records stored in the ``cars`` table."""

    def _row_to_car(self, row) -> Car:
        return Car(
            id=row["id"],
            name=row["name"],
            price=row["price"],
            size=row["size"],
            image=row["image"],
            is_currently_rented=bool(row["is_currently_rented"]),
            created_at=from_db_timestamp(row["created_at"]),
            updated_at=from_db_timestamp(row["updated_at"]),
            _model=self,
        )

    @staticmethod
    def _where(query: CarQuery) -> Tuple[str, list]:
        clauses: list[str] = []
        params: list = []
        if query.size:
            clauses.append("size = ?")
            params.append(query.size)
        if query.name:
            clauses.append("instr(lower(name), lower(?)) > 0")
            params.append(query.name)
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    @staticmethod
    def _to_column(key: str, value: Any) -> Any:
        if key == "is_currently_rented":
            return 1 if value else 0
        if isinstance(value, Enum):
            return value.value
        return value

    async def find_all(self, query: CarQuery) -> List[Car]:
        where, params = self._where(query)
        sql = f"SELECT * FROM cars{where} ORDER BY created_at DESC, id DESC"
        if query.limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([query.limit, query.offset])
        conn = get_connection()
        try:
            cursor = conn.cursor()
            rows = cursor.execute(sql, tuple(params)).fetchall()
            cars = [self._row_to_car(row) for row in rows]
            if query.available_at is not None:
                available_at = to_db_timestamp(query.available_at)
                for car in cars:
                    car.user_car = self._find_rental_running_at(cursor, car.id, available_at)
            return cars
        finally:
            conn.close()

    @staticmethod
    def _find_rental_running_at(cursor, car_id: int, moment: str) -> Optional[UserCar]:
        row = cursor.execute(
            """
            SELECT * FROM user_cars
            WHERE car_id = ? AND rent_started_at <= ? AND rent_ended_at >= ?
            ORDER BY rent_started_at DESC, id DESC
            LIMIT 1
            """,
            (car_id, moment, moment),
        ).fetchone()
        return row_to_user_car(row) if row else None

    async def count(self, query: CarQuery) -> int:
        where, params = self._where(query)
        conn = get_connection()
        try:
            row = conn.execute(f"SELECT COUNT(*) AS total FROM cars{where}", tuple(params)).fetchone()
            return row["total"]
        finally:
            conn.close()

    async def find_by_pk(self, car_id: int) -> Optional[Car]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM cars WHERE id = ?", (car_id,)).fetchone()
            return self._row_to_car(row) if row else None
        finally:
            conn.close()

    async def create(self, attrs: Dict[str, Any]) -> Car:
        now = to_db_timestamp(datetime.now(timezone.utc))
        values = [self._to_column(col, attrs.get(col)) for col in CAR_COLUMNS]
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO cars (name, price, size, image, is_currently_rented, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (*values, now, now),
            )
            car_id = cursor.lastrowid
            conn.commit()
            row = cursor.execute("SELECT * FROM cars WHERE id = ?", (car_id,)).fetchone()
            return self._row_to_car(row)
        finally:
            conn.close()

    async def update(self, car: Car, patch: Dict[str, Any]) -> Car:
        changes = {k: v for k, v in patch.items() if k in CAR_COLUMNS}
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if changes:
                fields = [f"{key} = ?" for key in changes]
                values = [self._to_column(key, value) for key, value in changes.items()]
                values.append(to_db_timestamp(datetime.now(timezone.utc)))
                values.append(car.id)
                sql = f"UPDATE cars SET {', '.join(fields)}, updated_at = ? WHERE id = ?"
                cursor.execute(sql, tuple(values))
                conn.commit()
            row = cursor.execute("SELECT * FROM cars WHERE id = ?", (car.id,)).fetchone()
        finally:
            conn.close()
        if row:
            fresh = self._row_to_car(row)
            for key in CAR_COLUMNS + ("updated_at",):
                setattr(car, key, getattr(fresh, key))
        return car

    async def destroy(self, car_id: int) -> None:
        conn = get_connection()
        try:
            conn.execute("DELETE FROM cars WHERE id = ?", (car_id,))
            conn.commit()
        finally:
            conn.close()
