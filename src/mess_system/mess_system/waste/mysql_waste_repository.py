from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import MealType
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_int, db_cursor, fetchall, fetchone
from .model import WasteRecord
from .repository import WasteRepository

_WASTE_COLUMNS = """
    waste_id, meal_date, meal_type, total_served, total_consumed,
    waste_amount, waste_percentage, notes, created_at
"""


def _row_to_record(r: dict) -> WasteRecord:
    return WasteRecord(
        waste_id=int(r["waste_id"]),
        meal_date=r["meal_date"],
        meal_type=MealType(r["meal_type"]),
        total_served=as_int(r["total_served"]),
        total_consumed=as_int(r["total_consumed"]),
        waste_amount=as_int(r["waste_amount"]),
        waste_percentage=as_float(r["waste_percentage"]),
        notes=r.get("notes") or "",
        created_at=r.get("created_at"),
    )


class MySQLWasteRepository(WasteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, *, meal_date: date, meal_type: MealType) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT waste_id FROM waste_records WHERE meal_date=%s AND meal_type=%s",
                (meal_date, meal_type.value),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        meal_date: date,
        meal_type: MealType,
        total_served: int,
        total_consumed: int,
        waste_amount: int,
        waste_percentage: float,
        notes: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO waste_records(
                        meal_date, meal_type, total_served, total_consumed, waste_amount, waste_percentage, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (meal_date, meal_type.value, total_served, total_consumed, waste_amount, waste_percentage, notes),
                )
            except IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise ConflictError("Record already exists for this date and meal type") from e
                raise
            return int(cur.lastrowid)

    def get(self, *, waste_id: int) -> Optional[WasteRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_WASTE_COLUMNS} FROM waste_records WHERE waste_id=%s", (int(waste_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        meal_type: Optional[MealType] = None,
    ) -> Sequence[WasteRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if start_date is not None:
            clauses.append("meal_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("meal_date <= %s")
            params.append(end_date)
        if meal_type is not None:
            clauses.append("meal_type=%s")
            params.append(meal_type.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_WASTE_COLUMNS}
                FROM waste_records
                WHERE {where}
                ORDER BY meal_date DESC, FIELD(meal_type, 'breakfast', 'lunch', 'dinner')
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
