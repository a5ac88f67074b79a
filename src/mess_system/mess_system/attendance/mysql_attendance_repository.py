from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..core.enums import AttendanceStatus, MealType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_int, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_UPSERT_SQL = """
    INSERT INTO attendance_logs(user_id, meal_date, meal_type, status)
    VALUES(%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE status=VALUES(status)
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_status(self, *, user_id: int, meal_date: date, meal_type: MealType) -> Optional[AttendanceStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status
                FROM attendance_logs
                WHERE user_id=%s AND meal_date=%s AND meal_type=%s
                """,
                (int(user_id), meal_date, meal_type.value),
            )
            r = fetchone(cur)
            return AttendanceStatus(r["status"]) if r else None

    def upsert_status(
        self,
        *,
        user_id: int,
        meal_date: date,
        meal_type: MealType,
        status: AttendanceStatus,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT_SQL, (int(user_id), meal_date, meal_type.value, status.value))

    def bulk_upsert_status(
        self,
        *,
        user_id: int,
        dates: Iterable[date],
        meal_types: Iterable[MealType],
        status: AttendanceStatus,
    ) -> int:
        meals = list(meal_types)
        params = [(int(user_id), d, m.value, status.value) for d in dates for m in meals]
        if not params:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_UPSERT_SQL, params)
        return len(params)

    def list_for_user(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, meal_date, meal_type, status, updated_at
                FROM attendance_logs
                WHERE user_id=%s AND meal_date BETWEEN %s AND %s
                ORDER BY meal_date ASC, FIELD(meal_type, 'breakfast', 'lunch', 'dinner')
                """,
                (int(user_id), start_date, end_date),
            )
            return [
                AttendanceRecord(
                    user_id=int(r["user_id"]),
                    meal_date=r["meal_date"],
                    meal_type=MealType(r["meal_type"]),
                    status=AttendanceStatus(r["status"]),
                    updated_at=r.get("updated_at"),
                )
                for r in fetchall(cur)
            ]

    def count_by_status_for_date(self, *, meal_date: date) -> Dict[Tuple[MealType, AttendanceStatus], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT meal_type, status, COUNT(*) AS cnt
                FROM attendance_logs
                WHERE meal_date=%s
                GROUP BY meal_type, status
                """,
                (meal_date,),
            )
            return {
                (MealType(r["meal_type"]), AttendanceStatus(r["status"])): as_int(r["cnt"])
                for r in fetchall(cur)
            }
