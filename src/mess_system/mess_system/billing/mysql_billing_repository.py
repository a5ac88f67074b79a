from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_int, db_cursor, fetchall, fetchone
from .model import BillingRecord, MealCounts, MonthRollup
from .repository import BillingRepository


def _row_to_record(r: dict) -> BillingRecord:
    return BillingRecord(
        billing_id=int(r["billing_id"]),
        user_id=int(r["user_id"]),
        billing_month=r["billing_month"],
        breakfast_count=as_int(r["breakfast_count"]),
        lunch_count=as_int(r["lunch_count"]),
        dinner_count=as_int(r["dinner_count"]),
        total_meals=as_int(r["total_meals"]),
        total_amount=as_float(r["total_amount"]),
        is_paid=bool(r["is_paid"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLBillingRepository(BillingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, user_id: int, billing_month: date) -> Optional[BillingRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT billing_id, user_id, billing_month, breakfast_count, lunch_count, dinner_count,
                       total_meals, total_amount, is_paid, created_at, updated_at
                FROM billing_records
                WHERE user_id=%s AND billing_month=%s
                """,
                (int(user_id), billing_month),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def ensure_exists(self, *, user_id: int, billing_month: date) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO billing_records(user_id, billing_month)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE billing_id=billing_id
                """,
                (int(user_id), billing_month),
            )

    def save_totals(self, *, user_id: int, billing_month: date, counts: MealCounts, total_amount: float) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO billing_records(
                    user_id, billing_month, breakfast_count, lunch_count, dinner_count, total_meals, total_amount
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    breakfast_count=VALUES(breakfast_count),
                    lunch_count=VALUES(lunch_count),
                    dinner_count=VALUES(dinner_count),
                    total_meals=VALUES(total_meals),
                    total_amount=VALUES(total_amount)
                """,
                (
                    int(user_id),
                    billing_month,
                    counts.breakfast,
                    counts.lunch,
                    counts.dinner,
                    counts.total,
                    total_amount,
                ),
            )

    def set_paid(self, *, user_id: int, billing_month: date, is_paid: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT billing_id FROM billing_records WHERE user_id=%s AND billing_month=%s",
                (int(user_id), billing_month),
            )
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE billing_records SET is_paid=%s WHERE user_id=%s AND billing_month=%s",
                (1 if is_paid else 0, int(user_id), billing_month),
            )
            return True

    def list_for_user(self, *, user_id: int) -> Sequence[BillingRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT billing_id, user_id, billing_month, breakfast_count, lunch_count, dinner_count,
                       total_meals, total_amount, is_paid, created_at, updated_at
                FROM billing_records
                WHERE user_id=%s
                ORDER BY billing_month DESC
                """,
                (int(user_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT b.billing_id, b.user_id, u.full_name, b.billing_month,
                       b.breakfast_count, b.lunch_count, b.dinner_count,
                       b.total_meals, b.total_amount, b.is_paid, b.created_at
                FROM billing_records b
                JOIN users u ON u.user_id = b.user_id
                ORDER BY b.billing_month DESC, u.full_name ASC
                """
            )
            return [
                {
                    "billing_id": int(r["billing_id"]),
                    "user_id": int(r["user_id"]),
                    "full_name": r["full_name"],
                    "billing_month": r["billing_month"].strftime("%Y-%m"),
                    "breakfast_count": as_int(r["breakfast_count"]),
                    "lunch_count": as_int(r["lunch_count"]),
                    "dinner_count": as_int(r["dinner_count"]),
                    "total_meals": as_int(r["total_meals"]),
                    "total_amount": as_float(r["total_amount"]),
                    "is_paid": bool(r["is_paid"]),
                }
                for r in fetchall(cur)
            ]

    def list_month_summary(self, *, billing_month: date) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.email, u.mess_status,
                       b.billing_id,
                       COALESCE(b.breakfast_count, 0) AS breakfast_count,
                       COALESCE(b.lunch_count, 0) AS lunch_count,
                       COALESCE(b.dinner_count, 0) AS dinner_count,
                       COALESCE(b.total_meals, 0) AS total_meals,
                       COALESCE(b.total_amount, 0) AS total_amount,
                       COALESCE(b.is_paid, 0) AS is_paid
                FROM users u
                LEFT JOIN billing_records b
                    ON b.user_id = u.user_id AND b.billing_month = %s
                WHERE u.role = %s
                ORDER BY u.full_name ASC
                """,
                (billing_month, Role.STUDENT.value),
            )
            return [
                {
                    "user_id": int(r["user_id"]),
                    "full_name": r["full_name"],
                    "email": r["email"],
                    "mess_status": r["mess_status"],
                    "billing_id": r.get("billing_id"),
                    "billing_month": billing_month.strftime("%Y-%m"),
                    "breakfast_count": as_int(r["breakfast_count"]),
                    "lunch_count": as_int(r["lunch_count"]),
                    "dinner_count": as_int(r["dinner_count"]),
                    "total_meals": as_int(r["total_meals"]),
                    "total_amount": as_float(r["total_amount"]),
                    "is_paid": bool(r["is_paid"]),
                }
                for r in fetchall(cur)
            ]

    def month_rollup(self, *, billing_month: date) -> MonthRollup:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT u.user_id) AS total_students,
                       COALESCE(SUM(b.total_meals), 0) AS total_meals,
                       COALESCE(SUM(b.total_amount), 0) AS total_amount,
                       COALESCE(SUM(CASE WHEN b.is_paid = 1 THEN 1 ELSE 0 END), 0) AS paid_count
                FROM users u
                LEFT JOIN billing_records b
                    ON b.user_id = u.user_id AND b.billing_month = %s
                WHERE u.role = %s
                """,
                (billing_month, Role.STUDENT.value),
            )
            r = fetchone(cur) or {}
            return MonthRollup(
                billing_month=billing_month,
                total_students=as_int(r.get("total_students")),
                total_meals=as_int(r.get("total_meals")),
                total_amount=as_float(r.get("total_amount")),
                paid_count=as_int(r.get("paid_count")),
            )
