from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import Payment, PaymentSettings
from .repository import PaymentRepository

_PAYMENT_COLUMNS = "payment_id, user_id, amount, transaction_id, payment_method, billing_month, status, created_at"


def _row_to_payment(r: dict) -> Payment:
    return Payment(
        payment_id=int(r["payment_id"]),
        user_id=int(r["user_id"]),
        amount=as_float(r["amount"]),
        transaction_id=r["transaction_id"],
        payment_method=r["payment_method"],
        billing_month=r.get("billing_month"),
        status=PaymentStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        amount: float,
        transaction_id: str,
        payment_method: str,
        billing_month: Optional[date],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payments(user_id, amount, transaction_id, payment_method, billing_month, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), amount, transaction_id, payment_method, billing_month, PaymentStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, *, payment_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYMENT_COLUMNS} FROM payments WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def list_for_user(self, *, user_id: int, billing_month: Optional[date] = None) -> Sequence[Payment]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        if billing_month is not None:
            clauses.append("billing_month=%s")
            params.append(billing_month)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYMENT_COLUMNS} FROM payments WHERE {where} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_row_to_payment(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.payment_id, p.user_id, u.full_name, u.email, p.amount, p.transaction_id,
                       p.payment_method, p.billing_month, p.status, p.created_at
                FROM payments p
                JOIN users u ON u.user_id = p.user_id
                ORDER BY p.created_at DESC
                """
            )
            return [
                {
                    "payment_id": int(r["payment_id"]),
                    "user_id": int(r["user_id"]),
                    "full_name": r["full_name"],
                    "email": r["email"],
                    "amount": as_float(r["amount"]),
                    "transaction_id": r["transaction_id"],
                    "payment_method": r["payment_method"],
                    "billing_month": r["billing_month"].strftime("%Y-%m") if r.get("billing_month") else None,
                    "status": r["status"],
                    "created_at": r["created_at"].strftime("%Y-%m-%d %H:%M") if r.get("created_at") else "",
                }
                for r in fetchall(cur)
            ]

    def set_status(self, *, payment_id: int, status: PaymentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT payment_id FROM payments WHERE payment_id=%s", (int(payment_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE payments SET status=%s WHERE payment_id=%s", (status.value, int(payment_id)))
            return True

    def get_settings(self) -> PaymentSettings:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT qr_code_path, upi_id, upi_name FROM payment_settings WHERE id=1")
            r = fetchone(cur)
            if not r:
                return PaymentSettings()
            return PaymentSettings(qr_code_path=r.get("qr_code_path"), upi_id=r.get("upi_id"), upi_name=r.get("upi_name"))

    def save_settings(self, settings: PaymentSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payment_settings(id, qr_code_path, upi_id, upi_name)
                VALUES(1,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    qr_code_path=VALUES(qr_code_path), upi_id=VALUES(upi_id), upi_name=VALUES(upi_name)
                """,
                (settings.qr_code_path, settings.upi_id, settings.upi_name),
            )
