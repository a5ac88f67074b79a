from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_int, db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_LEAVE_COLUMNS = "leave_id, user_id, start_date, end_date, reason, status, created_at, updated_at"


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, start_date: date, end_date: date, reason: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, *, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def get_for_update(self, *, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE leave_id=%s FOR UPDATE",
                (int(leave_id),),
            )
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def decide(self, *, leave_id: int, status: LeaveStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_for_user(self, *, user_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE user_id=%s ORDER BY created_at DESC",
                (int(user_id),),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lr.leave_id, lr.user_id, u.full_name, u.email,
                       lr.start_date, lr.end_date, lr.reason, lr.status, lr.created_at
                FROM leave_requests lr
                JOIN users u ON u.user_id = lr.user_id
                ORDER BY lr.created_at DESC
                """
            )
            return [
                {
                    "leave_id": int(r["leave_id"]),
                    "user_id": int(r["user_id"]),
                    "full_name": r["full_name"],
                    "email": r["email"],
                    "start_date": r["start_date"].strftime("%Y-%m-%d"),
                    "end_date": r["end_date"].strftime("%Y-%m-%d"),
                    "reason": r.get("reason") or "",
                    "status": r["status"],
                    "created_at": r["created_at"].strftime("%Y-%m-%d %H:%M") if r.get("created_at") else "",
                }
                for r in fetchall(cur)
            ]

    def list_approved_overlapping(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s AND status=%s AND start_date <= %s AND end_date >= %s
                ORDER BY start_date ASC
                """,
                (int(user_id), LeaveStatus.APPROVED.value, end_date, start_date),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def count_approved_covering(self, *, day: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS cnt
                FROM leave_requests
                WHERE status=%s AND %s BETWEEN start_date AND end_date
                """,
                (LeaveStatus.APPROVED.value, day),
            )
            r = fetchone(cur) or {}
            return as_int(r.get("cnt"))
