from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MessStatus, PackageId, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, full_name, email, role, mobile_number, mess_status,
    selected_package, package_amount, total_amount, created_at
"""


def _row_to_user(row: dict) -> User:
    package = row.get("selected_package")
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        role=Role(row["role"]),
        mobile_number=row.get("mobile_number"),
        mess_status=MessStatus(row.get("mess_status") or MessStatus.ACTIVE.value),
        selected_package=PackageId(package) if package else None,
        package_amount=as_float(row.get("package_amount")),
        total_amount=as_float(row.get("total_amount")),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC")
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_students(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE role=%s ORDER BY full_name ASC",
                (Role.STUDENT.value,),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def update_profile(
        self,
        *,
        user_id: int,
        email: str,
        full_name: str,
        mobile_number: Optional[str],
        mess_status: MessStatus,
        total_amount: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._exists(cur, user_id):
                return False
            cur.execute(
                """
                UPDATE users
                SET email=%s, full_name=%s, mobile_number=%s, mess_status=%s, total_amount=%s
                WHERE user_id=%s
                """,
                (email, full_name, mobile_number, mess_status.value, total_amount, int(user_id)),
            )
            return True

    def set_package(self, *, user_id: int, package: PackageId, package_amount: float, total_amount: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._exists(cur, user_id):
                return False
            cur.execute(
                """
                UPDATE users
                SET selected_package=%s, package_amount=%s, total_amount=%s
                WHERE user_id=%s
                """,
                (package.value, package_amount, total_amount, int(user_id)),
            )
            return True

    def delete_cascade(self, user_id: int) -> bool:
        uid = int(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            for table in ("attendance_logs", "billing_records", "leave_requests", "payments"):
                cur.execute(f"DELETE FROM {table} WHERE user_id=%s", (uid,))
            cur.execute("DELETE FROM users WHERE user_id=%s", (uid,))
            return cur.rowcount > 0

    @staticmethod
    def _exists(cur, user_id: int) -> bool:
        # rowcount reports changed rows, so an UPDATE that rewrites equal values looks like a miss.
        cur.execute("SELECT user_id FROM users WHERE user_id=%s", (int(user_id),))
        return fetchone(cur) is not None
