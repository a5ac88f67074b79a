from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus, MealType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_status(self, *, user_id: int, meal_date: date, meal_type: MealType) -> Optional[AttendanceStatus]:
        raise NotImplementedError

    def upsert_status(
        self,
        *,
        user_id: int,
        meal_date: date,
        meal_type: MealType,
        status: AttendanceStatus,
    ) -> None:
        """Insert the slot or overwrite its status; one row per (user, date, meal)."""

        raise NotImplementedError

    def bulk_upsert_status(
        self,
        *,
        user_id: int,
        dates: Iterable[date],
        meal_types: Iterable[MealType],
        status: AttendanceStatus,
    ) -> int:
        """Upsert every (date, meal type) pair in one round trip. Returns the number of slots written."""

        raise NotImplementedError

    def list_for_user(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status_for_date(self, *, meal_date: date) -> Dict[Tuple[MealType, AttendanceStatus], int]:
        """Number of slots per (meal type, status) on one date across all users."""

        raise NotImplementedError
