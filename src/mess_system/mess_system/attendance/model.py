from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, MealType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: status of one meal slot (user, date, meal type)."""

    user_id: int
    meal_date: date
    meal_type: MealType
    status: AttendanceStatus
    updated_at: Optional[datetime] = None

    def is_locked(self, today: date) -> bool:
        """Past dates are shown read-only; writes are still accepted at the data layer."""
        return self.meal_date < today


@dataclass(frozen=True)
class MealSlot:
    """Read-model for one meal of a day, `not_set` when nothing was stored."""

    meal_date: date
    meal_type: MealType
    status: AttendanceStatus
    is_locked: bool


@dataclass(frozen=True)
class AttendanceSummary:
    attended: int
    skipped: int
    on_leave: int
    estimated_amount: float
