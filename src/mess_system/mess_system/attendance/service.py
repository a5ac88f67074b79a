from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from typing import List, Optional, Sequence

from ..billing.service import BillingService
from ..common.datetime_utils import iter_dates, month_start, parse_iso_date, today_local
from ..common.transactions import TransactionFactory, run_in_transaction
from ..common.validators import parse_enum
from ..core.constants import BILLABLE_STATUSES, SKIPPED_STATUSES
from ..core.enums import AttendanceStatus, MealType
from ..core.exceptions import NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from ..users.repository import UserRepository
from .model import AttendanceRecord, AttendanceSummary, MealSlot
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value or ""))


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        billing: BillingService,
        leaves: Optional[LeaveRepository] = None,
        *,
        transaction: Optional[TransactionFactory] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._billing = billing
        self._leaves = leaves
        self._transaction = transaction or nullcontext

    def set_status(self, *, user_id: int, meal_date, meal_type, status) -> bool:
        """Write one meal slot; rebuild that month's bill when the status actually changed.

        Past dates are accepted so admins can correct attendance retroactively.
        Returns True when the stored status changed.
        """
        day = _as_date(meal_date)
        meal = parse_enum(MealType, meal_type, "meal type")
        new_status = parse_enum(AttendanceStatus, status, "attendance status")

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

        month = month_start(day)

        def write():
            self._billing.lock_month(int(user_id), month)
            prior = self._attendance.get_status(user_id=int(user_id), meal_date=day, meal_type=meal)
            self._attendance.upsert_status(user_id=int(user_id), meal_date=day, meal_type=meal, status=new_status)
            if prior != new_status:
                self._billing.recompute_within(int(user_id), month)
            return prior

        previous = run_in_transaction(self._transaction, write)
        changed = previous != new_status

        if not changed:
            logger.debug("Attendance user=%s %s %s unchanged (%s)", user_id, day, meal.value, new_status.value)
            return False

        logger.info(
            "Attendance user=%s %s %s: %s -> %s",
            user_id,
            day,
            meal.value,
            previous.value if previous else "none",
            new_status.value,
        )
        self._billing.announce(int(user_id), month)
        return True

    def get_day(self, *, user_id: int, meal_date, today: Optional[date] = None) -> List[MealSlot]:
        day = _as_date(meal_date)
        today = today or today_local()
        stored = {
            r.meal_type: r.status
            for r in self._attendance.list_for_user(user_id=int(user_id), start_date=day, end_date=day)
        }
        return [
            MealSlot(
                meal_date=day,
                meal_type=meal,
                status=stored.get(meal, AttendanceStatus.NOT_SET),
                is_locked=day < today,
            )
            for meal in MealType
        ]

    def list_range(self, *, user_id: int, start_date, end_date) -> Sequence[AttendanceRecord]:
        start, end = self._range(start_date, end_date)
        return self._attendance.list_for_user(user_id=int(user_id), start_date=start, end_date=end)

    def summary(self, *, user_id: int, start_date, end_date) -> AttendanceSummary:
        start, end = self._range(start_date, end_date)
        records = self._attendance.list_for_user(user_id=int(user_id), start_date=start, end_date=end)

        attended = sum(1 for r in records if r.status in BILLABLE_STATUSES)
        skipped = sum(1 for r in records if r.status in SKIPPED_STATUSES)

        calculator = self._billing.calculator
        estimated = calculator.amount(calculator.count_meals(records))

        return AttendanceSummary(
            attended=attended,
            skipped=skipped,
            on_leave=self._leave_days(int(user_id), start, end),
            estimated_amount=estimated,
        )

    def _leave_days(self, user_id: int, start: date, end: date) -> int:
        if not self._leaves:
            return 0
        leaves = self._leaves.list_approved_overlapping(user_id=user_id, start_date=start, end_date=end)
        return sum(1 for d in iter_dates(start, end) if any(lv.covers(d) for lv in leaves))

    @staticmethod
    def _range(start_date, end_date):
        start = _as_date(start_date)
        end = _as_date(end_date)
        if end < start:
            raise ValidationError("End date must be on or after start date")
        return start, end
