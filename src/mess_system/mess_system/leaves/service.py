from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..billing.service import BillingService
from ..common.datetime_utils import iter_dates, months_touched, parse_iso_date
from ..common.transactions import TransactionFactory, run_in_transaction
from ..common.validators import parse_enum
from ..core.enums import AttendanceStatus, LeaveStatus, MealType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def _as_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} is required")
    return parse_iso_date(str(value))


class LeaveService:
    """Leave ledger: submission and one-time admin decision.

    Approval overwrites every meal of every day in the range with
    `not_attended` and rebuilds the bill of each month the range touches, all
    inside the same transaction as the status change.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        attendance: AttendanceRepository,
        billing: BillingService,
        users: UserRepository,
        *,
        transaction: Optional[TransactionFactory] = None,
    ):
        self._leaves = leaves
        self._attendance = attendance
        self._billing = billing
        self._users = users
        self._transaction = transaction or nullcontext

    def submit_leave(self, *, user_id: int, start_date, end_date, reason: Optional[str] = None) -> LeaveRequest:
        start = _as_date(start_date, "Start date")
        end = _as_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must be on or after start date")

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

        leave_id = self._leaves.create(
            user_id=int(user_id),
            start_date=start,
            end_date=end,
            reason=(reason or "").strip() or None,
        )
        logger.info("Leave %s submitted by user %s for %s..%s", leave_id, user_id, start, end)

        leave = self._leaves.get(leave_id=leave_id)
        if leave is None:
            raise NotFoundError("Leave request not found")
        return leave

    def set_leave_status(self, *, leave_id: int, status) -> LeaveRequest:
        new_status = parse_enum(LeaveStatus, status, "leave status")
        if new_status == LeaveStatus.PENDING:
            raise ValidationError("Status must be 'approved' or 'rejected'")

        def decide():
            leave = self._leaves.get_for_update(leave_id=int(leave_id))
            if not leave:
                raise NotFoundError("Leave request not found")
            if leave.status != LeaveStatus.PENDING:
                raise ConflictError(f"Leave request already {leave.status.value}")

            if not self._leaves.decide(leave_id=leave.leave_id, status=new_status):
                raise ConflictError("Leave request was decided concurrently")

            if new_status == LeaveStatus.APPROVED:
                return leave, self._apply_leave(leave)
            return leave, []

        leave, touched = run_in_transaction(self._transaction, decide)

        for month in touched:
            self._billing.announce(leave.user_id, month)

        logger.info("Leave %s %s", leave.leave_id, new_status.value)
        return self._leaves.get(leave_id=leave.leave_id) or leave

    def _apply_leave(self, leave: LeaveRequest) -> list:
        months = months_touched(leave.start_date, leave.end_date)
        for month in months:
            self._billing.lock_month(leave.user_id, month)

        written = self._attendance.bulk_upsert_status(
            user_id=leave.user_id,
            dates=iter_dates(leave.start_date, leave.end_date),
            meal_types=list(MealType),
            status=AttendanceStatus.NOT_ATTENDED,
        )
        for month in months:
            self._billing.recompute_within(leave.user_id, month)

        logger.info("Leave %s marked %d meal slots not_attended across %d month(s)", leave.leave_id, written, len(months))
        return months

    def list_for_user(self, *, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(user_id=int(user_id))

    def list_all(self) -> Sequence[dict]:
        return self._leaves.list_all()
