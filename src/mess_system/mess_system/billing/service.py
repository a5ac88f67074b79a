from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_end, parse_billing_month
from ..common.events import EventBus
from ..common.transactions import TransactionFactory, run_in_transaction
from ..core.constants import BILLING_CHANGED_EVENT
from ..core.exceptions import NotFoundError
from ..users.repository import UserRepository
from .calculator.base import BillingCalculator
from .calculator.per_meal_calculator import PerMealCalculator
from .model import BillingRecord
from .repository import BillingRepository

logger = logging.getLogger(__name__)

class BillingService:
    """Recalculation engine: a monthly bill is always rebuilt from the attendance log.

    Counts are never adjusted incrementally. Each recalculation reads every slot
    of the month and overwrites the record, so running it twice over unchanged
    attendance leaves the record as it was, and concurrent runs converge.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        billing: BillingRepository,
        users: UserRepository,
        *,
        calculator: Optional[BillingCalculator] = None,
        events: Optional[EventBus] = None,
        transaction: Optional[TransactionFactory] = None,
    ):
        self._attendance = attendance
        self._billing = billing
        self._users = users
        self._calculator = calculator or PerMealCalculator()
        self._events = events
        self._transaction = transaction or nullcontext

    @property
    def calculator(self) -> BillingCalculator:
        return self._calculator

    def recalculate(self, user_id: int, billing_month) -> BillingRecord:
        """Rebuild the bill of `user_id` for the month containing `billing_month`."""
        month = parse_billing_month(billing_month)
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

        record = run_in_transaction(self._transaction, lambda: self.recompute_within(int(user_id), month))

        self.announce(int(user_id), month)
        return record

    def lock_month(self, user_id: int, month: date) -> None:
        """Create the (user, month) bill row if needed and hold its write lock until commit.

        Every writer that ends in a recalculation takes this lock before touching
        attendance, so writers for one user and month queue up in the same order.
        """
        self._billing.ensure_exists(user_id=user_id, billing_month=month)

    def recompute_within(self, user_id: int, month: date) -> BillingRecord:
        """Recalculation step for callers that already hold a transaction.

        The caller's pending attendance writes are visible here because the read
        goes through the same transaction. Call `announce` once it commits.
        """
        self.lock_month(user_id, month)

        records = self._attendance.list_for_user(user_id=user_id, start_date=month, end_date=month_end(month))
        counts = self._calculator.count_meals(records)
        total_amount = self._calculator.amount(counts)

        self._billing.save_totals(user_id=user_id, billing_month=month, counts=counts, total_amount=total_amount)
        logger.info(
            "Recalculated billing user=%s month=%s meals=%d/%d/%d amount=%.2f",
            user_id,
            month.strftime("%Y-%m"),
            counts.breakfast,
            counts.lunch,
            counts.dinner,
            total_amount,
        )

        record = self._billing.get(user_id=user_id, billing_month=month)
        if record is None:
            raise NotFoundError("Billing record not found")
        return record

    def announce(self, user_id: int, month: date) -> None:
        if self._events:
            self._events.publish(BILLING_CHANGED_EVENT, {"user_id": int(user_id), "billing_month": month})

    def set_paid(self, *, user_id: int, billing_month, is_paid: bool) -> BillingRecord:
        """Payment ledger toggle: flips `is_paid` and nothing else."""
        month = parse_billing_month(billing_month)

        def toggle() -> BillingRecord:
            if not self._billing.set_paid(user_id=int(user_id), billing_month=month, is_paid=bool(is_paid)):
                raise NotFoundError("Billing record not found")
            return self._billing.get(user_id=int(user_id), billing_month=month)

        record = run_in_transaction(self._transaction, toggle)

        logger.info("Billing user=%s month=%s marked %s", user_id, month.strftime("%Y-%m"), "paid" if is_paid else "unpaid")
        self.announce(int(user_id), month)
        return record

    def get_record(self, *, user_id: int, billing_month) -> Optional[BillingRecord]:
        return self._billing.get(user_id=int(user_id), billing_month=parse_billing_month(billing_month))

    def history(self, *, user_id: int) -> Sequence[BillingRecord]:
        return self._billing.list_for_user(user_id=int(user_id))

    def list_all(self) -> Sequence[dict]:
        return self._billing.list_all()

    def month_summary(self, *, billing_month) -> Sequence[dict]:
        return self._billing.list_month_summary(billing_month=parse_billing_month(billing_month))
