from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import BillingRecord, MealCounts, MonthRollup


class BillingRepository(Protocol):
    def get(self, *, user_id: int, billing_month: date) -> Optional[BillingRecord]:
        raise NotImplementedError

    def ensure_exists(self, *, user_id: int, billing_month: date) -> None:
        """Create a zeroed, unpaid record when absent and lock it for the current transaction."""

        raise NotImplementedError

    def save_totals(self, *, user_id: int, billing_month: date, counts: MealCounts, total_amount: float) -> None:
        """Overwrite counts and amount. Never touches `is_paid`."""

        raise NotImplementedError

    def set_paid(self, *, user_id: int, billing_month: date, is_paid: bool) -> bool:
        """Change only the paid flag. Returns False when no record exists."""

        raise NotImplementedError

    def list_for_user(self, *, user_id: int) -> Sequence[BillingRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[dict]:
        """Admin listing joined with user names."""

        raise NotImplementedError

    def list_month_summary(self, *, billing_month: date) -> Sequence[dict]:
        """Every student with their record for the month, zero-filled when absent."""

        raise NotImplementedError

    def month_rollup(self, *, billing_month: date) -> MonthRollup:
        raise NotImplementedError
