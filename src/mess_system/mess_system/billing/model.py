from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MealType


@dataclass(frozen=True)
class MealCounts:
    breakfast: int = 0
    lunch: int = 0
    dinner: int = 0

    @property
    def total(self) -> int:
        return self.breakfast + self.lunch + self.dinner

    def for_meal(self, meal_type: MealType) -> int:
        return {
            MealType.BREAKFAST: self.breakfast,
            MealType.LUNCH: self.lunch,
            MealType.DINNER: self.dinner,
        }[meal_type]


@dataclass(frozen=True)
class BillingRecord:
    """Domain entity: the monthly bill of one user, derived from the attendance log."""

    user_id: int
    billing_month: date
    breakfast_count: int
    lunch_count: int
    dinner_count: int
    total_meals: int
    total_amount: float
    is_paid: bool = False
    billing_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def counts(self) -> MealCounts:
        return MealCounts(breakfast=self.breakfast_count, lunch=self.lunch_count, dinner=self.dinner_count)


@dataclass(frozen=True)
class MonthRollup:
    """Billing totals across all students for one month (read-model for reports)."""

    billing_month: date
    total_students: int
    total_meals: int
    total_amount: float
    paid_count: int
