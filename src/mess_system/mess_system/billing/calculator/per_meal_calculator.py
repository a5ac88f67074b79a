from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ...attendance.model import AttendanceRecord
from ...core.constants import BILLABLE_STATUSES, DEFAULT_MEAL_PRICES
from ...core.enums import MealType
from ..model import MealCounts
from .base import BillingCalculator


class PerMealCalculator(BillingCalculator):
    """Standard rule: each will_attend/consumed slot is billed at its meal's unit price."""

    def __init__(self, prices: Optional[Mapping[MealType, float]] = None):
        table = dict(DEFAULT_MEAL_PRICES)
        table.update({MealType(k): float(v) for k, v in (prices or {}).items()})
        self._prices = table

    @property
    def prices(self) -> Mapping[MealType, float]:
        return dict(self._prices)

    def count_meals(self, records: Iterable[AttendanceRecord]) -> MealCounts:
        counted = {meal: 0 for meal in MealType}
        for r in records:
            if r.status in BILLABLE_STATUSES:
                counted[r.meal_type] += 1
        return MealCounts(
            breakfast=counted[MealType.BREAKFAST],
            lunch=counted[MealType.LUNCH],
            dinner=counted[MealType.DINNER],
        )

    def amount(self, counts: MealCounts) -> float:
        return float(sum(counts.for_meal(meal) * self._prices[meal] for meal in MealType))
