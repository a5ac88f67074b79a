from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceRecord
from ..model import MealCounts


class BillingCalculator(ABC):
    """Calculator interface (Strategy Pattern for meal billing)."""

    @abstractmethod
    def count_meals(self, records: Iterable[AttendanceRecord]) -> MealCounts:
        raise NotImplementedError

    @abstractmethod
    def amount(self, counts: MealCounts) -> float:
        raise NotImplementedError
