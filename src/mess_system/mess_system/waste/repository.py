from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import MealType
from .model import WasteRecord


class WasteRepository(Protocol):
    def exists(self, *, meal_date: date, meal_type: MealType) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        meal_date: date,
        meal_type: MealType,
        total_served: int,
        total_consumed: int,
        waste_amount: int,
        waste_percentage: float,
        notes: str,
    ) -> int:
        """Insert a record; raises ConflictError when (meal_date, meal_type) already exists."""

        raise NotImplementedError

    def get(self, *, waste_id: int) -> Optional[WasteRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        meal_type: Optional[MealType] = None,
    ) -> Sequence[WasteRecord]:
        raise NotImplementedError
