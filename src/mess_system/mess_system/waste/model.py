from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MealType


@dataclass(frozen=True)
class WasteRecord:
    """Food served vs consumed for one meal of one day."""

    waste_id: int
    meal_date: date
    meal_type: MealType
    total_served: int
    total_consumed: int
    waste_amount: int
    waste_percentage: float
    notes: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WasteSummaryRow:
    meal_type: MealType
    days: int
    total_served: int
    total_consumed: int
    waste_amount: int
    waste_percentage: float
