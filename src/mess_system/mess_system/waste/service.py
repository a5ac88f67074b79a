from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_enum, require_non_negative_int
from ..core.enums import MealType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import WasteRecord, WasteSummaryRow
from .repository import WasteRepository

logger = logging.getLogger(__name__)


def waste_figures(total_served: int, total_consumed: int) -> tuple[int, float]:
    """(waste_amount, waste_percentage) derived from served/consumed, 0% when nothing was served."""
    amount = total_served - total_consumed
    percentage = round(amount / total_served * 100, 2) if total_served else 0.0
    return amount, percentage


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value or ""))


class WasteService:
    """Daily food waste log.

    A (date, meal) pair is recorded once; a second submission is rejected
    rather than overwriting the first. Waste figures are always computed here,
    never taken from the caller.
    """

    def __init__(self, waste: WasteRepository):
        self._waste = waste

    def add_waste_record(
        self,
        *,
        meal_date,
        meal_type,
        total_served,
        total_consumed,
        notes: Optional[str] = None,
    ) -> WasteRecord:
        day = _as_date(meal_date)
        meal = parse_enum(MealType, meal_type, "meal type")
        served = require_non_negative_int(total_served, "Total served")
        consumed = require_non_negative_int(total_consumed, "Total consumed")
        if consumed > served:
            raise ValidationError("Total consumed cannot exceed total served")

        if self._waste.exists(meal_date=day, meal_type=meal):
            raise ConflictError("Record already exists for this date and meal type")

        amount, percentage = waste_figures(served, consumed)
        waste_id = self._waste.create(
            meal_date=day,
            meal_type=meal,
            total_served=served,
            total_consumed=consumed,
            waste_amount=amount,
            waste_percentage=percentage,
            notes=(notes or "").strip(),
        )
        logger.info("Waste record %s: %s %s waste=%d (%.2f%%)", waste_id, day, meal.value, amount, percentage)

        record = self._waste.get(waste_id=waste_id)
        if record is None:
            raise NotFoundError("Waste record not found")
        return record

    def list_records(self, *, start_date=None, end_date=None, meal_type=None) -> Sequence[WasteRecord]:
        start = _as_date(start_date) if start_date else None
        end = _as_date(end_date) if end_date else None
        meal = None
        if meal_type and str(meal_type).lower() != "all":
            meal = parse_enum(MealType, meal_type, "meal type")
        return self._waste.list_records(start_date=start, end_date=end, meal_type=meal)

    def summary(self, *, start_date, end_date) -> List[WasteSummaryRow]:
        records = self.list_records(start_date=start_date, end_date=end_date)
        rows: List[WasteSummaryRow] = []
        for meal in MealType:
            items = [r for r in records if r.meal_type == meal]
            served = sum(r.total_served for r in items)
            consumed = sum(r.total_consumed for r in items)
            amount, percentage = waste_figures(served, consumed)
            rows.append(
                WasteSummaryRow(
                    meal_type=meal,
                    days=len(items),
                    total_served=served,
                    total_consumed=consumed,
                    waste_amount=amount,
                    waste_percentage=percentage,
                )
            )
        return rows
