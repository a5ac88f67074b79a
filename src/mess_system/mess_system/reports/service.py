from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List

from ..attendance.repository import AttendanceRepository
from ..billing.model import MonthRollup
from ..billing.repository import BillingRepository
from ..common.datetime_utils import month_start, parse_billing_month
from ..core.enums import AttendanceStatus, MealType
from ..leaves.repository import LeaveRepository

logger = logging.getLogger(__name__)

# Statuses broken out per meal in the daily report.
_REPORTED_STATUSES = (
    AttendanceStatus.WILL_ATTEND,
    AttendanceStatus.CONSUMED,
    AttendanceStatus.NOT_ATTENDED,
    AttendanceStatus.SKIP,
)


@dataclass(frozen=True)
class DailyReport:
    day: date
    attendance: List[dict]
    billing: MonthRollup
    leaves: int


class ReportService:
    """Read-only rollups over attendance and billing, queried fresh on every call."""

    def __init__(self, attendance: AttendanceRepository, billing: BillingRepository, leaves: LeaveRepository):
        self._attendance = attendance
        self._billing = billing
        self._leaves = leaves

    def month_rollup(self, billing_month) -> MonthRollup:
        return self._billing.month_rollup(billing_month=parse_billing_month(billing_month))

    def daily_report(self, day: date) -> DailyReport:
        counts = self._attendance.count_by_status_for_date(meal_date=day)

        attendance = []
        for meal in MealType:
            row = {"meal_type": meal.value, "total": 0}
            for status in _REPORTED_STATUSES:
                row[status.value] = 0
            for (m, status), n in counts.items():
                if m != meal:
                    continue
                row["total"] += n
                if status.value in row:
                    row[status.value] = n
            attendance.append(row)

        report = DailyReport(
            day=day,
            attendance=attendance,
            billing=self.month_rollup(month_start(day)),
            leaves=self._leaves.count_approved_covering(day=day),
        )
        logger.debug("Built daily report for %s", day)
        return report
