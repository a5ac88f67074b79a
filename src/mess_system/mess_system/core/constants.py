"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus, MealType, PackageId

DEFAULT_MEAL_PRICES = {
    MealType.BREAKFAST: 30,
    MealType.LUNCH: 48,
    MealType.DINNER: 42,
}

PACKAGE_PRICES = {
    PackageId.BASIC: 2500,
    PackageId.PREMIUM: 3500,
    PackageId.DELUXE: 4500,
}

# Statuses that count toward the monthly bill.
BILLABLE_STATUSES = frozenset({AttendanceStatus.WILL_ATTEND, AttendanceStatus.CONSUMED})

# Statuses reported as skipped in attendance summaries.
SKIPPED_STATUSES = frozenset({AttendanceStatus.SKIP, AttendanceStatus.NOT_ATTENDED})

DEFAULT_LIST_LIMIT = 200

BILLING_CHANGED_EVENT = "billing-changed"
