from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access checks."""

    ADMIN = "admin"
    STUDENT = "student"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class AttendanceStatus(str, Enum):
    """Per meal slot status stored in the attendance log."""

    WILL_ATTEND = "will_attend"
    CONSUMED = "consumed"
    SKIP = "skip"
    NOT_ATTENDED = "not_attended"
    LEAVE = "leave"
    NOT_SET = "not_set"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MessStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PackageId(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"
    DELUXE = "deluxe"
