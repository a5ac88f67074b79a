from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PaymentStatus


@dataclass(frozen=True)
class Payment:
    """A payment claim submitted by a student, confirmed or rejected by an admin."""

    payment_id: int
    user_id: int
    amount: float
    transaction_id: str
    payment_method: str
    billing_month: Optional[date]
    status: PaymentStatus
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PaymentSettings:
    qr_code_path: Optional[str] = None
    upi_id: Optional[str] = None
    upi_name: Optional[str] = None
