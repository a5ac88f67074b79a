from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import Payment, PaymentSettings


class PaymentRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        amount: float,
        transaction_id: str,
        payment_method: str,
        billing_month: Optional[date],
    ) -> int:
        raise NotImplementedError

    def get(self, *, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, billing_month: Optional[date] = None) -> Sequence[Payment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[dict]:
        raise NotImplementedError

    def set_status(self, *, payment_id: int, status: PaymentStatus) -> bool:
        raise NotImplementedError

    def get_settings(self) -> PaymentSettings:
        raise NotImplementedError

    def save_settings(self, settings: PaymentSettings) -> None:
        raise NotImplementedError
