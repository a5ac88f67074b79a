from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import parse_billing_month
from ..common.validators import parse_enum, require_non_empty, require_positive_amount
from ..core.enums import PaymentStatus
from ..core.exceptions import NotFoundError
from ..users.repository import UserRepository
from .model import Payment, PaymentSettings
from .repository import PaymentRepository

logger = logging.getLogger(__name__)

_UNSET = object()


class PaymentService:
    """Payment claims and the QR/UPI details students pay against.

    Claims are bookkeeping only; the bill's paid flag is flipped through
    `BillingService.set_paid`.
    """

    def __init__(self, payments: PaymentRepository, users: UserRepository):
        self._payments = payments
        self._users = users

    def submit_payment(
        self,
        *,
        user_id: int,
        amount,
        transaction_id: str,
        payment_method: str,
        billing_month=None,
    ) -> Payment:
        value = require_positive_amount(amount, "Amount")
        txn = require_non_empty(transaction_id, "Transaction ID")
        method = require_non_empty(payment_method, "Payment method")
        month = parse_billing_month(billing_month) if billing_month else None

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

        payment_id = self._payments.create(
            user_id=int(user_id),
            amount=value,
            transaction_id=txn,
            payment_method=method,
            billing_month=month,
        )
        logger.info("Payment %s submitted by user %s (%.2f via %s)", payment_id, user_id, value, method)
        return self._get(payment_id)

    def list_for_user(self, *, user_id: int, billing_month=None) -> Sequence[Payment]:
        month = parse_billing_month(billing_month) if billing_month else None
        return self._payments.list_for_user(user_id=int(user_id), billing_month=month)

    def list_all(self) -> Sequence[dict]:
        return self._payments.list_all()

    def set_payment_status(self, *, payment_id: int, status) -> Payment:
        new_status = parse_enum(PaymentStatus, status, "payment status")
        if not self._payments.set_status(payment_id=int(payment_id), status=new_status):
            raise NotFoundError("Payment not found")
        logger.info("Payment %s %s", payment_id, new_status.value)
        return self._get(int(payment_id))

    def get_settings(self) -> PaymentSettings:
        return self._payments.get_settings()

    def update_settings(self, *, qr_code_path=_UNSET, upi_id=_UNSET, upi_name=_UNSET) -> PaymentSettings:
        """Change only the fields passed; pass None to clear one."""
        current = self._payments.get_settings()
        changes = {}
        for name, value in (("qr_code_path", qr_code_path), ("upi_id", upi_id), ("upi_name", upi_name)):
            if value is not _UNSET:
                changes[name] = (value or "").strip() or None
        updated = replace(current, **changes)
        self._payments.save_settings(updated)
        return updated

    def _get(self, payment_id: int) -> Payment:
        payment = self._payments.get(payment_id=payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        return payment
