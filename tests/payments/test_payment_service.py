from datetime import date

import pytest

from src.mess_system.mess_system.core.enums import PaymentStatus
from src.mess_system.mess_system.core.exceptions import NotFoundError, ValidationError


def test_submit_payment(container):
    payment = container.payment_service.submit_payment(
        user_id=1, amount="2500", transaction_id=" TXN123 ", payment_method="upi", billing_month="2024-06"
    )
    assert payment.status == PaymentStatus.PENDING
    assert payment.amount == 2500.0
    assert payment.transaction_id == "TXN123"
    assert payment.billing_month == date(2024, 6, 1)


@pytest.mark.parametrize(
    "amount, txn, method",
    [(0, "T1", "upi"), ("abc", "T1", "upi"), (100, "", "upi"), (100, "T1", "  ")],
)
def test_submit_payment_validation(container, amount, txn, method):
    with pytest.raises(ValidationError):
        container.payment_service.submit_payment(user_id=1, amount=amount, transaction_id=txn, payment_method=method)


def test_submit_payment_unknown_user(container):
    with pytest.raises(NotFoundError):
        container.payment_service.submit_payment(user_id=404, amount=10, transaction_id="T", payment_method="cash")


def test_payment_status_does_not_touch_bill(container, repos):
    container.attendance_service.set_status(user_id=1, meal_date="2024-06-01", meal_type="lunch", status="will_attend")
    payment = container.payment_service.submit_payment(
        user_id=1, amount=48, transaction_id="T1", payment_method="upi", billing_month="2024-06"
    )

    approved = container.payment_service.set_payment_status(payment_id=payment.payment_id, status="approved")

    assert approved.status == PaymentStatus.APPROVED
    assert repos.billing.get(user_id=1, billing_month=date(2024, 6, 1)).is_paid is False


def test_set_status_unknown_payment(container):
    with pytest.raises(NotFoundError):
        container.payment_service.set_payment_status(payment_id=5, status="approved")


def test_list_for_user_by_month(container):
    svc = container.payment_service
    svc.submit_payment(user_id=1, amount=10, transaction_id="A", payment_method="upi", billing_month="2024-06")
    svc.submit_payment(user_id=1, amount=10, transaction_id="B", payment_method="upi", billing_month="2024-07")
    svc.submit_payment(user_id=2, amount=10, transaction_id="C", payment_method="upi", billing_month="2024-06")

    assert [p.transaction_id for p in svc.list_for_user(user_id=1, billing_month="2024-06")] == ["A"]
    assert len(svc.list_for_user(user_id=1)) == 2


def test_update_settings_changes_only_given_fields(container):
    svc = container.payment_service
    svc.update_settings(qr_code_path="/uploads/qr.png", upi_id="mess@upi", upi_name="Mess")

    updated = svc.update_settings(upi_name="Hostel Mess")
    assert updated.qr_code_path == "/uploads/qr.png"
    assert updated.upi_id == "mess@upi"
    assert updated.upi_name == "Hostel Mess"

    cleared = svc.update_settings(qr_code_path=None)
    assert cleared.qr_code_path is None
    assert svc.get_settings().upi_id == "mess@upi"
