from datetime import date

import pytest

from src.mess_system.mess_system.core.constants import BILLING_CHANGED_EVENT
from src.mess_system.mess_system.core.enums import AttendanceStatus, MealType
from src.mess_system.mess_system.core.exceptions import ConcurrencyError, NotFoundError, ValidationError


def test_set_status_reports_change(container):
    svc = container.attendance_service
    assert svc.set_status(user_id=1, meal_date="2024-06-03", meal_type="lunch", status="will_attend") is True
    assert svc.set_status(user_id=1, meal_date="2024-06-03", meal_type="lunch", status="will_attend") is False


def test_unchanged_status_skips_recalculation(container, repos):
    seen = []
    container.events.subscribe(BILLING_CHANGED_EVENT, seen.append)
    svc = container.attendance_service

    svc.set_status(user_id=1, meal_date=date(2024, 6, 3), meal_type="lunch", status="will_attend")
    svc.set_status(user_id=1, meal_date=date(2024, 6, 3), meal_type="lunch", status="will_attend")

    assert len(seen) == 1
    assert repos.billing.get(user_id=1, billing_month=date(2024, 6, 1)).total_meals == 1


def test_first_write_of_non_billable_status_still_creates_bill(container, repos):
    container.attendance_service.set_status(user_id=1, meal_date="2024-06-03", meal_type="dinner", status="skip")

    record = repos.billing.get(user_id=1, billing_month=date(2024, 6, 1))
    assert record is not None
    assert record.total_amount == 0.0


@pytest.mark.parametrize(
    "meal_date, meal_type, status",
    [
        ("2024-13-01", "lunch", "will_attend"),
        ("", "lunch", "will_attend"),
        ("2024-06-03", "brunch", "will_attend"),
        ("2024-06-03", "lunch", "maybe"),
    ],
)
def test_set_status_rejects_bad_input(container, repos, meal_date, meal_type, status):
    with pytest.raises(ValidationError):
        container.attendance_service.set_status(user_id=1, meal_date=meal_date, meal_type=meal_type, status=status)
    assert repos.attendance.rows == {}


def test_set_status_unknown_user(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.set_status(user_id=404, meal_date="2024-06-03", meal_type="lunch", status="skip")


def test_past_dates_are_writable(container, repos):
    container.attendance_service.set_status(user_id=1, meal_date="2020-01-15", meal_type="breakfast", status="consumed")
    assert repos.billing.get(user_id=1, billing_month=date(2020, 1, 1)).total_amount == 30.0


def test_get_day_fills_missing_slots(container):
    container.attendance_service.set_status(user_id=1, meal_date="2024-06-14", meal_type="lunch", status="skip")

    slots = container.attendance_service.get_day(user_id=1, meal_date="2024-06-14", today=date(2024, 6, 15))

    assert [s.meal_type for s in slots] == [MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER]
    assert [s.status for s in slots] == [AttendanceStatus.NOT_SET, AttendanceStatus.SKIP, AttendanceStatus.NOT_SET]
    assert all(s.is_locked for s in slots)


def test_get_day_today_is_not_locked(container):
    slots = container.attendance_service.get_day(user_id=1, meal_date="2024-06-15", today=date(2024, 6, 15))
    assert not any(s.is_locked for s in slots)


def test_summary_counts_and_estimate(container):
    svc = container.attendance_service
    svc.set_status(user_id=1, meal_date="2024-06-01", meal_type="breakfast", status="will_attend")
    svc.set_status(user_id=1, meal_date="2024-06-01", meal_type="lunch", status="consumed")
    svc.set_status(user_id=1, meal_date="2024-06-01", meal_type="dinner", status="skip")
    svc.set_status(user_id=1, meal_date="2024-06-02", meal_type="dinner", status="not_attended")

    summary = svc.summary(user_id=1, start_date="2024-06-01", end_date="2024-06-30")

    assert summary.attended == 2
    assert summary.skipped == 2
    assert summary.on_leave == 0
    assert summary.estimated_amount == 78.0


def test_summary_counts_leave_days_within_range(container):
    leave = container.leave_service.submit_leave(user_id=1, start_date="2024-05-30", end_date="2024-06-02")
    container.leave_service.set_leave_status(leave_id=leave.leave_id, status="approved")

    summary = container.attendance_service.summary(user_id=1, start_date="2024-06-01", end_date="2024-06-30")
    assert summary.on_leave == 2


def test_summary_rejects_reversed_range(container):
    with pytest.raises(ValidationError):
        container.attendance_service.summary(user_id=1, start_date="2024-06-10", end_date="2024-06-01")


def test_bill_row_is_locked_before_slot_is_read(container, repos, monkeypatch):
    calls = []
    ensure_exists = repos.billing.ensure_exists
    get_status = repos.attendance.get_status

    def recording_ensure_exists(**kwargs):
        calls.append("lock bill")
        return ensure_exists(**kwargs)

    def recording_get_status(**kwargs):
        calls.append("read slot")
        return get_status(**kwargs)

    monkeypatch.setattr(repos.billing, "ensure_exists", recording_ensure_exists)
    monkeypatch.setattr(repos.attendance, "get_status", recording_get_status)

    container.attendance_service.set_status(user_id=1, meal_date="2024-06-03", meal_type="lunch", status="skip")

    assert calls.index("lock bill") < calls.index("read slot")


def test_write_is_retried_after_deadlock(container, repos, monkeypatch):
    monkeypatch.setattr("src.mess_system.mess_system.common.transactions.DEFAULT_RETRY_DELAY", 0)
    upsert = repos.attendance.upsert_status
    failures = [ConcurrencyError("Deadlock found when trying to get lock")]

    def flaky_upsert(**kwargs):
        upsert(**kwargs)
        if failures:
            raise failures.pop()

    monkeypatch.setattr(repos.attendance, "upsert_status", flaky_upsert)

    changed = container.attendance_service.set_status(
        user_id=1, meal_date="2024-06-03", meal_type="lunch", status="will_attend"
    )

    assert changed is True
    assert repos.transaction.rollbacks == 1
    assert repos.billing.get(user_id=1, billing_month=date(2024, 6, 1)).total_amount == 48.0
