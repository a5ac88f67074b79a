from datetime import date, datetime

import pytest

from src.mess_system.mess_system.common.datetime_utils import (
    iter_dates,
    month_end,
    months_touched,
    parse_billing_month,
    parse_iso_date,
)
from src.mess_system.mess_system.core.exceptions import ValidationError


def test_parse_iso_date():
    assert parse_iso_date(" 2024-02-29 ") == date(2024, 2, 29)
    with pytest.raises(ValidationError):
        parse_iso_date("2023-02-29")


@pytest.mark.parametrize(
    "value", ["2024-06", "2024-06-17", date(2024, 6, 30), datetime(2024, 6, 2, 23, 59)]
)
def test_parse_billing_month(value):
    assert parse_billing_month(value) == date(2024, 6, 1)


@pytest.mark.parametrize("value", ["06-2024", "", None, 202406])
def test_parse_billing_month_rejects(value):
    with pytest.raises(ValidationError):
        parse_billing_month(value)


def test_month_end_handles_leap_year():
    assert month_end(date(2024, 2, 10)) == date(2024, 2, 29)
    assert month_end(date(2023, 2, 10)) == date(2023, 2, 28)


def test_iter_dates_inclusive():
    assert list(iter_dates(date(2024, 6, 29), date(2024, 7, 1))) == [
        date(2024, 6, 29),
        date(2024, 6, 30),
        date(2024, 7, 1),
    ]


def test_months_touched_across_year_end():
    assert months_touched(date(2024, 12, 30), date(2025, 2, 1)) == [
        date(2024, 12, 1),
        date(2025, 1, 1),
        date(2025, 2, 1),
    ]
