from datetime import date, datetime, timedelta, timezone

from pactweb.services.formatting import (
    INVALID_DATE,
    NOT_SET,
    format_currency,
    format_date,
    format_date_range,
    format_month_day,
)


def test_format_date_from_backend_timestamp() -> None:
    assert format_date("2024-06-13T00:00:00.000Z", timezone.utc) == "Jun 13, 2024"
    assert format_date("2024-06-13T20:00:00.000Z", timezone(timedelta(hours=5, minutes=30))) == "Jun 14, 2024"


def test_format_date_plain_values() -> None:
    assert format_date(date(2024, 1, 5)) == "Jan 5, 2024"
    assert format_date(datetime(2024, 12, 31, 23, 0)) == "Dec 31, 2024"
    assert format_date("2024-03-09") == "Mar 9, 2024"


def test_format_date_missing_and_invalid() -> None:
    assert format_date(None) == NOT_SET
    assert format_date("") == NOT_SET
    assert format_date("tomorrow") == INVALID_DATE
    assert format_date("tomorrow", timezone.utc) == INVALID_DATE


def test_format_month_day() -> None:
    assert format_month_day(date(2024, 6, 13)) == "Jun 13"


def test_format_date_range_variants() -> None:
    assert format_date_range("2024-06-01", "2024-06-30") == "Jun 1, 2024 - Jun 30, 2024"
    assert format_date_range("2024-06-01", None) == "Starts Jun 1, 2024"
    assert format_date_range(None, "2024-06-30") == "Ends Jun 30, 2024"
    assert format_date_range(None, None) == NOT_SET


def test_format_currency_uses_indian_grouping() -> None:
    assert format_currency(0) == "₹0.00"
    assert format_currency(999) == "₹999.00"
    assert format_currency(1000) == "₹1,000.00"
    assert format_currency(100000) == "₹1,00,000.00"
    assert format_currency(1234567.5) == "₹12,34,567.50"
    assert format_currency(-50) == "-₹50.00"
