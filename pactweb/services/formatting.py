from datetime import date, datetime, tzinfo

from pactweb.services.week_window import parse_pact_start

NOT_SET = "Not set"
INVALID_DATE = "Invalid date"
RUPEE = "₹"
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _to_date(value: date | str, tz: tzinfo | None) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_pact_start(value, tz) if tz is not None else None
    if parsed is None:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    return parsed


def format_date(value: date | str | None, tz: tzinfo | None = None) -> str:
    """``Jun 13, 2024`` style label."""
    if value is None or value == "":
        return NOT_SET
    try:
        d = _to_date(value, tz)
    except ValueError:
        return INVALID_DATE
    return f"{MONTHS[d.month - 1]} {d.day}, {d.year}"


def format_month_day(d: date) -> str:
    return f"{MONTHS[d.month - 1]} {d.day}"


def format_date_range(start: str | None, end: str | None, tz: tzinfo | None = None) -> str:
    if not start and not end:
        return NOT_SET
    if start and end:
        return f"{format_date(start, tz)} - {format_date(end, tz)}"
    if start:
        return f"Starts {format_date(start, tz)}"
    return f"Ends {format_date(end, tz)}"


def _group_indian(digits: str) -> str:
    # Last three digits form one group, the rest are grouped in pairs: 12,34,567.
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: float | int) -> str:
    """Rupee amount with Indian digit grouping, e.g. ``₹1,00,000.00``."""
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    return f"{sign}{RUPEE}{_group_indian(whole)}.{fraction}"
