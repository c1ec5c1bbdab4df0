"""Week-view date windowing.

The window always starts on a Monday and always ends on the Sunday closing
the week that contains ``today``. When the pact started in an earlier week
the window reaches back to the Monday of that week, so a pact that began
six weeks ago renders as seven full weeks.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

MIN_WINDOW_DAYS = 7
_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True, slots=True)
class Day:
    date: date
    is_today: bool

    @property
    def key(self) -> str:
        return day_key(self.date)


def day_key(d: date) -> str:
    """Calendar key in ``YYYY-MM-DD`` built from the date's own (local) components."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def start_of_week(d: date) -> date:
    """Monday at or before ``d``. Datetimes are truncated to their calendar date first."""
    if isinstance(d, datetime):
        d = d.date()
    return d - timedelta(days=d.weekday())


def build_week_window(today: date, pact_start: date | None = None) -> list[Day]:
    if isinstance(today, datetime):
        today = today.date()
    if isinstance(pact_start, datetime):
        pact_start = pact_start.date()

    base = pact_start if pact_start is not None else today
    today_week = start_of_week(today)
    range_start = min(start_of_week(base), today_week)
    range_end = today_week + timedelta(days=6)

    count = max(MIN_WINDOW_DAYS, (range_end - range_start).days + 1)
    days = []
    for offset in range(count):
        d = range_start + timedelta(days=offset)
        days.append(Day(date=d, is_today=(d == today)))
    return days


def today_index(days: list[Day]) -> int:
    """Index of today's cell, or -1 when the window does not contain it."""
    for idx, day in enumerate(days):
        if day.is_today:
            return idx
    return -1


def parse_pact_start(value: str | None, tz: tzinfo) -> date | None:
    """Turn the backend's ``startDate`` into the calendar date the user sees.

    Timestamps carrying an offset are moved into ``tz`` before truncation;
    naive timestamps and bare ``YYYY-MM-DD`` values are taken as written.
    """
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None
    if _DATE_ONLY_RE.match(raw):
        return date.fromisoformat(raw)

    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()
