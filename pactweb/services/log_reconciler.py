from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pactweb.schemas.activity_log import DayLogs, LogSummary
from pactweb.services.week_window import Day


@dataclass(frozen=True, slots=True)
class ReconciledDay:
    day: Day
    logs: tuple[LogSummary, ...]


def index_logs_by_date(entries: Iterable[DayLogs]) -> dict[str, tuple[LogSummary, ...]]:
    # The backend sends at most one entry per date; keep the first if it ever repeats.
    out: dict[str, tuple[LogSummary, ...]] = {}
    for entry in entries:
        if entry.date not in out:
            out[entry.date] = tuple(entry.logs)
    return out


def reconcile_logs(days: Sequence[Day], entries: Iterable[DayLogs] | None) -> list[ReconciledDay]:
    """Attach each day's logs in backend order; days without an entry get an empty tuple."""
    by_date = index_logs_by_date(entries or [])
    return [ReconciledDay(day=day, logs=by_date.get(day.key, ())) for day in days]
