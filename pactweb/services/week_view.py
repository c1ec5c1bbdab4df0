from datetime import date, tzinfo

from pactweb.core.config import settings
from pactweb.schemas.activity_log import UserLogsByPact
from pactweb.schemas.pact import Pact
from pactweb.schemas.week import ScrollHint, WeekDayOut, WeekLogOut, WeekViewResponse
from pactweb.services.formatting import format_date, format_month_day
from pactweb.services.log_reconciler import reconcile_logs
from pactweb.services.week_window import build_week_window, parse_pact_start, today_index

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def week_href(pact_id: str) -> str:
    return f"/pact/{pact_id}/week"


def log_href(pact_id: str, log_id: str) -> str:
    return f"/pact/{pact_id}/log/{log_id}"


def add_log_href(pact_id: str) -> str:
    return f"/pact/{pact_id}/log/create"


def build_week_view(pact: Pact, logs: UserLogsByPact | None, today: date, tz: tzinfo) -> WeekViewResponse:
    try:
        pact_start = parse_pact_start(pact.start_date, tz)
    except ValueError:
        pact_start = None

    days = build_week_window(today, pact_start)
    joined = reconcile_logs(days, logs.days if logs is not None else None)
    idx = today_index(days)

    cells = []
    for item in joined:
        d = item.day.date
        cells.append(
            WeekDayOut(
                date=d,
                key=item.day.key,
                weekday=WEEKDAYS[d.weekday()],
                label=format_month_day(d),
                is_today=item.day.is_today,
                logs=[WeekLogOut(log=log, href=log_href(pact.id, log.id)) for log in item.logs],
                add_log_href=add_log_href(pact.id) if item.day.is_today and not item.logs else None,
            )
        )

    return WeekViewResponse(
        pact_id=pact.id,
        pact_title=pact.title,
        today=today,
        range_label=f"{format_date(days[0].date)} – {format_date(days[-1].date)}",
        today_index=idx,
        days=cells,
        scroll=ScrollHint(
            center_index=idx if idx >= 0 else 0,
            wide_min_width=settings.wide_viewport_min_width,
        ),
    )
