from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict

from pactweb.schemas.activity_log import LogSummary


class WeekLogOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    log: LogSummary
    href: str


class WeekDayOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    date: date
    key: str
    weekday: str
    label: str
    is_today: bool
    logs: list[WeekLogOut]
    add_log_href: str | None = None


class ScrollHint(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    center_index: int
    wide_axis: Literal["horizontal"] = "horizontal"
    narrow_axis: Literal["vertical"] = "vertical"
    wide_min_width: int


class WeekViewResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    pact_id: str
    pact_title: str
    today: date
    range_label: str
    today_index: int
    days: list[WeekDayOut]
    scroll: ScrollHint
