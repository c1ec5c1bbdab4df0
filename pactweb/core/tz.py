import re
import time
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")
_EPOCH = datetime(1970, 1, 1)


class LocalTimezone(tzinfo):
    """The machine's zone, applying its DST rules to each instant rather than to "now"."""

    @staticmethod
    def _local(dt: datetime) -> time.struct_time:
        stamp = time.mktime((dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, dt.weekday(), 0, -1))
        return time.localtime(stamp)

    def fromutc(self, dt: datetime) -> datetime:
        stamp = (dt.replace(tzinfo=None) - _EPOCH) // timedelta(seconds=1)
        local = time.localtime(stamp)
        return datetime(*local[:6], dt.microsecond, tzinfo=self)

    def utcoffset(self, dt: datetime | None) -> timedelta:
        if dt is None:
            return timedelta(seconds=-time.timezone)
        return timedelta(seconds=self._local(dt).tm_gmtoff)

    def dst(self, dt: datetime | None) -> timedelta:
        if dt is None:
            return timedelta(0)
        tt = self._local(dt)
        if tt.tm_isdst > 0:
            return timedelta(seconds=tt.tm_gmtoff + time.timezone)
        return timedelta(0)

    def tzname(self, dt: datetime | None) -> str:
        if dt is None:
            return time.tzname[0]
        return self._local(dt).tm_zone

    def __repr__(self) -> str:
        return "LocalTimezone()"


def resolve_tz(name: str | None) -> tzinfo:
    """Resolve ``local``, ``UTC``, an IANA name or a fixed ``+HH:MM`` offset.

    Raises ValueError for identifiers that cannot be resolved.
    """
    raw = (name or "").strip()
    low = raw.lower()
    if not raw or low in {"local", "system"}:
        return LocalTimezone()
    if low in {"utc", "z", "gmt"}:
        return timezone.utc

    m = _OFFSET_RE.match(raw)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh, mm = int(hh_s), int(mm_s)
        if hh > 23 or mm > 59:
            raise ValueError(f"Invalid timezone offset: {raw!r}")
        sign = 1 if sign_s == "+" else -1
        return timezone(sign * timedelta(hours=hh, minutes=mm))

    try:
        return ZoneInfo(raw)
    except Exception as exc:
        raise ValueError(f"Invalid timezone identifier: {raw!r}") from exc


def today_in(tz: tzinfo) -> date:
    return datetime.now(tz=tz).date()
