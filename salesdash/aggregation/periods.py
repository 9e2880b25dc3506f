from __future__ import annotations
import calendar
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

PERIODS = ("week", "month", "quarter", "year")

Window = Tuple[Optional[datetime], Optional[datetime]]

_END_OF_DAY = time(23, 59, 59, 999000)


def _as_local_day(d: date | datetime | None) -> date:
    if d is None:
        return datetime.now().date()
    if isinstance(d, datetime):
        if d.tzinfo is not None:
            d = d.astimezone().replace(tzinfo=None)
        return d.date()
    return d


def _last_day(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def resolve_window(period: str, reference_date: date | datetime | None = None) -> Tuple[datetime, datetime]:
    """Return the inclusive [start, end] of the calendar period containing reference_date.

    - week: Sunday 00:00:00.000 through Saturday 23:59:59.999
    - month / quarter / year: first through last calendar day
    Quarters are the 3-month blocks starting Jan, Apr, Jul, Oct.
    Pass reference_date explicitly; it only falls back to now() when omitted.
    """
    ref = _as_local_day(reference_date)
    p = (period or "").strip().lower()
    if p == "week":
        # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday is day 0
        first = ref - timedelta(days=(ref.weekday() + 1) % 7)
        last = first + timedelta(days=6)
    elif p == "month":
        first = ref.replace(day=1)
        last = _last_day(ref.year, ref.month)
    elif p == "quarter":
        qm = ((ref.month - 1) // 3) * 3 + 1
        first = date(ref.year, qm, 1)
        last = _last_day(ref.year, qm + 2)
    elif p == "year":
        first = date(ref.year, 1, 1)
        last = date(ref.year, 12, 31)
    else:
        raise ValueError(f"unknown period '{period}'; expected one of {', '.join(PERIODS)}")
    return datetime.combine(first, time.min), datetime.combine(last, _END_OF_DAY)


def _naive_local(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is not None and dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def is_in_range(timestamp: Optional[datetime], start: Optional[datetime], end: Optional[datetime]) -> bool:
    # an unset range means "all time"
    if start is None or end is None:
        return True
    if timestamp is None:
        return False
    return _naive_local(start) <= _naive_local(timestamp) <= _naive_local(end)


def check_window(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and start > end:
        raise ValueError("window start must not be after window end")


def month_keys(start: datetime, end: datetime) -> List[str]:
    """YYYY-MM keys for every calendar month touched by [start, end]."""
    keys: List[str] = []
    y, m = start.year, start.month
    while (y, m) <= (end.year, end.month):
        keys.append(f"{y:04d}-{m:02d}")
        m += 1
        if m > 12:
            y, m = y + 1, 1
    return keys


def month_label(key: str) -> str:
    yyyy, mm = key.split("-")
    return date(int(yyyy), int(mm), 1).strftime("%b %y")
