"""
Calendar helpers shared by the attendance, leave and remuneration services.

All attendance timestamps are naive wall-clock datetimes in settings.TIMEZONE,
so "today" and the late cutoff are always judged in organization-local time.
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple
from zoneinfo import ZoneInfo
from hrms.core.config import settings

MONTH_NAMES = list(calendar.month_name)[1:]

def local_now() -> datetime:
    """Current wall-clock time in the organization's timezone (naive)"""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)

def local_today() -> date:
    return local_now().date()

def at_hour(day: date, hour: int) -> datetime:
    return datetime.combine(day, datetime.min.time()).replace(hour=hour)

def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours rounded to 2 decimals, never negative"""
    return max(round((end - start).total_seconds() / 3600, 2), 0.0)

def month_bounds(month: int, year: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)

def year_bounds(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)

def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]

def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in [start, end] inclusive"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)

def is_weekend(day: date) -> bool:
    return day.weekday() >= 5

def resolve_month_year(month: Optional[int], year: Optional[int], today: Optional[date] = None) -> Tuple[int, int]:
    """Fill in the current month/year for whichever part is missing"""
    today = today or local_today()
    return month or today.month, year or today.year
