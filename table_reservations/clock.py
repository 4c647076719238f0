from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable

import holidays as pyholidays

Clock = Callable[[], datetime]

_HOLIDAY_CACHE: dict[tuple[str, int], set[date]] = {}


def system_clock() -> datetime:
    return datetime.now()


def today(clock: Clock | None = None) -> date:
    """Return the local calendar date; time of day is discarded."""
    return (clock or system_clock)().date()


def parse_calendar_date(value: object) -> date | None:
    """Parse a ``YYYY-MM-DD`` string (or pass through a date). None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_time_of_day(value: object) -> time | None:
    """Parse ``HH:MM`` (``HH:MM:SS`` tolerated) into a minute-resolution time."""
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not isinstance(value, str):
        return None
    text = value.strip()
    for pattern in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(text, pattern).time().replace(second=0)
        except ValueError:
            continue
    return None


def is_before_today(target: date, reference: date) -> bool:
    return target < reference


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def is_public_holiday(target: date, country: str) -> bool:
    key = (country, target.year)
    if key not in _HOLIDAY_CACHE:
        holiday_map = pyholidays.country_holidays(country, years=[target.year])
        _HOLIDAY_CACHE[key] = set(holiday_map.keys())
    return target in _HOLIDAY_CACHE[key]
