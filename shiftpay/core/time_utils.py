"""Decimal and timezone primitives shared by the pay engine."""

import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shiftpay.core.constants import (
    CURRENCY_QUANTUM,
    HOURS_PER_DAY,
    HOURS_QUANTUM,
    MICROSECONDS_PER_HOUR,
    TIME_END_OF_DAY_STRING,
)
from shiftpay.core.exceptions import UnknownTimezone

logger = logging.getLogger(__name__)

UTC = datetime.timezone.utc

_ONE_MICROSECOND = datetime.timedelta(microseconds=1)
_END_OF_DAY = datetime.timedelta(hours=HOURS_PER_DAY)


@lru_cache(maxsize=64)
def resolve_timezone(name: str) -> ZoneInfo:
    """Return the ZoneInfo for an IANA identifier.

    Raises:
        UnknownTimezone: If the identifier is empty, malformed or unknown.
    """
    if not name or not name.strip():
        raise UnknownTimezone(name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning("Rejected unknown timezone %r", name)
        raise UnknownTimezone(name) from e


def as_utc(instant: datetime.datetime) -> datetime.datetime:
    """Normalise an instant to UTC. Naive values are read as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def parse_time_of_day(value: Any) -> datetime.timedelta:
    """Parse a rule window time into an offset from local midnight.

    Accepts "HH:MM" strings, "24:00" (end of day) and datetime.time objects.
    """
    if isinstance(value, datetime.time):
        return datetime.timedelta(hours=value.hour, minutes=value.minute, seconds=value.second)

    if not isinstance(value, str):
        raise ValueError(f"Unsupported time type: {type(value).__name__}")

    s = value.strip()
    if s == TIME_END_OF_DAY_STRING:
        return _END_OF_DAY

    parts = s.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Time must be in HH:MM format (24-hour): {value!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < HOURS_PER_DAY and 0 <= minutes < 60):
        raise ValueError(f"Time must be in HH:MM format (24-hour): {value!r}")
    return datetime.timedelta(hours=hours, minutes=minutes)


def local_instant(day: datetime.date, offset: datetime.timedelta, tz: ZoneInfo) -> datetime.datetime:
    """UTC instant of a local wall-clock time, given as an offset from midnight of `day`."""
    wall = datetime.datetime.combine(day, datetime.time(0), tzinfo=tz) + offset
    return wall.astimezone(UTC)


def local_midnight(day: datetime.date, tz: ZoneInfo) -> datetime.datetime:
    return local_instant(day, datetime.timedelta(0), tz)


def wall_clock_instants(day: datetime.date, offset: datetime.timedelta, tz: ZoneInfo) -> list[datetime.datetime]:
    """Every UTC instant at which the local clock reads `offset` past midnight of `day`.

    Two instants for a wall time repeated when clocks go back, none for a
    wall time skipped when clocks go forward.
    """
    wall = datetime.datetime.combine(day, datetime.time(0)) + offset
    instants = set()
    for fold in (0, 1):
        instant = wall.replace(tzinfo=tz, fold=fold).astimezone(UTC)
        if instant.astimezone(tz).replace(tzinfo=None) == wall:
            instants.add(instant)
    return sorted(instants)


def utc_offset_changes(start: datetime.datetime, end: datetime.datetime, tz: ZoneInfo) -> list[datetime.datetime]:
    """UTC instants strictly inside (start, end) where the zone's UTC offset changes.

    Finds at most one change, which holds for any span within one local day.
    """
    start, end = as_utc(start), as_utc(end)
    before = start.astimezone(tz).utcoffset()
    if end.astimezone(tz).utcoffset() == before:
        return []

    lo, hi = start, end
    while hi - lo > _ONE_MICROSECOND:
        mid = lo + (hi - lo) // 2
        if mid.astimezone(tz).utcoffset() == before:
            lo = mid
        else:
            hi = mid

    return [hi] if start < hi < end else []


def time_since_local_midnight(instant: datetime.datetime, tz: ZoneInfo) -> datetime.timedelta:
    """Wall-clock offset of an instant from its local midnight."""
    local = instant.astimezone(tz)
    return datetime.timedelta(
        hours=local.hour,
        minutes=local.minute,
        seconds=local.second,
        microseconds=local.microsecond,
    )


def rule_weekday(day: datetime.date) -> int:
    """Day of week as stored on rule windows (0=Sunday ... 6=Saturday)."""
    return (day.weekday() + 1) % 7


def to_microseconds(delta: datetime.timedelta) -> int:
    return delta // _ONE_MICROSECOND


def hours_from_microseconds(microseconds: int) -> Decimal:
    """Exact decimal hours for a duration in microseconds."""
    return Decimal(microseconds) / Decimal(MICROSECONDS_PER_HOUR)


def microseconds_from_hours(hours: Decimal) -> int:
    return int((hours * MICROSECONDS_PER_HOUR).to_integral_value(rounding=ROUND_HALF_UP))


def round_currency(amount: Decimal) -> Decimal:
    """Round to cents, half up."""
    return amount.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def round_hours(hours: Decimal) -> Decimal:
    return hours.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)
