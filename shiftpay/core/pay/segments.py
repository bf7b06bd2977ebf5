"""Splitting a shift into atomic slices.

Each slice lies within one local calendar day and has a single set of
applicable rules for its whole duration, so rates can be attributed exactly
without a minute-by-minute walk.
"""

import datetime
import logging
from collections.abc import Iterable, Sequence, Set
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from shiftpay.core.models import BreakPeriod, TimeWindowRule
from shiftpay.core.time_utils import (
    as_utc,
    local_midnight,
    rule_weekday,
    time_since_local_midnight,
    to_microseconds,
    utc_offset_changes,
    wall_clock_instants,
)

from .windows import boundary_offsets

logger = logging.getLogger(__name__)

Interval = tuple[datetime.datetime, datetime.datetime]


@dataclass(frozen=True)
class Slice:
    """Worked time with one local date and one rule state."""

    start: datetime.datetime
    end: datetime.datetime
    local_date: datetime.date
    day_of_week: int  # 0=Sunday ... 6=Saturday

    @property
    def microseconds(self) -> int:
        return to_microseconds(self.end - self.start)


def subtract_breaks(
    start: datetime.datetime,
    end: datetime.datetime,
    breaks: Sequence[BreakPeriod],
) -> list[Interval]:
    """Worked intervals left after removing breaks from [start, end]."""
    result = []
    cursor = start

    for bp in sorted(breaks, key=lambda b: b.start_time):
        b_start, b_end = as_utc(bp.start_time), as_utc(bp.end_time)
        if b_end <= cursor or b_start >= end:
            continue
        if b_start > cursor:
            result.append((cursor, min(b_start, end)))
        cursor = max(cursor, b_end)

    if cursor < end:
        result.append((cursor, end))

    return result


def split_at_local_midnights(
    start: datetime.datetime,
    end: datetime.datetime,
    tz: ZoneInfo,
) -> list[tuple[datetime.date, datetime.datetime, datetime.datetime]]:
    """Split an interval into (local_date, start, end) pieces, one per local day."""
    pieces = []
    cursor = start

    while cursor < end:
        day = cursor.astimezone(tz).date()
        next_midnight = local_midnight(day + datetime.timedelta(days=1), tz)
        piece_end = min(end, next_midnight)
        pieces.append((day, cursor, piece_end))
        cursor = piece_end

    return pieces


def segment_shift(
    start: datetime.datetime,
    end: datetime.datetime,
    breaks: Sequence[BreakPeriod],
    rules: Iterable[TimeWindowRule],
    holiday_dates: Set[datetime.date],
    tz: ZoneInfo,
) -> list[Slice]:
    """Produce the ordered atomic slices of a shift.

    Args:
        start: Shift start (UTC)
        end: Shift end (UTC)
        breaks: Break periods, any order
        rules: Active penalty and overtime frames whose boundaries split slices
        holiday_dates: Local dates that are public holidays
        tz: Pay guide timezone

    Returns:
        Slices in chronological order, zero-length slices dropped
    """
    rules = list(rules)
    slices: list[Slice] = []

    for w_start, w_end in subtract_breaks(start, end, breaks):
        for day, d_start, d_end in split_at_local_midnights(w_start, w_end, tz):
            # A skipped boundary falls on the offset change, the first real wall time after it
            instants = {
                instant
                for offset in boundary_offsets(rules, day, holiday_dates)
                for instant in wall_clock_instants(day, offset, tz)
            }
            instants.update(utc_offset_changes(d_start, d_end, tz))
            cuts = sorted(instant for instant in instants if d_start < instant < d_end)
            edges = [d_start, *cuts, d_end]
            for s_start, s_end in zip(edges, edges[1:]):
                if s_end > s_start:
                    slices.append(Slice(s_start, s_end, day, rule_weekday(day)))

    logger.debug(
        "Segmented %s -> %s into %d slices",
        start.isoformat(),
        end.isoformat(),
        len(slices),
    )
    return slices


def local_offset(slice_: Slice, tz: ZoneInfo) -> datetime.timedelta:
    """Local wall-clock time at which the slice starts."""
    return time_since_local_midnight(slice_.start, tz)
