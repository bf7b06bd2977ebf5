"""Day and time-of-day matching shared by penalty and overtime frames."""

import datetime
from collections.abc import Iterable, Set
from typing import TypeVar

from shiftpay.core.constants import HOURS_PER_DAY
from shiftpay.core.models import TimeWindowRule
from shiftpay.core.time_utils import parse_time_of_day, rule_weekday

R = TypeVar("R", bound=TimeWindowRule)

_MIDNIGHT = datetime.timedelta(0)
_END_OF_DAY = datetime.timedelta(hours=HOURS_PER_DAY)


def window_offsets(rule: TimeWindowRule) -> tuple[datetime.timedelta, datetime.timedelta, bool]:
    """Return (start, end, wraps) as offsets from local midnight.

    A wrapping window runs from `start` to midnight and continues on the next
    day until `end`.
    """
    if rule.start_time is None or rule.end_time is None:
        return _MIDNIGHT, _END_OF_DAY, False

    start = parse_time_of_day(rule.start_time)
    end = parse_time_of_day(rule.end_time)
    return start, end, end <= start


def applies_on(rule: TimeWindowRule, day: datetime.date, holiday_dates: Set[datetime.date]) -> bool:
    """Whether the rule's day scope covers `day`.

    On a public holiday only holiday rules apply; otherwise day-of-week rules
    for that weekday (or for every weekday when day_of_week is None).
    """
    if not rule.is_active:
        return False
    if rule.is_public_holiday:
        return day in holiday_dates
    if day in holiday_dates:
        return False
    return rule.day_of_week is None or rule.day_of_week == rule_weekday(day)


def covers(
    rule: TimeWindowRule,
    day: datetime.date,
    offset: datetime.timedelta,
    holiday_dates: Set[datetime.date],
) -> bool:
    """Whether the rule's window contains local time `offset` on `day`.

    Includes the after-midnight tail of a wrapping window that started the
    previous day.
    """
    start, end, wraps = window_offsets(rule)

    if applies_on(rule, day, holiday_dates):
        if wraps and offset >= start:
            return True
        if not wraps and start <= offset < end:
            return True

    if wraps and offset < end:
        return applies_on(rule, day - datetime.timedelta(days=1), holiday_dates)

    return False


def matching_rules(
    rules: Iterable[R],
    day: datetime.date,
    offset: datetime.timedelta,
    holiday_dates: Set[datetime.date],
) -> list[R]:
    """Rules covering the instant, in definition order.

    A holiday rule match excludes day-of-week rules.
    """
    matched = [rule for rule in rules if covers(rule, day, offset, holiday_dates)]
    if any(rule.is_public_holiday for rule in matched):
        return [rule for rule in matched if rule.is_public_holiday]
    return matched


def boundary_offsets(
    rules: Iterable[TimeWindowRule],
    day: datetime.date,
    holiday_dates: Set[datetime.date],
) -> set[datetime.timedelta]:
    """Local times on `day` where some rule starts or stops applying."""
    previous_day = day - datetime.timedelta(days=1)
    offsets = set()

    for rule in rules:
        start, end, wraps = window_offsets(rule)
        if applies_on(rule, day, holiday_dates):
            offsets.add(start)
            if not wraps:
                offsets.add(end)
        if wraps and applies_on(rule, previous_day, holiday_dates):
            offsets.add(end)

    offsets.discard(_MIDNIGHT)
    offsets.discard(_END_OF_DAY)
    return offsets
