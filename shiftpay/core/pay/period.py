"""Pay period boundaries.

Independent of the calculation engine: used to check a pay guide's
effective window against a shift's period and to bucket shifts for reports.
"""

import calendar
import datetime
import logging
from collections.abc import Iterable

from shiftpay.core.config import WEEK_STARTS_ON
from shiftpay.core.constants import DAYS_PER_FORTNIGHT, DAYS_PER_WEEK, FORTNIGHT_EPOCH
from shiftpay.core.models import PayGuide, PayPeriodRange, PayPeriodType, Shift
from shiftpay.core.time_utils import as_utc, resolve_timezone

logger = logging.getLogger(__name__)


def period_for_date(
    day: datetime.date,
    period_type: PayPeriodType,
    week_starts_on: int = WEEK_STARTS_ON,
) -> PayPeriodRange:
    """
    Pay period containing a local calendar date.

    Args:
        day: Local date
        period_type: weekly, fortnightly or monthly
        week_starts_on: First day of the week as datetime.weekday() (0=Monday)

    Returns:
        PayPeriodRange with inclusive start and end dates
    """
    if not 0 <= week_starts_on < DAYS_PER_WEEK:
        raise ValueError(f"week_starts_on must be between 0 and 6, got {week_starts_on}")

    if period_type == PayPeriodType.WEEKLY:
        start = day - datetime.timedelta(days=(day.weekday() - week_starts_on) % DAYS_PER_WEEK)
        end = start + datetime.timedelta(days=DAYS_PER_WEEK - 1)

    elif period_type == PayPeriodType.FORTNIGHTLY:
        # Shift the Monday epoch forward to the configured start of week
        anchor = FORTNIGHT_EPOCH + datetime.timedelta(days=(week_starts_on - FORTNIGHT_EPOCH.weekday()) % DAYS_PER_WEEK)
        week_index = (day - anchor).days // DAYS_PER_WEEK
        start = anchor + datetime.timedelta(weeks=week_index - week_index % 2)
        end = start + datetime.timedelta(days=DAYS_PER_FORTNIGHT - 1)

    elif period_type == PayPeriodType.MONTHLY:
        start = day.replace(day=1)
        end = day.replace(day=calendar.monthrange(day.year, day.month)[1])

    else:
        raise ValueError(f"Unsupported pay period type: {period_type}")

    return PayPeriodRange(start_date=start, end_date=end, period_type=period_type)


def resolve_pay_period_range(
    reference_instant: datetime.datetime | datetime.date,
    period_type: PayPeriodType | str,
    timezone: str,
    week_starts_on: int = WEEK_STARTS_ON,
) -> PayPeriodRange:
    """
    Pay period containing an instant, in the local calendar of `timezone`.

    Naive datetimes are read as UTC; a plain date is taken as already local.

    Raises:
        UnknownTimezone: If the timezone is not a known IANA identifier
        ValueError: If the period type or week start is invalid
    """
    period_type = PayPeriodType(period_type)
    tz = resolve_timezone(timezone)

    if isinstance(reference_instant, datetime.datetime):
        day = as_utc(reference_instant).astimezone(tz).date()
    else:
        day = reference_instant

    return period_for_date(day, period_type, week_starts_on)


def pay_guide_covers_period(pay_guide: PayGuide, period: PayPeriodRange) -> bool:
    """Whether the whole period lies inside the guide's effective window."""
    return pay_guide.is_effective_on(period.start_date) and pay_guide.is_effective_on(period.end_date)


def group_shifts_by_pay_period(
    shifts: Iterable[Shift],
    period_type: PayPeriodType | str,
    timezone: str,
    week_starts_on: int = WEEK_STARTS_ON,
) -> dict[PayPeriodRange, list[Shift]]:
    """
    Bucket shifts by the pay period containing their start.

    Returns:
        Periods in chronological order, each with its shifts in input order
    """
    buckets: dict[PayPeriodRange, list[Shift]] = {}
    for shift in shifts:
        period = resolve_pay_period_range(shift.start_time, period_type, timezone, week_starts_on)
        buckets.setdefault(period, []).append(shift)

    logger.debug("Grouped shifts into %d %s periods", len(buckets), PayPeriodType(period_type).value)
    return dict(sorted(buckets.items(), key=lambda item: item[0].start_date))
