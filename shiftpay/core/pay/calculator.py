"""Entry point of the pay calculation engine."""

import datetime
import logging

from shiftpay.core.config import REGULAR_HOURS_THRESHOLD
from shiftpay.core.constants import MAX_SHIFT_DURATION
from shiftpay.core.exceptions import InvalidBreakPeriod, InvalidInterval
from shiftpay.core.models import PayCalculationResult, PayGuide, Shift
from shiftpay.core.time_utils import as_utc, hours_from_microseconds, resolve_timezone, round_hours

from .aggregate import aggregate
from .overtime import OvertimeAccumulator, PricedSlice
from .rates import RateContext, match_overtime_rule, match_slice
from .segments import segment_shift

logger = logging.getLogger(__name__)


def validate_shift(shift: Shift) -> tuple[datetime.datetime, datetime.datetime]:
    """
    Check shift and break invariants before any segmentation work.

    Returns:
        (start, end) in UTC

    Raises:
        InvalidInterval: End not after start, or longer than 24 hours
        InvalidBreakPeriod: Break inverted, outside the shift or overlapping another
    """
    start = as_utc(shift.start_time)
    end = as_utc(shift.end_time)

    if end <= start:
        logger.warning("Rejected shift %s: end %s is not after start %s", shift.id, end, start)
        raise InvalidInterval("Shift end time must be after start time")

    if end - start > MAX_SHIFT_DURATION:
        logger.warning("Rejected shift %s: duration %s exceeds %s", shift.id, end - start, MAX_SHIFT_DURATION)
        raise InvalidInterval(f"Shift cannot be longer than {MAX_SHIFT_DURATION}")

    previous_end = None
    for bp in sorted(shift.break_periods, key=lambda b: as_utc(b.start_time)):
        b_start, b_end = as_utc(bp.start_time), as_utc(bp.end_time)
        if b_end <= b_start:
            logger.warning("Rejected shift %s: break end %s is not after start %s", shift.id, b_end, b_start)
            raise InvalidBreakPeriod("Break end time must be after break start time")
        if b_start < start or b_end > end:
            logger.warning("Rejected shift %s: break %s - %s outside %s - %s", shift.id, b_start, b_end, start, end)
            raise InvalidBreakPeriod("Break periods must be within shift duration")
        if previous_end is not None and b_start < previous_end:
            logger.warning("Rejected shift %s: break at %s overlaps break ending %s", shift.id, b_start, previous_end)
            raise InvalidBreakPeriod("Break periods must not overlap")
        previous_end = b_end

    return start, end


def shift_warnings(pay_guide: PayGuide, slices: list[PricedSlice], local_start: datetime.date) -> list[str]:
    """Advisory messages. Out-of-bound shifts are still paid in full."""
    warnings = []
    worked = hours_from_microseconds(sum(s.microseconds for s in slices))

    if pay_guide.minimum_shift_hours is not None and worked < pay_guide.minimum_shift_hours:
        warnings.append(
            f"Worked hours {round_hours(worked)} are below the pay guide minimum of {pay_guide.minimum_shift_hours}"
        )
    if pay_guide.maximum_shift_hours is not None and worked > pay_guide.maximum_shift_hours:
        warnings.append(
            f"Worked hours {round_hours(worked)} exceed the pay guide maximum of {pay_guide.maximum_shift_hours}"
        )
    if not pay_guide.is_effective_on(local_start):
        warnings.append(f"Pay guide is not effective on {local_start.isoformat()}")

    return warnings


def calculate(shift: Shift, pay_guide: PayGuide, jurisdiction: str | None = None) -> PayCalculationResult:
    """
    Calculate gross pay for a shift under a pay guide.

    Pure function of its arguments: no clock access, no shared state.

    Args:
        shift: Worked shift with break periods
        pay_guide: Pay guide in effect for the shift
        jurisdiction: State/territory for holiday filtering; defaults to the guide's own

    Returns:
        PayCalculationResult

    Raises:
        InvalidInterval, InvalidBreakPeriod, UnknownTimezone
    """
    start, end = validate_shift(shift)
    tz = resolve_timezone(pay_guide.timezone)

    ctx = RateContext.for_guide(pay_guide, tz, jurisdiction)
    slices = segment_shift(start, end, shift.break_periods, ctx.rules, ctx.holiday_dates, tz)

    accumulator = OvertimeAccumulator(pay_guide.overtime_threshold_hours or REGULAR_HOURS_THRESHOLD)
    priced: list[PricedSlice] = []
    for slice_ in slices:
        rate = match_slice(slice_, ctx)
        overtime_rule = match_overtime_rule(slice_, ctx)
        priced.extend(accumulator.classify(slice_, rate, overtime_rule))

    warnings = shift_warnings(pay_guide, priced, start.astimezone(tz).date())
    result = aggregate(priced, pay_guide.base_rate, pay_guide.name, warnings)

    logger.debug(
        "Calculated shift %s under %s: %s hours, total %s",
        shift.id,
        pay_guide.id,
        result.total_hours,
        result.breakdown.total_pay,
    )
    return result
