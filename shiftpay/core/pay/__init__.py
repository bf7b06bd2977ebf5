"""
Pay module - shift pay calculation and pay period resolution.
"""

from .aggregate import aggregate, build_applied_penalties
from .calculator import calculate, validate_shift
from .overtime import OvertimeAccumulator, PricedSlice, scope_key
from .period import (
    group_shifts_by_pay_period,
    pay_guide_covers_period,
    period_for_date,
    resolve_pay_period_range,
)
from .rates import RateContext, RateMatch, active_holidays, combine_multipliers, match_overtime_rule, match_slice
from .segments import Slice, segment_shift, split_at_local_midnights, subtract_breaks
from .windows import applies_on, covers, matching_rules, window_offsets

__all__ = [
    # calculator
    "calculate",
    "validate_shift",
    # segments
    "Slice",
    "segment_shift",
    "split_at_local_midnights",
    "subtract_breaks",
    # windows
    "applies_on",
    "covers",
    "matching_rules",
    "window_offsets",
    # rates
    "RateContext",
    "RateMatch",
    "active_holidays",
    "combine_multipliers",
    "match_overtime_rule",
    "match_slice",
    # overtime
    "OvertimeAccumulator",
    "PricedSlice",
    "scope_key",
    # aggregate
    "aggregate",
    "build_applied_penalties",
    # period
    "group_shifts_by_pay_period",
    "pay_guide_covers_period",
    "period_for_date",
    "resolve_pay_period_range",
]
