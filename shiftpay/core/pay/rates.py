"""Penalty rate matching and the multiplier combination policy."""

import datetime
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from zoneinfo import ZoneInfo

from shiftpay.core.constants import NO_PREMIUM
from shiftpay.core.models import OvertimeTimeFrame, PayGuide, PenaltyTimeFrame, PublicHoliday

from .segments import Slice, local_offset
from .windows import matching_rules

logger = logging.getLogger(__name__)


def combine_multipliers(multipliers: Sequence[Decimal], allow_combination: bool) -> Decimal:
    """Resolve overlapping multipliers into one.

    Without combination the highest multiplier wins. With combination the
    premiums above 1 are added: 1.15 and 1.25 give 1.40, not 1.4375.
    """
    if not multipliers:
        return NO_PREMIUM
    if not allow_combination:
        return max(multipliers)
    return NO_PREMIUM + sum((m - NO_PREMIUM for m in multipliers), Decimal("0"))


@dataclass(frozen=True)
class RateMatch:
    """Resolved penalty state of one slice."""

    multiplier: Decimal
    matched_rule_ids: tuple[str, ...]
    matched_names: tuple[str, ...]
    is_holiday: bool
    holiday_multiplier: Decimal


@dataclass(frozen=True)
class RateContext:
    """Per-calculation view of a pay guide: active rules and holidays by date."""

    tz: ZoneInfo
    penalty_rules: tuple[PenaltyTimeFrame, ...]
    overtime_rules: tuple[OvertimeTimeFrame, ...]
    holidays: dict[datetime.date, PublicHoliday]
    holiday_dates: frozenset[datetime.date]
    allow_combination: bool

    @classmethod
    def for_guide(cls, guide: PayGuide, tz: ZoneInfo, jurisdiction: str | None = None) -> "RateContext":
        holidays = active_holidays(guide.public_holidays, jurisdiction or guide.state_territory)
        return cls(
            tz=tz,
            penalty_rules=tuple(r for r in guide.penalty_time_frames if r.is_active),
            overtime_rules=tuple(r for r in guide.overtime_time_frames if r.is_active),
            holidays=holidays,
            holiday_dates=frozenset(holidays),
            allow_combination=guide.allow_penalty_combination,
        )

    @property
    def rules(self) -> tuple:
        """Every active frame whose boundaries split slices."""
        return (*self.penalty_rules, *self.overtime_rules)


def active_holidays(
    holidays: Sequence[PublicHoliday],
    jurisdiction: str | None,
) -> dict[datetime.date, PublicHoliday]:
    """Active holidays by date.

    A holiday scoped to a state or territory counts only when no jurisdiction
    is given or it matches. The first definition wins for a repeated date.
    """
    result: dict[datetime.date, PublicHoliday] = {}
    for holiday in holidays:
        if not holiday.is_active:
            continue
        if jurisdiction and holiday.state_territory and holiday.state_territory != jurisdiction:
            continue
        result.setdefault(holiday.date, holiday)
    return result


def _select(rules: list[PenaltyTimeFrame], allow_combination: bool) -> list[PenaltyTimeFrame]:
    if allow_combination or not rules:
        return rules
    # max() keeps the first of equal multipliers
    return [max(rules, key=lambda r: r.multiplier)]


def match_slice(slice_: Slice, ctx: RateContext) -> RateMatch:
    """Resolve the penalty multiplier for one slice."""
    offset = local_offset(slice_, ctx.tz)
    is_holiday = slice_.local_date in ctx.holiday_dates

    matched = matching_rules(ctx.penalty_rules, slice_.local_date, offset, ctx.holiday_dates)
    chosen = _select(matched, ctx.allow_combination)

    ids = tuple(r.id for r in chosen)
    names = tuple(r.name for r in chosen)
    multipliers = [r.multiplier for r in chosen]

    if is_holiday and not any(r.is_public_holiday for r in matched):
        # No holiday frame covers this time; the holiday's own rate applies all day.
        holiday = ctx.holidays[slice_.local_date]
        if holiday.multiplier > NO_PREMIUM:
            ids = (f"holiday:{holiday.date.isoformat()}",)
            names = (holiday.name,)
            multipliers = [holiday.multiplier]
        else:
            ids, names, multipliers = (), (), []

    multiplier = combine_multipliers(multipliers, ctx.allow_combination)
    holiday_multiplier = multiplier if is_holiday or any(r.is_public_holiday for r in chosen) else NO_PREMIUM

    return RateMatch(
        multiplier=multiplier,
        matched_rule_ids=ids,
        matched_names=names,
        is_holiday=is_holiday,
        holiday_multiplier=holiday_multiplier,
    )


def match_overtime_rule(slice_: Slice, ctx: RateContext) -> OvertimeTimeFrame | None:
    """Overtime frame the slice accrues under, if any.

    The highest first-tier multiplier wins; ties go to the first defined.
    """
    offset = local_offset(slice_, ctx.tz)
    matched = matching_rules(ctx.overtime_rules, slice_.local_date, offset, ctx.holiday_dates)
    if not matched:
        return None
    return max(matched, key=lambda r: r.first_three_hours_mult)
