"""Overtime classification against cumulative worked time."""

import datetime
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from shiftpay.core.constants import NO_PREMIUM, OVERTIME_FIRST_TIER_HOURS
from shiftpay.core.models import OvertimeTimeFrame
from shiftpay.core.time_utils import hours_from_microseconds, microseconds_from_hours, to_microseconds

from .rates import RateMatch, combine_multipliers
from .segments import Slice

logger = logging.getLogger(__name__)

SliceKind = Literal["base", "penalty", "overtime"]
ScopeKey = tuple


@dataclass(frozen=True)
class PricedSlice:
    """A final slice with the multiplier it is paid at."""

    start: datetime.datetime
    end: datetime.datetime
    local_date: datetime.date
    multiplier: Decimal
    rule_ids: tuple[str, ...]
    names: tuple[str, ...]
    kind: SliceKind

    @property
    def microseconds(self) -> int:
        return to_microseconds(self.end - self.start)


def scope_key(rule: OvertimeTimeFrame, local_date: datetime.date) -> ScopeKey:
    """Accumulation bucket for a slice under an overtime rule.

    A rule without a weekday restriction covers the whole week and
    accumulates per ISO week; every other rule accumulates per local day.
    """
    if rule.day_of_week is None and not rule.is_public_holiday:
        iso_year, iso_week, _ = local_date.isocalendar()
        return ("week", iso_year, iso_week)
    return ("day", local_date)


def regular_slice(slice_: Slice, rate: RateMatch) -> PricedSlice:
    kind: SliceKind = "penalty" if rate.multiplier > NO_PREMIUM else "base"
    return PricedSlice(
        start=slice_.start,
        end=slice_.end,
        local_date=slice_.local_date,
        multiplier=rate.multiplier,
        rule_ids=rate.matched_rule_ids if kind == "penalty" else (),
        names=rate.matched_names if kind == "penalty" else (),
        kind=kind,
    )


class OvertimeAccumulator:
    """Tracks regular hours consumed per scope and splits slices at tier boundaries.

    Feed slices in chronological order. One accumulator per calculation.
    """

    def __init__(self, regular_hours: Decimal, first_tier_hours: Decimal = OVERTIME_FIRST_TIER_HOURS):
        self._regular_us = microseconds_from_hours(regular_hours)
        self._first_tier_end_us = self._regular_us + microseconds_from_hours(first_tier_hours)
        self._consumed: dict[ScopeKey, int] = defaultdict(int)

    def consumed_hours(self, key: ScopeKey) -> Decimal:
        return hours_from_microseconds(self._consumed.get(key, 0))

    def classify(
        self,
        slice_: Slice,
        rate: RateMatch,
        rule: OvertimeTimeFrame | None,
    ) -> list[PricedSlice]:
        """Split a slice into regular and overtime-tier pieces.

        Slices outside every overtime window do not accrue and keep their
        penalty rate.
        """
        if rule is None:
            return [regular_slice(slice_, rate)]

        key = scope_key(rule, slice_.local_date)
        pieces: list[PricedSlice] = []
        cursor = slice_.start
        remaining = slice_.microseconds

        while remaining > 0:
            consumed = self._consumed[key]
            if consumed < self._regular_us:
                take = min(remaining, self._regular_us - consumed)
                tier = None
            elif consumed < self._first_tier_end_us:
                take = min(remaining, self._first_tier_end_us - consumed)
                tier = rule.first_three_hours_mult
            else:
                take = remaining
                tier = rule.after_three_hours_mult

            remaining -= take
            piece_end = slice_.end if remaining == 0 else cursor + datetime.timedelta(microseconds=take)
            piece = Slice(cursor, piece_end, slice_.local_date, slice_.day_of_week)

            if tier is None:
                pieces.append(regular_slice(piece, rate))
            else:
                pieces.append(self._overtime_piece(piece, rate, rule, tier))

            self._consumed[key] += take
            cursor = piece_end

        if len(pieces) > 1:
            logger.debug("Split slice at %s into %d overtime pieces", slice_.start.isoformat(), len(pieces))
        return pieces

    @staticmethod
    def _overtime_piece(
        piece: Slice,
        rate: RateMatch,
        rule: OvertimeTimeFrame,
        tier: Decimal,
    ) -> PricedSlice:
        rule_ids: tuple[str, ...] = (rule.id,)
        names: tuple[str, ...] = (rule.name,)
        multiplier = tier

        # Holiday overtime stacks on the holiday penalty; other overtime replaces it.
        if rule.is_public_holiday and rate.holiday_multiplier > NO_PREMIUM:
            multiplier = combine_multipliers([rate.holiday_multiplier, tier], allow_combination=True)
            rule_ids += rate.matched_rule_ids
            names += rate.matched_names

        return PricedSlice(
            start=piece.start,
            end=piece.end,
            local_date=piece.local_date,
            multiplier=multiplier,
            rule_ids=rule_ids,
            names=names,
            kind="overtime",
        )
