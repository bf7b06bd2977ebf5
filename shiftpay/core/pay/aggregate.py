"""Summing priced slices into a pay breakdown."""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from shiftpay.core.constants import NO_PREMIUM
from shiftpay.core.models import AppliedPenalty, PayBreakdown, PayCalculationResult
from shiftpay.core.time_utils import hours_from_microseconds, round_currency, round_hours

from .overtime import PricedSlice


def slice_pay(slice_: PricedSlice, base_rate: Decimal) -> Decimal:
    """Unrounded pay for one slice."""
    return hours_from_microseconds(slice_.microseconds) * base_rate * slice_.multiplier


def build_applied_penalties(slices: Iterable[PricedSlice], base_rate: Decimal) -> list[AppliedPenalty]:
    """List time paid above base rate, merging adjacent runs of the same rules."""
    runs: list[list[PricedSlice]] = []

    for s in slices:
        if s.multiplier <= NO_PREMIUM:
            continue
        if runs:
            last = runs[-1][-1]
            if (
                last.end == s.start
                and last.kind == s.kind
                and last.rule_ids == s.rule_ids
                and last.multiplier == s.multiplier
            ):
                runs[-1].append(s)
                continue
        runs.append([s])

    applied = []
    for run in runs:
        first = run[0]
        microseconds = sum(s.microseconds for s in run)
        hours = hours_from_microseconds(microseconds)
        applied.append(
            AppliedPenalty(
                rule_id="+".join(first.rule_ids),
                rule_ids=first.rule_ids,
                name=" + ".join(first.names),
                kind="overtime" if first.kind == "overtime" else "penalty",
                start_time=first.start,
                end_time=run[-1].end,
                hours=hours,
                pay=round_currency(hours * base_rate * first.multiplier),
                multiplier=first.multiplier,
            )
        )
    return applied


def aggregate(
    slices: Sequence[PricedSlice],
    base_rate: Decimal,
    pay_guide_name: str = "",
    warnings: Sequence[str] = (),
) -> PayCalculationResult:
    """
    Sum priced slices into a PayCalculationResult.

    Each bucket is rounded to cents once, after summation. total_pay is the
    sum of the rounded buckets so the breakdown always adds up.

    Args:
        slices: Final slices in chronological order
        base_rate: Hourly base rate of the pay guide
        pay_guide_name: Name reported on the result
        warnings: Advisory messages to attach

    Returns:
        PayCalculationResult
    """
    pay = {"base": Decimal("0"), "penalty": Decimal("0"), "overtime": Decimal("0")}
    microseconds = {"base": 0, "penalty": 0, "overtime": 0}

    for s in slices:
        pay[s.kind] += slice_pay(s, base_rate)
        microseconds[s.kind] += s.microseconds

    base_pay = round_currency(pay["base"])
    penalty_pay = round_currency(pay["penalty"])
    overtime_pay = round_currency(pay["overtime"])

    breakdown = PayBreakdown(
        base_hours=round_hours(hours_from_microseconds(microseconds["base"])),
        base_pay=base_pay,
        penalty_hours=round_hours(hours_from_microseconds(microseconds["penalty"])),
        penalty_pay=penalty_pay,
        overtime_hours=round_hours(hours_from_microseconds(microseconds["overtime"])),
        overtime_pay=overtime_pay,
        total_pay=base_pay + penalty_pay + overtime_pay,
    )

    return PayCalculationResult(
        total_hours=round_hours(hours_from_microseconds(sum(microseconds.values()))),
        breakdown=breakdown,
        applied_penalties=tuple(build_applied_penalties(slices, base_rate)),
        pay_guide_name=pay_guide_name,
        base_rate=base_rate,
        warnings=tuple(warnings),
    )
