# shiftpay/routes/pay.py
"""
Stateless pay endpoints: shift pay preview and pay period lookup.
"""

import datetime

from fastapi import APIRouter, Query
from pydantic import BaseModel

from shiftpay.core.config import DEFAULT_TIMEZONE, WEEK_STARTS_ON
from shiftpay.core.logging_config import get_logger
from shiftpay.core.models import PayCalculationResult, PayGuide, PayPeriodRange, PayPeriodType, Shift
from shiftpay.core.pay import calculate, pay_guide_covers_period, resolve_pay_period_range

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["pay"])


class ShiftPreviewRequest(BaseModel):
    """Body of a shift preview: the shift plus the guide to price it under."""

    shift: Shift
    pay_guide: PayGuide
    jurisdiction: str | None = None
    period_type: PayPeriodType | None = None


class ShiftPreviewResponse(BaseModel):
    calculation: PayCalculationResult
    pay_period: PayPeriodRange | None = None
    warnings: list[str] = []


@router.post("/shifts/preview", response_model=ShiftPreviewResponse)
def preview_shift(body: ShiftPreviewRequest) -> ShiftPreviewResponse:
    """Price a shift without storing it.

    When a period type is given, also reports the containing pay period and
    warns if the pay guide does not cover all of it.
    """
    calculation = calculate(body.shift, body.pay_guide, body.jurisdiction)
    warnings = list(calculation.warnings)

    pay_period = None
    if body.period_type is not None:
        pay_period = resolve_pay_period_range(body.shift.start_time, body.period_type, body.pay_guide.timezone)
        if not pay_guide_covers_period(body.pay_guide, pay_period):
            warnings.append(
                f"Pay period {pay_period.start_date.isoformat()} to {pay_period.end_date.isoformat()} "
                "extends outside the pay guide's effective dates"
            )

    logger.info(
        "Previewed shift under pay guide %s: %s hours, total %s",
        body.pay_guide.id,
        calculation.total_hours,
        calculation.breakdown.total_pay,
    )
    return ShiftPreviewResponse(calculation=calculation, pay_period=pay_period, warnings=warnings)


@router.get("/pay-periods/range", response_model=PayPeriodRange)
def get_pay_period_range(
    reference: datetime.datetime,
    period_type: PayPeriodType = PayPeriodType.WEEKLY,
    timezone: str = DEFAULT_TIMEZONE,
    week_starts_on: int = Query(WEEK_STARTS_ON, ge=0, le=6),
) -> PayPeriodRange:
    """Pay period containing `reference`, as inclusive local dates."""
    return resolve_pay_period_range(reference, period_type, timezone, week_starts_on)
