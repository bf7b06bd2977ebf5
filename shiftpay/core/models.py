"""Pydantic models for pay guides, shifts and calculation results."""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Protocol

from pydantic import AfterValidator, AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from shiftpay.core.time_utils import parse_time_of_day


def _validate_window_time(value: str | None) -> str | None:
    if value is not None:
        parse_time_of_day(value)
    return value


WindowTime = Annotated[str | None, AfterValidator(_validate_window_time)]
Multiplier = Annotated[Decimal, Field(ge=1)]
DayOfWeek = Annotated[int | None, Field(ge=0, le=6)]


class TimeWindowRule(Protocol):
    """Shape shared by penalty and overtime frames.

    day_of_week uses 0=Sunday ... 6=Saturday; None matches every day.
    A window without start/end covers the whole day.
    """

    id: str
    name: str
    day_of_week: int | None
    is_public_holiday: bool
    start_time: str | None
    end_time: str | None
    is_active: bool


class BreakPeriod(BaseModel):
    """Unpaid break inside a shift."""

    model_config = ConfigDict(frozen=True)

    start_time: AwareDatetime
    end_time: AwareDatetime


class Shift(BaseModel):
    """Worked shift. Instants must be timezone aware; break order is irrelevant."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    start_time: AwareDatetime
    end_time: AwareDatetime
    break_periods: tuple[BreakPeriod, ...] = ()


class PublicHoliday(BaseModel):
    """Public holiday, optionally scoped to a state or territory."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str = "Public holiday"
    date: datetime.date
    state_territory: str | None = None
    multiplier: Multiplier = Decimal("1")
    is_active: bool = True


class PenaltyTimeFrame(BaseModel):
    """Penalty rate applied during a day-of-week or public holiday window."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    multiplier: Multiplier
    day_of_week: DayOfWeek = None
    is_public_holiday: bool = False
    start_time: WindowTime = None
    end_time: WindowTime = None
    is_active: bool = True
    description: str | None = None

    @model_validator(mode="after")
    def _check_window(self):
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be set together")
        return self


class OvertimeTimeFrame(BaseModel):
    """Two-tier overtime rate applied once regular hours are used up inside the window."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    first_three_hours_mult: Multiplier
    after_three_hours_mult: Multiplier
    day_of_week: DayOfWeek = None
    is_public_holiday: bool = False
    start_time: WindowTime = None
    end_time: WindowTime = None
    is_active: bool = True
    description: str | None = None

    @model_validator(mode="after")
    def _check_window(self):
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be set together")
        return self


class PayGuide(BaseModel):
    """Award rate configuration effective over a date range.

    Frame order is definition order and breaks ties between equal multipliers.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str = ""
    base_rate: Annotated[Decimal, Field(gt=0)]
    timezone: str
    effective_from: datetime.date
    effective_to: datetime.date | None = None
    minimum_shift_hours: Annotated[Decimal | None, Field(ge=0)] = None
    maximum_shift_hours: Annotated[Decimal | None, Field(ge=0)] = None
    allow_penalty_combination: bool = False
    overtime_threshold_hours: Annotated[Decimal | None, Field(gt=0)] = None
    state_territory: str | None = None
    penalty_time_frames: tuple[PenaltyTimeFrame, ...] = ()
    overtime_time_frames: tuple[OvertimeTimeFrame, ...] = ()
    public_holidays: tuple[PublicHoliday, ...] = ()

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.effective_to is not None and self.effective_to <= self.effective_from:
            raise ValueError("effective_to must be after effective_from")
        if (
            self.minimum_shift_hours is not None
            and self.maximum_shift_hours is not None
            and self.minimum_shift_hours > self.maximum_shift_hours
        ):
            raise ValueError("minimum_shift_hours cannot exceed maximum_shift_hours")
        return self

    def is_effective_on(self, day: datetime.date) -> bool:
        if day < self.effective_from:
            return False
        return self.effective_to is None or day <= self.effective_to


class AppliedPenalty(BaseModel):
    """A run of time paid above the base rate."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    rule_ids: tuple[str, ...]
    name: str
    kind: Literal["penalty", "overtime"]
    start_time: datetime.datetime
    end_time: datetime.datetime
    hours: Decimal
    pay: Decimal
    multiplier: Decimal


class PayBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_hours: Decimal
    base_pay: Decimal
    penalty_hours: Decimal
    penalty_pay: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    total_pay: Decimal


class PayCalculationResult(BaseModel):
    """Gross pay for one shift. Produced fresh per call."""

    model_config = ConfigDict(frozen=True)

    total_hours: Decimal
    breakdown: PayBreakdown
    applied_penalties: tuple[AppliedPenalty, ...] = ()
    pay_guide_name: str = ""
    base_rate: Decimal
    warnings: tuple[str, ...] = ()


class PayPeriodType(str, Enum):
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"


class PayPeriodRange(BaseModel):
    """Inclusive local calendar dates of a pay period."""

    model_config = ConfigDict(frozen=True)

    start_date: datetime.date
    end_date: datetime.date
    period_type: PayPeriodType

    def contains(self, day: datetime.date) -> bool:
        return self.start_date <= day <= self.end_date
