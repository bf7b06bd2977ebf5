# shiftpay/core/constants.py
import datetime
from decimal import Decimal
from typing import Final

# ==========================
# Time units
# ==========================

#: Seconds per hour. Used when converting a timedelta to hours.
SECONDS_PER_HOUR: Final[int] = 3600

#: Microseconds per hour. Interval arithmetic is done in whole microseconds so
#: slices are never rounded before they are split or summed.
MICROSECONDS_PER_HOUR: Final[int] = SECONDS_PER_HOUR * 1_000_000

#: Hours per day.
HOURS_PER_DAY: Final[int] = 24

#: Longest accepted shift. Longer shifts are rejected, never clipped.
MAX_SHIFT_DURATION: Final[datetime.timedelta] = datetime.timedelta(hours=HOURS_PER_DAY)

#: Days per week.
DAYS_PER_WEEK: Final[int] = 7

#: Days in a fortnightly pay period.
DAYS_PER_FORTNIGHT: Final[int] = 14


# ==========================
# Time formats
# ==========================

#: "End of day" marker in rule windows. A window ending at 24:00 runs to the
#: following local midnight.
TIME_END_OF_DAY_STRING: Final[str] = "24:00"


# ==========================
# Weekdays
# ==========================

#: Python index for Monday (datetime.weekday()).
WEEKDAY_MONDAY: Final[int] = 0

#: Anchor for fortnightly periods. 1970-01-05 was a Monday.
FORTNIGHT_EPOCH: Final[datetime.date] = datetime.date(1970, 1, 5)


# ==========================
# Overtime
# ==========================

#: Regular hours per scope before overtime starts, when the guide sets none.
DEFAULT_REGULAR_HOURS: Final[Decimal] = Decimal("8")

#: Overtime hours paid at the first tier multiplier.
OVERTIME_FIRST_TIER_HOURS: Final[Decimal] = Decimal("3")


# ==========================
# Decimal precision
# ==========================

#: Currency precision (cents).
CURRENCY_QUANTUM: Final[Decimal] = Decimal("0.01")

#: Precision of reported hour totals.
HOURS_QUANTUM: Final[Decimal] = Decimal("0.0001")

#: Multiplier with no premium.
NO_PREMIUM: Final[Decimal] = Decimal("1")
