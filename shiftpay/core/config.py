# shiftpay/core/config.py

import os
from decimal import Decimal
from typing import Final

from shiftpay.core.constants import DEFAULT_REGULAR_HOURS, WEEKDAY_MONDAY


# ==========================
# Environment
# ==========================

#: Production mode switches logging to JSON files and tightens CORS.
IS_PRODUCTION: Final[bool] = os.getenv("PRODUCTION", "false").lower() == "true"

#: Comma separated list of allowed CORS origins in production.
CORS_ORIGINS: Final[list[str]] = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()
]


# ==========================
# Calculation defaults
# ==========================

#: Regular hours before overtime when a pay guide has no explicit threshold.
#: Override with SHIFTPAY_REGULAR_HOURS (for example "7.6").
REGULAR_HOURS_THRESHOLD: Final[Decimal] = Decimal(
    os.getenv("SHIFTPAY_REGULAR_HOURS", str(DEFAULT_REGULAR_HOURS))
)

#: First day of a weekly/fortnightly pay period, as datetime.weekday() (0=Monday).
WEEK_STARTS_ON: Final[int] = int(os.getenv("SHIFTPAY_WEEK_STARTS_ON", str(WEEKDAY_MONDAY)))

#: Timezone used by the API when a request names none.
DEFAULT_TIMEZONE: Final[str] = os.getenv("SHIFTPAY_DEFAULT_TIMEZONE", "Australia/Sydney")


# ==========================
# Error tracking
# ==========================

#: Sentry DSN; error tracking stays off in production without one.
SENTRY_DSN: Final[str] = os.getenv("SENTRY_DSN", "").strip()

SENTRY_ENVIRONMENT: Final[str] = os.getenv("SENTRY_ENVIRONMENT", "production")

SENTRY_TRACES_SAMPLE_RATE: Final[float] = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1"))
