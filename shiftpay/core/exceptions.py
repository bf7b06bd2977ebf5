"""Errors raised for malformed calculation input.

Every error is a deterministic function of the input; none of them is
retryable.
"""


class PayCalculationError(Exception):
    """Base class for rejected calculation input."""

    pass


class InvalidInterval(PayCalculationError):
    """Shift end is not after its start, or the shift is longer than 24 hours."""

    pass


class InvalidBreakPeriod(PayCalculationError):
    """A break lies outside the shift or overlaps another break."""

    pass


class UnknownTimezone(PayCalculationError):
    """The timezone is not a known IANA identifier."""

    def __init__(self, timezone: str):
        super().__init__(f"Unknown timezone: {timezone!r}")
        self.timezone = timezone


class NoApplicableRate(PayCalculationError):
    """No rate could be resolved for a slice.

    Never raised for a guide with a base rate; a guide without rules
    produces an all-base-rate result.
    """

    pass
