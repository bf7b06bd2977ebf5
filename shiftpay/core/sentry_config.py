# shiftpay/core/sentry_config.py
"""
Sentry configuration for error tracking in production.

Only unexpected failures reach Sentry; rejected calculation input is logged
as a warning and answered with 422, so it never becomes an event.
"""

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from shiftpay import __version__
from shiftpay.core.config import IS_PRODUCTION, SENTRY_DSN, SENTRY_ENVIRONMENT, SENTRY_TRACES_SAMPLE_RATE
from shiftpay.core.exceptions import PayCalculationError

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("cookie", "authorization", "x-api-key")


def init_sentry(production: bool = IS_PRODUCTION, dsn: str = SENTRY_DSN) -> bool:
    """
    Initialize Sentry error tracking.

    Returns:
        True if Sentry was initialized, False when disabled
    """
    if not production:
        logger.info("Sentry disabled in development mode")
        return False

    if not dsn:
        logger.warning("SENTRY_DSN not set. Error tracking disabled.")
        return False

    sentry_sdk.init(
        dsn=dsn,
        integrations=[
            FastApiIntegration(),
            StarletteIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        sample_rate=1.0,
        release=f"shiftpay@{__version__}",
        environment=SENTRY_ENVIRONMENT,
        send_default_pii=False,
        attach_stacktrace=True,
        before_send=before_send_hook,
    )

    logger.info("Sentry initialized (environment: %s)", SENTRY_ENVIRONMENT)
    return True


def before_send_hook(event, hint):
    """
    Drop rejected-input errors and filter sensitive headers.

    Args:
        event: Sentry event data
        hint: Additional context, including exc_info for exceptions

    Returns:
        Modified event or None to drop the event
    """
    exc_info = hint.get("exc_info") if hint else None
    if exc_info and isinstance(exc_info[1], PayCalculationError):
        return None

    headers = event.get("request", {}).get("headers")
    if headers:
        for header in SENSITIVE_HEADERS:
            if header in headers:
                headers[header] = "[Filtered]"

    return event
