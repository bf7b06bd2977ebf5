"""
Pytest configuration and shared fixtures for testing.

Provides reusable test fixtures:
- test_client: FastAPI TestClient for API integration tests
- local: builds timezone-aware local datetimes (Australia/Sydney by default)
- make_guide: builds a PayGuide with sensible defaults
- make_shift: builds a Shift from start/end and optional breaks
"""

import datetime
import sys
from decimal import Decimal
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from shiftpay.core.models import BreakPeriod, PayGuide, Shift
from shiftpay.main import app

SYDNEY = "Australia/Sydney"


def _local(year, month, day, hour=0, minute=0, tz=SYDNEY) -> datetime.datetime:
    return datetime.datetime(year, month, day, hour, minute, tzinfo=ZoneInfo(tz))


def _make_guide(**overrides) -> PayGuide:
    data = {
        "id": "retail-2024",
        "name": "Retail Award 2024",
        "base_rate": Decimal("25.00"),
        "timezone": SYDNEY,
        "effective_from": datetime.date(2021, 1, 1),
    }
    data.update(overrides)
    return PayGuide(**data)


def _make_shift(start, end, breaks=()) -> Shift:
    return Shift(
        id="shift-1",
        start_time=start,
        end_time=end,
        break_periods=tuple(BreakPeriod(start_time=b_start, end_time=b_end) for b_start, b_end in breaks),
    )


@pytest.fixture
def local():
    """Factory for aware local datetimes."""
    return _local


@pytest.fixture
def make_guide():
    """Factory for pay guides. Keyword arguments override the defaults."""
    return _make_guide


@pytest.fixture
def make_shift():
    """Factory for shifts. Breaks are (start, end) pairs."""
    return _make_shift


@pytest.fixture(scope="function")
def test_client():
    """
    Create FastAPI TestClient.

    Yields:
        TestClient: FastAPI test client for API testing
    """
    with TestClient(app) as client:
        yield client
