# tests/test_period.py
"""
Unit tests for pay period resolution.

Tests verify weekly, fortnightly and monthly boundaries in the local
calendar of a timezone.
"""

import datetime

import pytest

from shiftpay.core.exceptions import UnknownTimezone
from shiftpay.core.models import PayPeriodRange, PayPeriodType
from shiftpay.core.pay import (
    group_shifts_by_pay_period,
    pay_guide_covers_period,
    period_for_date,
    resolve_pay_period_range,
)

UTC = datetime.timezone.utc
AEST = datetime.timezone(datetime.timedelta(hours=10))


class TestWeeklyPeriods:
    """Test weekly pay periods."""

    def test_wednesday_in_sydney(self):
        """A Wednesday morning in Sydney falls in the Monday to Sunday week."""
        period = resolve_pay_period_range(
            datetime.datetime(2024, 6, 12, 10, tzinfo=AEST), "weekly", "Australia/Sydney", week_starts_on=0
        )

        assert period.start_date == datetime.date(2024, 6, 10)
        assert period.end_date == datetime.date(2024, 6, 16)
        assert period.period_type == PayPeriodType.WEEKLY

    def test_local_date_not_utc_date(self):
        """Monday 01:00 in Sydney is still Sunday in UTC."""
        instant = datetime.datetime(2024, 6, 9, 15, tzinfo=UTC)

        sydney = resolve_pay_period_range(instant, PayPeriodType.WEEKLY, "Australia/Sydney", 0)
        utc = resolve_pay_period_range(instant, PayPeriodType.WEEKLY, "UTC", 0)

        assert sydney.start_date == datetime.date(2024, 6, 10)
        assert utc.start_date == datetime.date(2024, 6, 3)

    def test_week_starting_sunday(self):
        period = period_for_date(datetime.date(2024, 6, 12), PayPeriodType.WEEKLY, week_starts_on=6)

        assert period.start_date == datetime.date(2024, 6, 9)
        assert period.end_date == datetime.date(2024, 6, 15)

    def test_first_day_of_week_starts_its_own_period(self):
        period = period_for_date(datetime.date(2024, 6, 10), PayPeriodType.WEEKLY, week_starts_on=0)
        assert period.start_date == datetime.date(2024, 6, 10)

    def test_naive_reference_read_as_utc(self):
        period = resolve_pay_period_range(datetime.datetime(2024, 6, 9, 15), "weekly", "Australia/Sydney", 0)
        assert period.start_date == datetime.date(2024, 6, 10)

    def test_date_reference_taken_as_local(self):
        period = resolve_pay_period_range(datetime.date(2024, 6, 9), "weekly", "Australia/Sydney", 0)
        assert period.start_date == datetime.date(2024, 6, 3)


class TestFortnightlyPeriods:
    """Test fortnightly pay periods anchored on 1970-01-05."""

    @pytest.mark.parametrize(
        "day",
        [datetime.date(2024, 6, 10), datetime.date(2024, 6, 12), datetime.date(2024, 6, 17), datetime.date(2024, 6, 23)],
    )
    def test_days_in_same_fortnight(self, day):
        period = period_for_date(day, PayPeriodType.FORTNIGHTLY, week_starts_on=0)

        assert period.start_date == datetime.date(2024, 6, 10)
        assert period.end_date == datetime.date(2024, 6, 23)

    def test_previous_fortnight(self):
        period = period_for_date(datetime.date(2024, 6, 9), PayPeriodType.FORTNIGHTLY, week_starts_on=0)

        assert period.start_date == datetime.date(2024, 5, 27)
        assert period.end_date == datetime.date(2024, 6, 9)

    def test_fortnights_tile_without_gaps(self):
        day = datetime.date(2024, 1, 1)
        period = period_for_date(day, PayPeriodType.FORTNIGHTLY, 0)
        for _ in range(30):
            following = period_for_date(period.end_date + datetime.timedelta(days=1), PayPeriodType.FORTNIGHTLY, 0)
            assert following.start_date == period.end_date + datetime.timedelta(days=1)
            assert (following.end_date - following.start_date).days == 13
            period = following

    def test_starts_on_configured_weekday(self):
        period = period_for_date(datetime.date(2024, 6, 12), PayPeriodType.FORTNIGHTLY, week_starts_on=2)
        assert period.start_date.weekday() == 2
        assert period.contains(datetime.date(2024, 6, 12))


class TestMonthlyPeriods:
    """Test calendar month pay periods."""

    def test_leap_february(self):
        period = period_for_date(datetime.date(2024, 2, 15), PayPeriodType.MONTHLY)

        assert period.start_date == datetime.date(2024, 2, 1)
        assert period.end_date == datetime.date(2024, 2, 29)

    def test_month_from_local_date(self):
        """31 January 14:00 UTC is already 1 February in Sydney."""
        period = resolve_pay_period_range(
            datetime.datetime(2024, 1, 31, 14, tzinfo=UTC), "monthly", "Australia/Sydney"
        )

        assert period.start_date == datetime.date(2024, 2, 1)

    def test_december(self):
        period = period_for_date(datetime.date(2024, 12, 31), PayPeriodType.MONTHLY)
        assert (period.start_date, period.end_date) == (datetime.date(2024, 12, 1), datetime.date(2024, 12, 31))


class TestRejectedInput:
    """Test invalid period requests."""

    def test_unknown_timezone(self):
        with pytest.raises(UnknownTimezone):
            resolve_pay_period_range(datetime.datetime(2024, 6, 12, tzinfo=UTC), "weekly", "Not/AZone")

    def test_unknown_period_type(self):
        with pytest.raises(ValueError):
            resolve_pay_period_range(datetime.datetime(2024, 6, 12, tzinfo=UTC), "quarterly", "UTC")

    def test_week_start_out_of_range(self):
        with pytest.raises(ValueError):
            period_for_date(datetime.date(2024, 6, 12), PayPeriodType.WEEKLY, week_starts_on=7)


class TestPayGuideCoverage:
    """Test effective-date checks against a pay period."""

    @pytest.fixture
    def june_week(self):
        return PayPeriodRange(
            start_date=datetime.date(2024, 6, 10),
            end_date=datetime.date(2024, 6, 16),
            period_type=PayPeriodType.WEEKLY,
        )

    def test_open_ended_guide_covers(self, make_guide, june_week):
        assert pay_guide_covers_period(make_guide(), june_week)

    def test_guide_starting_mid_period(self, make_guide, june_week):
        assert not pay_guide_covers_period(make_guide(effective_from=datetime.date(2024, 6, 12)), june_week)

    def test_guide_ending_mid_period(self, make_guide, june_week):
        guide = make_guide(effective_from=datetime.date(2024, 1, 1), effective_to=datetime.date(2024, 6, 14))
        assert not pay_guide_covers_period(guide, june_week)


class TestGroupShifts:
    """Test bucketing shifts by pay period."""

    def test_groups_in_period_order(self, make_shift, local):
        late = make_shift(local(2024, 6, 19, 9), local(2024, 6, 19, 17))
        early = make_shift(local(2024, 6, 11, 9), local(2024, 6, 11, 17))
        same_week = make_shift(local(2024, 6, 14, 9), local(2024, 6, 14, 17))

        grouped = group_shifts_by_pay_period([late, early, same_week], "weekly", "Australia/Sydney", 0)

        assert [p.start_date for p in grouped] == [datetime.date(2024, 6, 10), datetime.date(2024, 6, 17)]
        assert list(grouped.values()) == [[early, same_week], [late]]

    def test_empty(self):
        assert group_shifts_by_pay_period([], PayPeriodType.MONTHLY, "UTC") == {}
