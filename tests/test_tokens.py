"""
Tests for the token model and date-time resolution.
"""

from datetime import datetime, timedelta

import pytest

from src.parsing.calendar import add_months, start_of_day
from src.parsing.errors import TokenValidityError
from src.parsing.tokens import (
    DateTimeToken,
    DurationToken,
    EmptyDateToken,
    EmptyTimeToken,
    HourPeriod,
    NormalTimeToken,
    RelativeDate,
    RelativeDateToken,
    SpecialDate,
    SpecialDateToken,
    SpecialTime,
    SpecialTimeToken,
)


class TestDurationToken:
    """Tests for DurationToken validity and end times."""

    def test_end_time_adds_fields(self, now: datetime):
        token = DurationToken(hours=5, minutes=3)
        assert token.get_end_time(now) == now + timedelta(hours=5, minutes=3)

    def test_end_time_is_after_start(self, now: datetime):
        token = DurationToken(seconds=1)
        assert token.get_end_time(now) > now

    def test_zero_duration_raises(self, now: datetime):
        """A duration that does not move the clock has no end time."""
        with pytest.raises(TokenValidityError):
            DurationToken().get_end_time(now)

    def test_is_zero(self):
        assert DurationToken().is_zero
        assert not DurationToken(seconds=1).is_zero

    def test_negative_field_is_invalid(self, now: datetime):
        token = DurationToken(minutes=-1)

        assert not token.is_valid
        with pytest.raises(TokenValidityError):
            token.get_end_time(now)

    def test_non_finite_field_is_invalid(self):
        assert not DurationToken(minutes=float("nan")).is_valid
        assert not DurationToken(hours=float("inf")).is_valid

    def test_unrepresentable_end_time_raises(self, now: datetime):
        with pytest.raises(TokenValidityError):
            DurationToken(years=20000).get_end_time(now)

    def test_month_clamps_to_last_day(self):
        start = datetime(2026, 1, 31, 9, 0)
        assert DurationToken(months=1).get_end_time(start) == datetime(2026, 2, 28, 9, 0)

    def test_year_clamps_leap_day(self):
        start = datetime(2024, 2, 29, 9, 0)
        assert DurationToken(years=1).get_end_time(start) == datetime(2025, 2, 28, 9, 0)

    def test_fractional_month_uses_following_month_length(self):
        # Jan 31 + 1 month = Feb 28; half of the 28 days to Mar 28 is 14 days
        start = datetime(2026, 1, 31, 9, 0)
        assert DurationToken(months=1.5).get_end_time(start) == datetime(2026, 3, 14, 9, 0)

    def test_small_units_added_before_months(self):
        start = datetime(2026, 1, 30, 9, 0)
        assert DurationToken(days=1, months=1).get_end_time(start) == datetime(2026, 2, 28, 9, 0)

    def test_weeks_are_seven_days(self, now: datetime):
        assert DurationToken(weeks=2).get_end_time(now) == now + timedelta(days=14)

    def test_try_get_end_time_returns_none(self, now: datetime):
        assert DurationToken().try_get_end_time(now) is None
        assert DurationToken(minutes=5).try_get_end_time(now) == now + timedelta(minutes=5)

    def test_to_dict(self):
        data = DurationToken(hours=1.5).to_dict()

        assert data["type"] == "duration"
        assert data["hours"] == 1.5
        assert data["minutes"] == 0.0


class TestNormalTimeToken:
    """Tests for NormalTimeToken validity and 12-hour resolution."""

    def test_is_midnight(self):
        assert NormalTimeToken(12, 0, 0, HourPeriod.AM).is_midnight
        assert not NormalTimeToken(12, 0, 0, HourPeriod.PM).is_midnight
        assert not NormalTimeToken(12, 0, 1, HourPeriod.AM).is_midnight

    def test_is_midday(self):
        assert NormalTimeToken(12, 0, 0, HourPeriod.PM).is_midday
        assert not NormalTimeToken(12, 0, 0, HourPeriod.AM).is_midday
        assert not NormalTimeToken(12, 30, 0, HourPeriod.PM).is_midday

    @pytest.mark.parametrize(
        "token",
        [
            NormalTimeToken(0),
            NormalTimeToken(13),
            NormalTimeToken(5, 60),
            NormalTimeToken(5, 0, 75),
        ],
    )
    def test_out_of_range_is_invalid(self, token: NormalTimeToken, now: datetime):
        assert not token.is_valid
        with pytest.raises(TokenValidityError):
            token.to_datetime(now, start_of_day(now))

    @pytest.mark.parametrize(
        "token,expected_hour",
        [
            (NormalTimeToken(5, period=HourPeriod.AM), 5),
            (NormalTimeToken(5, period=HourPeriod.PM), 17),
            (NormalTimeToken(12, period=HourPeriod.AM), 0),
            (NormalTimeToken(12, period=HourPeriod.PM), 12),
        ],
    )
    def test_explicit_period(self, token: NormalTimeToken, expected_hour: int, now: datetime):
        day = start_of_day(now)
        assert token.to_datetime(now, day) == day.replace(hour=expected_hour)

    def test_undefined_prefers_early_reading(self):
        min_date = datetime(2026, 3, 10, 3, 0)
        day = start_of_day(min_date)

        assert NormalTimeToken(5).to_datetime(min_date, day) == datetime(2026, 3, 10, 5, 0)

    def test_undefined_uses_late_reading_when_early_has_passed(self, now: datetime):
        day = start_of_day(now)
        assert NormalTimeToken(5).to_datetime(now, day) == datetime(2026, 3, 10, 17, 0)

    def test_keeps_minutes_and_seconds(self, now: datetime):
        token = NormalTimeToken(3, 30, 15, HourPeriod.PM)
        assert token.to_datetime(now, start_of_day(now)) == datetime(2026, 3, 10, 15, 30, 15)

    def test_to_dict(self):
        data = NormalTimeToken(5, 30, 0, HourPeriod.PM).to_dict()
        assert data == {"type": "NormalTimeToken", "hour": 5, "minute": 30, "second": 0, "period": "pm"}


class TestSpecialAndEmptyTokens:
    """Tests for named and empty date and time parts."""

    def test_special_times(self, now: datetime):
        day = start_of_day(now)

        assert SpecialTimeToken(SpecialTime.MIDDAY).to_datetime(now, day) == day.replace(hour=12)
        assert SpecialTimeToken(SpecialTime.MIDNIGHT).to_datetime(now, day) == day

    def test_empty_time_is_start_of_day(self, now: datetime):
        day = start_of_day(now)
        assert EmptyTimeToken().to_datetime(now, day) == day

    def test_empty_date(self, now: datetime):
        assert EmptyDateToken().to_datetime(now, inclusive=True) == datetime(2026, 3, 10)
        assert EmptyDateToken().to_datetime(now, inclusive=False) == datetime(2026, 3, 11)

    def test_relative_date_ignores_inclusive(self, now: datetime):
        tomorrow = RelativeDateToken(RelativeDate.TOMORROW)
        today = RelativeDateToken(RelativeDate.TODAY)

        assert tomorrow.to_datetime(now, inclusive=True) == datetime(2026, 3, 11)
        assert tomorrow.to_datetime(now, inclusive=False) == datetime(2026, 3, 11)
        assert today.to_datetime(now, inclusive=False) == datetime(2026, 3, 10)

    def test_special_date_this_year(self, now: datetime):
        token = SpecialDateToken(SpecialDate.CHRISTMAS_DAY)
        assert token.to_datetime(now, inclusive=True) == datetime(2026, 12, 25)

    def test_special_date_rolls_to_next_year(self, now: datetime):
        token = SpecialDateToken(SpecialDate.NEW_YEAR)
        assert token.to_datetime(now, inclusive=True) == datetime(2027, 1, 1)

    def test_special_date_on_the_day(self):
        christmas_morning = datetime(2026, 12, 25, 10, 0)
        token = SpecialDateToken(SpecialDate.CHRISTMAS_DAY)

        assert token.to_datetime(christmas_morning, inclusive=True) == datetime(2026, 12, 25)
        assert token.to_datetime(christmas_morning, inclusive=False) == datetime(2027, 12, 25)


class TestDateTimeToken:
    """Tests for composite resolution to the earliest instant after the reference."""

    def test_time_later_today(self, now: datetime):
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(3, 30, 0, HourPeriod.PM))
        assert token.to_datetime(now) == datetime(2026, 3, 10, 15, 30)

    def test_time_already_passed_rolls_to_tomorrow(self, now: datetime):
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(9, 0, 0, HourPeriod.AM))
        assert token.to_datetime(now) == datetime(2026, 3, 11, 9, 0)

    def test_midnight_is_next_day(self, now: datetime):
        token = DateTimeToken(EmptyDateToken(), SpecialTimeToken(SpecialTime.MIDNIGHT))
        assert token.to_datetime(now) == datetime(2026, 3, 11, 0, 0)

    def test_result_is_strictly_after_reference(self):
        min_date = datetime(2026, 3, 10, 15, 30)
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(3, 30, 0, HourPeriod.PM))

        assert token.to_datetime(min_date) == datetime(2026, 3, 11, 15, 30)

    def test_undefined_period_prefers_this_afternoon(self, now: datetime):
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(5))
        assert token.to_datetime(now) == datetime(2026, 3, 10, 17, 0)

    def test_undefined_period_at_exact_early_reading_rolls_to_next_day(self):
        """The early reading wins a tie, so the afternoon reading is skipped."""
        min_date = datetime(2026, 3, 10, 5, 0)
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(5))

        assert token.to_datetime(min_date) == datetime(2026, 3, 11, 5, 0)

    def test_undefined_twelve_after_noon_rolls_to_midnight(self, now: datetime):
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(12))
        assert token.to_datetime(now) == datetime(2026, 3, 11, 0, 0)

    def test_tomorrow_at_noon(self, now: datetime):
        token = DateTimeToken(RelativeDateToken(RelativeDate.TOMORROW), SpecialTimeToken(SpecialTime.MIDDAY))
        assert token.to_datetime(now) == datetime(2026, 3, 11, 12, 0)

    def test_today_in_the_past_raises(self, now: datetime):
        token = DateTimeToken(RelativeDateToken(RelativeDate.TODAY), NormalTimeToken(9, 0, 0, HourPeriod.AM))

        with pytest.raises(TokenValidityError):
            token.to_datetime(now)
        assert token.try_get_end_time(now) is None

    def test_special_date_rolls_over_year(self):
        min_date = datetime(2026, 12, 31, 23, 59, 30)
        token = DateTimeToken(
            SpecialDateToken(SpecialDate.NEW_YEARS_EVE),
            NormalTimeToken(11, 59, 0, HourPeriod.PM),
        )

        assert token.to_datetime(min_date) == datetime(2027, 12, 31, 23, 59)

    def test_special_date_alone(self, now: datetime):
        token = DateTimeToken(SpecialDateToken(SpecialDate.CHRISTMAS_DAY), EmptyTimeToken())
        assert token.get_end_time(now) == datetime(2026, 12, 25)

    def test_empty_pair_is_invalid(self, now: datetime):
        token = DateTimeToken(EmptyDateToken(), EmptyTimeToken())

        assert not token.is_valid
        with pytest.raises(TokenValidityError):
            token.to_datetime(now)

    def test_invalid_time_part_raises(self, now: datetime):
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(13, 0, 0, HourPeriod.PM))

        assert not token.is_valid
        with pytest.raises(TokenValidityError):
            token.get_end_time(now)

    def test_overflow_raises_validity_error(self):
        min_date = datetime(9999, 12, 31, 10, 0)
        token = DateTimeToken(EmptyDateToken(), NormalTimeToken(9, 0, 0, HourPeriod.AM))

        with pytest.raises(TokenValidityError):
            token.to_datetime(min_date)

    def test_to_dict(self):
        token = DateTimeToken(RelativeDateToken(RelativeDate.TOMORROW), SpecialTimeToken(SpecialTime.MIDDAY))

        assert token.to_dict() == {
            "type": "date_time",
            "date": {"type": "RelativeDateToken", "relative_date": "tomorrow"},
            "time": {"type": "SpecialTimeToken", "special_time": "midday"},
        }


class TestCalendar:
    """Tests for month arithmetic helpers."""

    def test_negative_fractional_month(self):
        # Mar 31 - 1 month = Feb 28; half of the preceding 31 days (Jan 28 - Feb 28) rounds to 16
        assert add_months(datetime(2026, 3, 31), -1.5) == datetime(2026, 2, 12)
