"""
Token Model for Timer Start

Value types produced by the grammar matcher:

- DurationToken: relative duration ("5h3m", "90 minutes")
- DateTimeToken: a DateToken paired with a TimeToken ("tomorrow at noon")

Date variants: EmptyDateToken, RelativeDateToken, SpecialDateToken
Time variants: EmptyTimeToken, NormalTimeToken, SpecialTimeToken

Tokens are frozen dataclasses. Validity is computed on demand from field
values; resolution raises TokenValidityError on an invalid token.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import astuple, dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta

from src.parsing.calendar import add_months, add_weeks, add_years, at_time, start_of_day
from src.parsing.errors import TokenValidityError

logger = logging.getLogger(__name__)


class HourPeriod(str, Enum):
    """Period of a 12-hour clock reading."""

    AM = "am"
    PM = "pm"
    # Ante or post meridiem, whichever comes first after the reference time
    UNDEFINED = "undefined"


class SpecialTime(str, Enum):
    """Named times of day."""

    MIDDAY = "midday"
    MIDNIGHT = "midnight"


class RelativeDate(str, Enum):
    """Dates relative to the reference date."""

    TODAY = "today"
    TOMORROW = "tomorrow"


class SpecialDate(str, Enum):
    """Named dates that recur every year."""

    NEW_YEAR = "new_year"
    CHRISTMAS_DAY = "christmas_day"
    NEW_YEARS_EVE = "new_years_eve"


@dataclass(frozen=True)
class SpecialTimeDefinition:
    """Wall-clock time for a SpecialTime. match_group names its regex group."""

    special_time: SpecialTime
    hour: int
    minute: int
    second: int

    @property
    def match_group(self) -> str:
        return self.special_time.value


@dataclass(frozen=True)
class RelativeDateDefinition:
    """Offset from the reference date for a RelativeDate."""

    relative_date: RelativeDate
    year_delta: int
    month_delta: int
    day_delta: int

    @property
    def match_group(self) -> str:
        return self.relative_date.value


@dataclass(frozen=True)
class SpecialDateDefinition:
    """Month and day for a SpecialDate."""

    special_date: SpecialDate
    month: int
    day: int

    @property
    def match_group(self) -> str:
        return self.special_date.value


SPECIAL_TIMES: tuple[SpecialTimeDefinition, ...] = (
    SpecialTimeDefinition(SpecialTime.MIDDAY, hour=12, minute=0, second=0),
    SpecialTimeDefinition(SpecialTime.MIDNIGHT, hour=0, minute=0, second=0),
)

RELATIVE_DATES: tuple[RelativeDateDefinition, ...] = (
    RelativeDateDefinition(RelativeDate.TODAY, year_delta=0, month_delta=0, day_delta=0),
    RelativeDateDefinition(RelativeDate.TOMORROW, year_delta=0, month_delta=0, day_delta=1),
)

SPECIAL_DATES: tuple[SpecialDateDefinition, ...] = (
    SpecialDateDefinition(SpecialDate.NEW_YEAR, month=1, day=1),
    SpecialDateDefinition(SpecialDate.CHRISTMAS_DAY, month=12, day=25),
    SpecialDateDefinition(SpecialDate.NEW_YEARS_EVE, month=12, day=31),
)


class Token(ABC):
    """Common validity contract for every token variant."""

    @property
    @abstractmethod
    def is_valid(self) -> bool:
        """Whether the field values satisfy the variant's range invariants."""
        pass

    def ensure_valid(self) -> None:
        """
        Raise if this token is not valid.

        Raises:
            TokenValidityError: If is_valid is False
        """
        if not self.is_valid:
            raise TokenValidityError(f"{type(self).__name__} is not valid: {self!r}")


class TimerStartToken(Token):
    """A parsed timer start: either a DurationToken or a DateTimeToken."""

    @abstractmethod
    def get_end_time(self, start_time: datetime) -> datetime:
        """
        Return the end time for a timer started at start_time.

        Raises:
            TokenValidityError: If the token is invalid or has no end time
                strictly after start_time
        """
        pass

    def try_get_end_time(self, start_time: datetime) -> datetime | None:
        """Return the end time, or None if it cannot be resolved."""
        try:
            return self.get_end_time(start_time)
        except TokenValidityError as e:
            logger.debug(f"No end time for {self!r}: {e}")
            return None


# ---------------------------------------------------------------------------
# Duration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DurationToken(TimerStartToken):
    """A time interval expressed in calendar units."""

    years: float = 0.0
    months: float = 0.0
    weeks: float = 0.0
    days: float = 0.0
    hours: float = 0.0
    minutes: float = 0.0
    seconds: float = 0.0

    # Largest unit first; matches the display order.
    UNITS = ("years", "months", "weeks", "days", "hours", "minutes", "seconds")

    @property
    def is_valid(self) -> bool:
        return all(math.isfinite(value) and value >= 0 for value in astuple(self))

    @property
    def is_zero(self) -> bool:
        return all(value == 0 for value in astuple(self))

    def get_end_time(self, start_time: datetime) -> datetime:
        """
        Add the duration to start_time, smallest unit first.

        Seconds through days are exact offsets; weeks are seven days; months
        and years are calendar steps that clamp the day of month. Adding the
        small units first decides which day of month the calendar steps start
        from.

        Raises:
            TokenValidityError: If the token is invalid, the end time is not
                representable, or it is not strictly after start_time
        """
        self.ensure_valid()

        try:
            end_time = start_time
            end_time = end_time + timedelta(seconds=self.seconds)
            end_time = end_time + timedelta(minutes=self.minutes)
            end_time = end_time + timedelta(hours=self.hours)
            end_time = end_time + timedelta(days=self.days)
            end_time = add_weeks(end_time, self.weeks)
            end_time = add_months(end_time, self.months)
            end_time = add_years(end_time, self.years)
        except (OverflowError, ValueError) as e:
            raise TokenValidityError(f"End time out of range for {self!r}") from e

        if end_time <= start_time:
            raise TokenValidityError(f"{self!r} does not end after {start_time.isoformat()}")

        return end_time

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {"type": "duration", **{unit: getattr(self, unit) for unit in self.UNITS}}


# ---------------------------------------------------------------------------
# Time tokens
# ---------------------------------------------------------------------------


class TimeToken(Token):
    """The time-of-day part of a DateTimeToken."""

    @abstractmethod
    def to_datetime(self, min_date: datetime, date_part: date | datetime) -> datetime:
        """
        Return the instant on date_part's date represented by this token.

        The result may still be before min_date; the caller rolls the date
        forward.
        """
        pass

    def to_dict(self) -> dict:
        return {"type": type(self).__name__}


@dataclass(frozen=True)
class EmptyTimeToken(TimeToken):
    """No time was given. Resolves to the start of the day."""

    @property
    def is_valid(self) -> bool:
        return True

    def to_datetime(self, min_date: datetime, date_part: date | datetime) -> datetime:
        self.ensure_valid()
        return at_time(date_part, 0, 0, 0)


@dataclass(frozen=True)
class NormalTimeToken(TimeToken):
    """A time of day stored as a 12-hour clock reading."""

    hour: int
    minute: int = 0
    second: int = 0
    period: HourPeriod = HourPeriod.UNDEFINED

    @property
    def is_valid(self) -> bool:
        return (
            1 <= self.hour <= 12
            and 0 <= self.minute <= 59
            and 0 <= self.second <= 59
            and self.period in tuple(HourPeriod)
        )

    @property
    def is_midnight(self) -> bool:
        return (
            self.hour == 12
            and self.minute == 0
            and self.second == 0
            and self.period == HourPeriod.AM
        )

    @property
    def is_midday(self) -> bool:
        return (
            self.hour == 12
            and self.minute == 0
            and self.second == 0
            and self.period == HourPeriod.PM
        )

    def to_datetime(self, min_date: datetime, date_part: date | datetime) -> datetime:
        """
        Resolve the 12-hour reading on date_part's date.

        AM and PM map directly. An undefined period prefers the early (AM)
        reading unless it is already before min_date.
        """
        self.ensure_valid()

        early = at_time(date_part, 0 if self.hour == 12 else self.hour, self.minute, self.second)
        late = at_time(date_part, self.hour + 12 if self.hour < 12 else self.hour, self.minute, self.second)

        if self.period == HourPeriod.AM:
            return early
        if self.period == HourPeriod.PM:
            return late
        return late if early < min_date else early

    def to_dict(self) -> dict:
        return {
            "type": type(self).__name__,
            "hour": self.hour,
            "minute": self.minute,
            "second": self.second,
            "period": self.period.value,
        }


@dataclass(frozen=True)
class SpecialTimeToken(TimeToken):
    """A named time of day (midday, midnight)."""

    special_time: SpecialTime

    @property
    def definition(self) -> SpecialTimeDefinition | None:
        return next((d for d in SPECIAL_TIMES if d.special_time == self.special_time), None)

    @property
    def is_valid(self) -> bool:
        return self.definition is not None

    def to_datetime(self, min_date: datetime, date_part: date | datetime) -> datetime:
        self.ensure_valid()
        definition = self.definition
        return at_time(date_part, definition.hour, definition.minute, definition.second)

    def to_dict(self) -> dict:
        return {"type": type(self).__name__, "special_time": self.special_time.value}


# ---------------------------------------------------------------------------
# Date tokens
# ---------------------------------------------------------------------------


class DateToken(Token):
    """The date part of a DateTimeToken."""

    @abstractmethod
    def to_datetime(self, min_date: datetime, inclusive: bool) -> datetime:
        """
        Return the start of the first date this token represents.

        Args:
            min_date: Reference instant
            inclusive: Whether min_date's own date may be returned

        Returns:
            Midnight at the start of the resolved date
        """
        pass

    def to_dict(self) -> dict:
        return {"type": type(self).__name__}


@dataclass(frozen=True)
class EmptyDateToken(DateToken):
    """No date was given. Resolves to the reference date or the day after."""

    @property
    def is_valid(self) -> bool:
        return True

    def to_datetime(self, min_date: datetime, inclusive: bool) -> datetime:
        self.ensure_valid()
        day = start_of_day(min_date)
        return day if inclusive else day + timedelta(days=1)


@dataclass(frozen=True)
class RelativeDateToken(DateToken):
    """A date relative to the reference date (today, tomorrow)."""

    relative_date: RelativeDate

    @property
    def definition(self) -> RelativeDateDefinition | None:
        return next((d for d in RELATIVE_DATES if d.relative_date == self.relative_date), None)

    @property
    def is_valid(self) -> bool:
        return self.definition is not None

    def to_datetime(self, min_date: datetime, inclusive: bool) -> datetime:
        # "today" stays today even when an exclusive date is requested
        self.ensure_valid()
        definition = self.definition
        day = start_of_day(min_date) + timedelta(days=definition.day_delta)
        return day + relativedelta(months=definition.month_delta, years=definition.year_delta)

    def to_dict(self) -> dict:
        return {"type": type(self).__name__, "relative_date": self.relative_date.value}


@dataclass(frozen=True)
class SpecialDateToken(DateToken):
    """A named date that recurs every year (New Year's Day, Christmas Day)."""

    special_date: SpecialDate

    @property
    def definition(self) -> SpecialDateDefinition | None:
        return next((d for d in SPECIAL_DATES if d.special_date == self.special_date), None)

    @property
    def is_valid(self) -> bool:
        return self.definition is not None

    def to_datetime(self, min_date: datetime, inclusive: bool) -> datetime:
        """Return this year's occurrence, or next year's if it has passed."""
        self.ensure_valid()
        definition = self.definition
        today = start_of_day(min_date)
        day = today.replace(month=definition.month, day=definition.day)

        if day < today or (day == today and not inclusive):
            day = day + relativedelta(years=1)

        return day

    def to_dict(self) -> dict:
        return {"type": type(self).__name__, "special_date": self.special_date.value}


# ---------------------------------------------------------------------------
# Date and time
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateTimeToken(TimerStartToken):
    """An absolute instant given as a date part and a time part."""

    date_token: DateToken
    time_token: TimeToken

    @property
    def is_valid(self) -> bool:
        if isinstance(self.date_token, EmptyDateToken) and isinstance(self.time_token, EmptyTimeToken):
            return False
        return self.date_token.is_valid and self.time_token.is_valid

    def to_datetime(self, min_date: datetime) -> datetime:
        """
        Return the earliest instant strictly after min_date for this token.

        The date is resolved inclusively first. If the combined instant is
        not after min_date the date is resolved again exclusively and the
        time recomputed against the new date.

        Raises:
            TokenValidityError: If the token is invalid or no such instant
                exists
        """
        self.ensure_valid()

        tried: list[datetime] = []
        try:
            for inclusive in (True, False):
                date_part = self.date_token.to_datetime(min_date, inclusive)
                if date_part in tried:
                    continue
                tried.append(date_part)

                candidate = self.time_token.to_datetime(min_date, date_part)
                if candidate > min_date:
                    return candidate
        except TokenValidityError:
            raise
        except (OverflowError, ValueError) as e:
            raise TokenValidityError(f"Date out of range for {self!r}") from e

        raise TokenValidityError(f"{self!r} has no instant after {min_date.isoformat()}")

    def get_end_time(self, start_time: datetime) -> datetime:
        return self.to_datetime(start_time)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "type": "date_time",
            "date": self.date_token.to_dict(),
            "time": self.time_token.to_dict(),
        }
