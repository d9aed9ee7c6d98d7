"""
Timer Start Facade

TimerStart wraps a parsed token together with the locale and 24-hour
preference it was parsed with, and is what a timer consumes:
- get_end_time / try_get_end_time for the deadline
- str() for the canonical redisplay string

RecentTimerStarts keeps the most recently used timer starts, newest first,
with duplicates (by display string) collapsed.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from src.core.config import (
    DEFAULT_CONFIG,
    get_locale,
    get_prefer_24_hour_time,
    get_timer_config,
    is_valid_recent_capacity,
)
from src.parsing.formatter import format_token
from src.parsing.matcher import try_parse_timer_start
from src.parsing.tokens import DateTimeToken, DurationToken, TimerStartToken

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


class TimerStartType(str, Enum):
    """Whether a timer counts down an interval or until an instant."""

    DURATION = "duration"
    DATE_TIME = "date_time"


@dataclass(frozen=True)
class TimerStart:
    """A set of values used to start a timer."""

    token: TimerStartToken
    locale: str = "en-US"
    prefer_24_hour: bool = False

    @classmethod
    def from_string(
        cls,
        text: str,
        locale: str | None = None,
        prefer_24_hour: bool | None = None,
    ) -> "TimerStart | None":
        """
        Parse a timer start from text.

        Args:
            text: Input text such as "5 minutes" or "tomorrow at noon"
            locale: Locale name (defaults to the configured locale)
            prefer_24_hour: 24-hour preference (defaults to the configured value)

        Returns:
            TimerStart, or None if the text is not a supported timer start
        """
        locale = locale or get_locale()
        if prefer_24_hour is None:
            prefer_24_hour = get_prefer_24_hour_time()

        token = try_parse_timer_start(text, locale, prefer_24_hour)
        if token is None:
            return None

        return cls(token=token, locale=locale, prefer_24_hour=prefer_24_hour)

    @classmethod
    def default(cls, locale: str | None = None, prefer_24_hour: bool | None = None) -> "TimerStart":
        """Get the configured default timer start (five minutes unless changed)."""
        text = get_timer_config().get("default_start", DEFAULT_CONFIG["timer"]["default_start"])
        timer_start = cls.from_string(text, locale, prefer_24_hour) if isinstance(text, str) else None

        if timer_start is None:
            logger.warning(f"Invalid default timer start {text!r}, using 5 minutes")
            timer_start = cls(
                token=DurationToken(minutes=5.0),
                locale=locale or get_locale(),
                prefer_24_hour=get_prefer_24_hour_time() if prefer_24_hour is None else prefer_24_hour,
            )

        return timer_start

    @classmethod
    def zero(cls, locale: str | None = None) -> "TimerStart":
        """Get the zero-length timer start."""
        return cls(token=DurationToken(), locale=locale or get_locale())

    @property
    def type(self) -> TimerStartType:
        if isinstance(self.token, DateTimeToken):
            return TimerStartType.DATE_TIME
        return TimerStartType.DURATION

    @property
    def is_valid(self) -> bool:
        return self.token.is_valid

    def get_end_time(self, start_time: datetime) -> datetime:
        """
        Get the end time for a timer started at start_time.

        Raises:
            TokenValidityError: If the end time cannot be computed
        """
        return self.token.get_end_time(start_time)

    def try_get_end_time(self, start_time: datetime) -> datetime | None:
        return self.token.try_get_end_time(start_time)

    def is_current(self, now: datetime | None = None) -> bool:
        """Whether this timer start can still be used to start a timer now."""
        now = now or datetime.now()
        end_time = self.try_get_end_time(now)
        return end_time is not None and end_time >= now

    def __str__(self) -> str:
        return format_token(self.token, self.locale, self.prefer_24_hour)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": self.type.value,
            "display": str(self),
            "locale": self.locale,
            "valid": self.is_valid,
            "token": self.token.to_dict(),
        }


@dataclass
class RecentTimerStarts:
    """
    The most recent timer starts in reverse chronological order.

    Entries with the same display string are collapsed; the list never grows
    beyond capacity.
    """

    capacity: int | None = None
    _timer_starts: list[TimerStart] = field(default_factory=list)

    def __post_init__(self):
        if self.capacity is None:
            capacity = get_timer_config().get("recent_capacity", DEFAULT_CAPACITY)
            if not is_valid_recent_capacity(capacity):
                logger.warning(f"Invalid recent_capacity {capacity!r}, using {DEFAULT_CAPACITY}")
                capacity = DEFAULT_CAPACITY
            self.capacity = capacity
        if self.capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {self.capacity}")

    def __len__(self) -> int:
        return len(self._timer_starts)

    def __iter__(self):
        return iter(self._timer_starts)

    def add(self, timer_start: TimerStart) -> None:
        """Move timer_start to the top of the list."""
        display = str(timer_start)
        self._timer_starts = [e for e in self._timer_starts if str(e) != display]
        self._timer_starts.insert(0, timer_start)

        # Limit the number of entries in the list
        del self._timer_starts[self.capacity :]

    def current(self, now: datetime | None = None) -> list[TimerStart]:
        """Entries that can still start a timer, newest first."""
        now = now or datetime.now()
        return [e for e in self._timer_starts if e.is_current(now)]

    def last(self, now: datetime | None = None) -> TimerStart:
        """The most recent current entry, or the default timer start."""
        now = now or datetime.now()
        return next((e for e in self._timer_starts if e.is_current(now)), None) or TimerStart.default()

    def clear(self) -> None:
        self._timer_starts.clear()

    def to_strings(self) -> list[str]:
        return [str(e) for e in self._timer_starts]

    @classmethod
    def from_strings(
        cls,
        values: Iterable[str],
        locale: str | None = None,
        prefer_24_hour: bool | None = None,
        capacity: int | None = None,
    ) -> "RecentTimerStarts":
        """
        Rebuild the list from display strings, oldest last.

        Strings that no longer parse are skipped.
        """
        recent = cls(capacity=capacity)
        for value in values:
            timer_start = TimerStart.from_string(value, locale, prefer_24_hour)
            if timer_start is None:
                logger.debug(f"Skipping unparseable recent timer start: {value!r}")
                continue
            if len(recent) >= recent.capacity:
                break
            recent._timer_starts.append(timer_start)

        return recent
