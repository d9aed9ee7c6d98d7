"""
Pattern Providers for Timer Start

Each token variant has one stateless parser singleton that:
- lists its regex fragments for a locale, in precedence order
- reports whether it may be combined with a parser from the other side
- builds a token from a successful match

ParserRegistry holds the closed set of date and time parsers and computes
the compatible (date, time) pairs used to build composite grammars.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

from src.parsing.errors import TimerStartFormatError
from src.parsing.locales import LocaleTable
from src.parsing.tokens import (
    RELATIVE_DATES,
    SPECIAL_DATES,
    SPECIAL_TIMES,
    DateToken,
    DurationToken,
    EmptyDateToken,
    EmptyTimeToken,
    HourPeriod,
    NormalTimeToken,
    RelativeDateToken,
    SpecialDateToken,
    SpecialTimeToken,
    TimeToken,
)

logger = logging.getLogger(__name__)


def _group(match: Any, name: str) -> str | None:
    """Value of a named group, or None if it did not participate or does not exist."""
    if name not in match.re.groupindex:
        return None
    return match.group(name)


def _captures(match: Any, name: str) -> list[str]:
    """Every capture of a named group, in order."""
    if name not in match.re.groupindex:
        return []
    return match.captures(name)


def parse_number(value: str, table: LocaleTable) -> float:
    """
    Parse a locale-formatted decimal number.

    Raises:
        ValueError: If value is not a number
    """
    return float(value.strip().replace(table.decimal_separator, "."))


def _named_group_pattern(group: str, pattern: str) -> str:
    return f"(?P<{group}>{pattern})"


class TokenParser(ABC):
    """Uniform parser capability shared by every token variant."""

    __slots__ = ()

    @abstractmethod
    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        """Yield regex fragments for the locale, highest precedence first."""
        pass

    @abstractmethod
    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> Any:
        """
        Build a token from a successful match.

        Raises:
            ValueError: If a captured value cannot be converted
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# =============================================================================
# Duration
# =============================================================================


class DurationParser(TokenParser):
    """Parses minutes-only, compact ("5h3m") and verbose ("5 hours") durations."""

    __slots__ = ()

    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        yield table.duration_minutes_only_pattern
        yield table.duration_short_form_pattern
        yield table.duration_long_form_pattern

    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> DurationToken:
        # A unit may appear more than once ("1h 1h"); every capture is summed.
        values = {
            unit: sum(parse_number(capture, table) for capture in _captures(match, unit))
            for unit in DurationToken.UNITS
        }
        return DurationToken(**{unit: float(value) for unit, value in values.items()})


# =============================================================================
# Date parsers
# =============================================================================


class DateTokenParser(TokenParser):
    """Parser for the date side of a date-time grammar."""

    __slots__ = ()

    def is_compatible_with(self, time_parser: "TimeTokenParser") -> bool:
        return True

    @abstractmethod
    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> DateToken:
        pass


class EmptyDateParser(DateTokenParser):
    __slots__ = ()

    def is_compatible_with(self, time_parser: "TimeTokenParser") -> bool:
        return not isinstance(time_parser, EmptyTimeParser)

    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        yield ""

    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> DateToken:
        return EmptyDateToken()


class RelativeDateParser(DateTokenParser):
    __slots__ = ()

    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        for definition in RELATIVE_DATES:
            entry = table.relative_dates[definition.match_group]
            yield _named_group_pattern(definition.match_group, entry.pattern)

    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> DateToken:
        for definition in RELATIVE_DATES:
            if _group(match, definition.match_group) is not None:
                return RelativeDateToken(definition.relative_date)
        raise TimerStartFormatError("Match does not contain a relative date")


class SpecialDateParser(DateTokenParser):
    __slots__ = ()

    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        for definition in SPECIAL_DATES:
            entry = table.special_dates[definition.match_group]
            yield _named_group_pattern(definition.match_group, entry.pattern)

    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> DateToken:
        for definition in SPECIAL_DATES:
            if _group(match, definition.match_group) is not None:
                return SpecialDateToken(definition.special_date)
        raise TimerStartFormatError("Match does not contain a special date")


# =============================================================================
# Time parsers
# =============================================================================


class TimeTokenParser(TokenParser):
    """Parser for the time side of a date-time grammar."""

    __slots__ = ()

    def is_compatible_with(self, date_parser: DateTokenParser) -> bool:
        return True

    @abstractmethod
    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> TimeToken:
        pass


class EmptyTimeParser(TimeTokenParser):
    __slots__ = ()

    def is_compatible_with(self, date_parser: DateTokenParser) -> bool:
        return not isinstance(date_parser, EmptyDateParser)

    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        yield ""

    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> TimeToken:
        return EmptyTimeToken()


class NormalTimeParser(TimeTokenParser):
    """Parses clock times: military ("0730"), "15:30", "5 pm"."""

    __slots__ = ()

    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        yield table.military_time_pattern
        yield table.time_with_separators_pattern
        yield table.time_without_separators_pattern

    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> TimeToken:
        hour = int(_group(match, "hour") or 0)
        minute = int(_group(match, "minute") or 0)
        second = int(_group(match, "second") or 0)

        if _group(match, "am") is not None:
            period = HourPeriod.AM
        elif _group(match, "pm") is not None:
            period = HourPeriod.PM
        elif _group(match, "military") is not None or prefer_24_hour:
            # 24-hour reading: the period is never ambiguous
            if hour == 0:
                hour, period = 12, HourPeriod.AM
            elif hour < 12:
                period = HourPeriod.AM
            elif hour == 12:
                period = HourPeriod.PM
            else:
                hour, period = hour - 12, HourPeriod.PM
        else:
            if hour == 0:
                hour, period = 12, HourPeriod.AM
            elif hour <= 12:
                period = HourPeriod.UNDEFINED
            else:
                hour, period = hour - 12, HourPeriod.PM

        return NormalTimeToken(hour=hour, minute=minute, second=second, period=period)


class SpecialTimeParser(TimeTokenParser):
    __slots__ = ()

    def get_patterns(self, table: LocaleTable) -> Iterator[str]:
        for definition in SPECIAL_TIMES:
            entry = table.special_times[definition.match_group]
            yield _named_group_pattern(definition.match_group, entry.pattern)

    def parse_match(self, match: Any, table: LocaleTable, prefer_24_hour: bool = False) -> TimeToken:
        for definition in SPECIAL_TIMES:
            if _group(match, definition.match_group) is not None:
                return SpecialTimeToken(definition.special_time)
        raise TimerStartFormatError("Match does not contain a special time")


# Singletons shared by every caller
DURATION_PARSER = DurationParser()
EMPTY_DATE_PARSER = EmptyDateParser()
RELATIVE_DATE_PARSER = RelativeDateParser()
SPECIAL_DATE_PARSER = SpecialDateParser()
EMPTY_TIME_PARSER = EmptyTimeParser()
NORMAL_TIME_PARSER = NormalTimeParser()
SPECIAL_TIME_PARSER = SpecialTimeParser()

DEFAULT_DATE_PARSERS: tuple[DateTokenParser, ...] = (
    EMPTY_DATE_PARSER,
    RELATIVE_DATE_PARSER,
    SPECIAL_DATE_PARSER,
)

DEFAULT_TIME_PARSERS: tuple[TimeTokenParser, ...] = (
    EMPTY_TIME_PARSER,
    NORMAL_TIME_PARSER,
    SPECIAL_TIME_PARSER,
)


class ParserRegistry:
    """
    Registry of the parsers that make up the grammar.

    Manages:
    - The duration parser
    - Date and time parsers, in precedence order
    - The compatibility relation between date and time parsers
    """

    def __init__(
        self,
        date_parsers: tuple[DateTokenParser, ...] = DEFAULT_DATE_PARSERS,
        time_parsers: tuple[TimeTokenParser, ...] = DEFAULT_TIME_PARSERS,
        duration_parser: DurationParser = DURATION_PARSER,
    ):
        """
        Initialize the registry.

        Args:
            date_parsers: Date parsers, highest precedence first
            time_parsers: Time parsers, highest precedence first
            duration_parser: Parser for the duration grammar
        """
        self._date_parsers = tuple(date_parsers)
        self._time_parsers = tuple(time_parsers)
        self._duration_parser = duration_parser

    @property
    def duration_parser(self) -> DurationParser:
        return self._duration_parser

    @property
    def date_parsers(self) -> tuple[DateTokenParser, ...]:
        return self._date_parsers

    @property
    def time_parsers(self) -> tuple[TimeTokenParser, ...]:
        return self._time_parsers

    def compatible_pairs(self) -> list[tuple[DateTokenParser, TimeTokenParser]]:
        """
        List (date, time) parser pairs that may form a composite grammar.

        A pair is included only if both sides report compatibility.
        """
        pairs = []
        for date_parser in self._date_parsers:
            for time_parser in self._time_parsers:
                if date_parser.is_compatible_with(time_parser) and time_parser.is_compatible_with(
                    date_parser
                ):
                    pairs.append((date_parser, time_parser))
                else:
                    logger.debug(f"Skipping incompatible pair: {date_parser!r} + {time_parser!r}")
        return pairs


DEFAULT_REGISTRY = ParserRegistry()
