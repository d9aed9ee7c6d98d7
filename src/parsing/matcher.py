"""
Grammar Matcher for Timer Start

Turns raw input text into a TimerStartToken by trying candidate grammars in
a fixed order against the whole input:

1. Duration family: minutes-only ("5"), compact ("5h3m"), verbose ("5 hours")
2. Date-time family: every compatible (date parser, time parser) pair, each
   (date pattern, time pattern) combination composed into one regex

The duration family is tried first, so a bare number is always minutes and
military time ("0730") is only read as a clock time next to a date
("tomorrow 0730").

Matching is case-insensitive and purely syntactic: the returned token may
still be invalid.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import regex

from src.parsing.errors import RECOVERABLE_ERRORS, TimerStartArgumentError, TimerStartFormatError
from src.parsing.locales import LocaleTable, get_locale_table
from src.parsing.providers import (
    DEFAULT_REGISTRY,
    DateTokenParser,
    ParserRegistry,
    TimeTokenParser,
)
from src.parsing.tokens import DateTimeToken, TimerStartToken

logger = logging.getLogger(__name__)

DURATION_FAMILY = "duration"
DATE_TIME_FAMILY = "date_time"
DEFAULT_FAMILY_ORDER: tuple[str, ...] = (DURATION_FAMILY, DATE_TIME_FAMILY)


@dataclass(frozen=True)
class Candidate:
    """One anchored grammar to try, plus the parsers that build its token."""

    family: str
    pattern: str
    date_parser: DateTokenParser | None = None
    time_parser: TimeTokenParser | None = None
    duration_parser: Any = None

    def build(self, match: Any, table: LocaleTable, prefer_24_hour: bool) -> TimerStartToken:
        """
        Build the token for a successful match.

        Raises:
            ValueError: If a captured value cannot be converted
            OverflowError: If a captured number is not representable
        """
        if self.duration_parser is not None:
            return self.duration_parser.parse_match(match, table, prefer_24_hour)
        return DateTimeToken(
            date_token=self.date_parser.parse_match(match, table, prefer_24_hour),
            time_token=self.time_parser.parse_match(match, table, prefer_24_hour),
        )


@lru_cache(maxsize=512)
def _compile(pattern: str) -> Any:
    # Surrounding whitespace is ignored; fullmatch anchors the rest
    return regex.compile(rf"\s*(?:{pattern})\s*", regex.IGNORECASE)


def compose_pattern(date_pattern: str, time_pattern: str, table: LocaleTable) -> str:
    """
    Join a date fragment and a time fragment into one pattern.

    An empty side leaves the other standing alone. Otherwise every locale
    ordering template is tried as an alternative, in table order.
    """
    if not date_pattern:
        return time_pattern
    if not time_pattern:
        return date_pattern

    alternatives = [
        template.format(date=f"(?:{date_pattern})", time=f"(?:{time_pattern})")
        for template in table.date_time_templates
    ]
    return "|".join(f"(?:{alternative})" for alternative in alternatives)


def build_duration_candidates(table: LocaleTable, registry: ParserRegistry) -> Iterator[Candidate]:
    """Yield the duration grammars in precedence order."""
    parser = registry.duration_parser
    for pattern in parser.get_patterns(table):
        yield Candidate(family=DURATION_FAMILY, pattern=pattern, duration_parser=parser)


def build_date_time_candidates(table: LocaleTable, registry: ParserRegistry) -> Iterator[Candidate]:
    """Yield the composite date-time grammars in precedence order."""
    for date_parser, time_parser in registry.compatible_pairs():
        for date_pattern in date_parser.get_patterns(table):
            for time_pattern in time_parser.get_patterns(table):
                yield Candidate(
                    family=DATE_TIME_FAMILY,
                    pattern=compose_pattern(date_pattern, time_pattern, table),
                    date_parser=date_parser,
                    time_parser=time_parser,
                )


CANDIDATE_BUILDERS = {
    DURATION_FAMILY: build_duration_candidates,
    DATE_TIME_FAMILY: build_date_time_candidates,
}


def parse_timer_start(
    text: str,
    locale: str = "en-US",
    prefer_24_hour: bool = False,
    registry: ParserRegistry | None = None,
    family_order: tuple[str, ...] = DEFAULT_FAMILY_ORDER,
) -> TimerStartToken:
    """
    Parse a timer start from user input.

    Examples:
        - "5" -> DurationToken(minutes=5)
        - "5h3m" -> DurationToken(hours=5, minutes=3)
        - "15:30" -> DateTimeToken(EmptyDateToken(), NormalTimeToken(3, 30, 0, PM))
        - "tomorrow at noon" -> DateTimeToken(RelativeDateToken(TOMORROW), SpecialTimeToken(MIDDAY))

    Args:
        text: Raw input text
        locale: Locale selecting the pattern table
        prefer_24_hour: Read ambiguous clock hours as 24-hour times
        registry: Parser registry (defaults to the built-in parsers)
        family_order: Order in which the grammar families are tried

    Returns:
        The token built by the first matching grammar

    Raises:
        TimerStartArgumentError: If text is None or locale is empty
        TimerStartFormatError: If no grammar matches the whole input
    """
    if text is None:
        raise TimerStartArgumentError("text is required")

    table = get_locale_table(locale)
    registry = registry or DEFAULT_REGISTRY

    for family in family_order:
        builder = CANDIDATE_BUILDERS.get(family)
        if builder is None:
            raise TimerStartArgumentError(f"Unknown grammar family: {family!r}")

        for candidate in builder(table, registry):
            match = _compile(candidate.pattern).fullmatch(text)
            if match is None:
                continue

            try:
                token = candidate.build(match, table, prefer_24_hour)
            except RECOVERABLE_ERRORS as e:
                logger.debug(f"Discarding {family} candidate for {text!r}: {e}")
                continue

            logger.debug(f"Parsed {text!r} as {token!r}")
            return token

    raise TimerStartFormatError(f"Unrecognized timer start: {text!r}")


def try_parse_timer_start(
    text: str,
    locale: str = "en-US",
    prefer_24_hour: bool = False,
) -> TimerStartToken | None:
    """Parse a timer start, returning None instead of raising on bad input."""
    try:
        return parse_timer_start(text, locale, prefer_24_hour)
    except (TimerStartArgumentError, TimerStartFormatError) as e:
        logger.debug(f"Could not parse {text!r}: {e}")
        return None


if __name__ == "__main__":
    from datetime import datetime

    import fire

    def parse(text: str, locale: str = "en-US", prefer_24_hour: bool = False, start: str | None = None):
        """
        Parse a timer start and resolve its end time.

        Args:
            text: Input to parse
            locale: Locale name
            prefer_24_hour: Read ambiguous hours as 24-hour times
            start: Optional start time (ISO format)
        """
        try:
            token = parse_timer_start(text, locale, prefer_24_hour)
        except TimerStartFormatError as e:
            return {"error": str(e)}

        start_time = datetime.fromisoformat(start) if start else datetime.now()
        end_time = token.try_get_end_time(start_time)
        return {
            "token": token.to_dict(),
            "valid": token.is_valid,
            "end_time": end_time.isoformat() if end_time else None,
        }

    def demo():
        """Parse a set of example inputs."""
        examples = [
            "5",
            "5h3m",
            "1h1h",
            "1.5 hours",
            "2 weeks and 3 days",
            "15:30",
            "5 pm",
            "midnight",
            "noon",
            "tomorrow at noon",
            "tomorrow 0730",
            "christmas at 8 am",
            "new year's eve 11:59 pm",
            "not a time",
        ]

        return [{"query": example, **parse(example)} for example in examples]

    fire.Fire({"parse": parse, "demo": demo})
