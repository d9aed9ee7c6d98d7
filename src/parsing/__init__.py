"""
Timer Start Parsing Module

This module provides the token model, locale pattern tables, grammar
matcher, resolver and formatter for timer-start expressions such as
"5h3m", "15:30" or "tomorrow at noon".
"""

from .errors import (
    RECOVERABLE_ERRORS,
    TimerStartArgumentError,
    TimerStartError,
    TimerStartFormatError,
    TokenValidityError,
)
from .formatter import format_number, format_token
from .locales import LocaleTable, available_locales, get_locale_table
from .matcher import DEFAULT_FAMILY_ORDER, parse_timer_start, try_parse_timer_start
from .providers import DEFAULT_REGISTRY, ParserRegistry
from .tokens import (
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
    TimerStartToken,
)

__all__ = [
    # Errors
    "RECOVERABLE_ERRORS",
    "TimerStartArgumentError",
    "TimerStartError",
    "TimerStartFormatError",
    "TokenValidityError",
    # Tokens
    "DateTimeToken",
    "DurationToken",
    "EmptyDateToken",
    "EmptyTimeToken",
    "HourPeriod",
    "NormalTimeToken",
    "RelativeDate",
    "RelativeDateToken",
    "SpecialDate",
    "SpecialDateToken",
    "SpecialTime",
    "SpecialTimeToken",
    "TimerStartToken",
    # Locales
    "LocaleTable",
    "available_locales",
    "get_locale_table",
    # Matching
    "DEFAULT_FAMILY_ORDER",
    "DEFAULT_REGISTRY",
    "ParserRegistry",
    "parse_timer_start",
    "try_parse_timer_start",
    # Formatting
    "format_number",
    "format_token",
]
