"""
Formatter for Timer Start Tokens

Renders tokens back to locale text that the matcher accepts again:
- DurationToken: "5 hours 3 minutes", "0 seconds"
- NormalTimeToken: "5 pm", "5:30", "12 midnight", or "17:00" in 24-hour mode
- Named dates and times: the locale display name ("noon", "Christmas Day")
- DateTimeToken: "{date} at {time}", or whichever part is not empty

format_token never raises: a recoverable error produces the token's class
name instead.
"""

import logging
from decimal import Decimal
from typing import Any

from src.parsing.errors import RECOVERABLE_ERRORS
from src.parsing.locales import LocaleTable, get_locale_table
from src.parsing.tokens import (
    DateTimeToken,
    DurationToken,
    EmptyDateToken,
    EmptyTimeToken,
    HourPeriod,
    NormalTimeToken,
    RelativeDateToken,
    SpecialDateToken,
    SpecialTimeToken,
    Token,
)

logger = logging.getLogger(__name__)


def format_number(value: float, table: LocaleTable) -> str:
    """
    Format a duration value for display.

    Whole numbers drop the trailing ".0". Fractions use the shortest exact
    representation without an exponent.
    """
    if float(value).is_integer():
        text = str(int(value))
    else:
        text = repr(float(value))
        if "e" in text.lower():
            text = format(Decimal(text), "f")
    return text.replace(".", table.decimal_separator)


def _format_unit(unit: str, value: float, table: LocaleTable) -> str:
    strings = table.duration_units[unit]
    template = strings.one if value == 1 else strings.many
    return template.format(value=format_number(value, table))


def _format_duration(token: DurationToken, table: LocaleTable, prefer_24_hour: bool) -> str:
    token.ensure_valid()

    if token.is_zero:
        return _format_unit("seconds", 0.0, table)

    clauses = [
        _format_unit(unit, getattr(token, unit), table)
        for unit in DurationToken.UNITS
        if getattr(token, unit) != 0
    ]
    return table.duration_unit_separator.join(clauses)


def _format_normal_time(token: NormalTimeToken, table: LocaleTable, prefer_24_hour: bool) -> str:
    token.ensure_valid()

    hour = token.hour
    if prefer_24_hour:
        if token.period == HourPeriod.AM and hour == 12:
            hour = 0
        elif token.period == HourPeriod.PM and hour < 12:
            hour += 12

    text = table.hour_format.format(hour=hour)
    if token.minute or token.second or token.period == HourPeriod.UNDEFINED or prefer_24_hour:
        text += table.minute_format.format(minute=token.minute)
    if token.second:
        text += table.second_format.format(second=token.second)

    if prefer_24_hour:
        return text

    if token.is_midnight:
        return text + table.midnight_suffix
    if token.is_midday:
        return text + table.midday_suffix
    if token.period == HourPeriod.AM:
        return text + table.am_suffix
    if token.period == HourPeriod.PM:
        return text + table.pm_suffix
    return text


def _format_special_time(token: SpecialTimeToken, table: LocaleTable, prefer_24_hour: bool) -> str:
    token.ensure_valid()
    return table.special_times[token.special_time.value].name


def _format_relative_date(token: RelativeDateToken, table: LocaleTable, prefer_24_hour: bool) -> str:
    token.ensure_valid()
    return table.relative_dates[token.relative_date.value].name


def _format_special_date(token: SpecialDateToken, table: LocaleTable, prefer_24_hour: bool) -> str:
    token.ensure_valid()
    return table.special_dates[token.special_date.value].name


def _format_empty(token: Token, table: LocaleTable, prefer_24_hour: bool) -> str:
    return ""


def _format_date_time(token: DateTimeToken, table: LocaleTable, prefer_24_hour: bool) -> str:
    token.ensure_valid()

    date_text = _format(token.date_token, table, prefer_24_hour)
    time_text = _format(token.time_token, table, prefer_24_hour)

    if date_text and time_text:
        return table.date_time_format.format(date=date_text, time=time_text)
    return date_text or time_text


FORMATTERS = {
    DurationToken: _format_duration,
    DateTimeToken: _format_date_time,
    EmptyDateToken: _format_empty,
    RelativeDateToken: _format_relative_date,
    SpecialDateToken: _format_special_date,
    EmptyTimeToken: _format_empty,
    NormalTimeToken: _format_normal_time,
    SpecialTimeToken: _format_special_time,
}


def _format(token: Any, table: LocaleTable, prefer_24_hour: bool) -> str:
    # Unknown token types raise KeyError, which callers treat as recoverable
    return FORMATTERS[type(token)](token, table, prefer_24_hour)


def format_token(token: Any, locale: str = "en-US", prefer_24_hour: bool = False) -> str:
    """
    Render a token as locale text.

    Args:
        token: Any token (timer start, date or time part)
        locale: Locale selecting the resource table
        prefer_24_hour: Print clock times as 24-hour numerals without a suffix

    Returns:
        The display string, or the token's class name if it cannot be rendered
    """
    try:
        table = get_locale_table(locale)
        return _format(token, table, prefer_24_hour)
    except RECOVERABLE_ERRORS as e:
        logger.debug(f"Cannot format {token!r}: {e}")
        return type(token).__name__
