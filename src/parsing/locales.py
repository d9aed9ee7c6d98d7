"""
Locale Pattern Tables for Timer Start

Regex fragments and display strings for each supported locale. The engine
never embeds locale text in its control flow; parsers and the formatter read
everything from a LocaleTable.

Supported locales:
- en: English (default and fallback)
- de: German

Pattern conventions:
- Fragments use named groups; the matcher compiles them with the `regex`
  package so groups may repeat (duration units) or be duplicated across
  alternatives (hour/am/pm).
- Matching is case-insensitive and anchored to the whole input.
- Date/time templates contain {date} and {time} placeholders.
"""

import logging
from functools import lru_cache
from typing import Any

import regex
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.parsing.errors import TimerStartArgumentError
from src.parsing.tokens import DurationToken, RelativeDate, SpecialDate, SpecialTime

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


class UnitStrings(BaseModel):
    """Singular and plural format strings for one duration unit."""

    model_config = ConfigDict(frozen=True)

    one: str = Field(..., description="Format string used when the value is exactly 1")
    many: str = Field(..., description="Format string used for every other value")


class NamedPattern(BaseModel):
    """Display name and match pattern for a named date or time."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name")
    pattern: str = Field(..., description="Regex fragment without a named group")


class LocaleTable(BaseModel):
    """All locale-specific patterns and resources used by the engine."""

    model_config = ConfigDict(frozen=True)

    locale: str
    decimal_separator: str = "."

    # Duration grammar, tried in this order
    duration_minutes_only_pattern: str
    duration_short_form_pattern: str
    duration_long_form_pattern: str
    duration_units: dict[str, UnitStrings]
    duration_unit_separator: str = " "

    # Normal time grammar, tried in this order
    military_time_pattern: str
    time_with_separators_pattern: str
    time_without_separators_pattern: str
    hour_format: str = "{hour}"
    minute_format: str = ":{minute:02d}"
    second_format: str = ":{second:02d}"
    am_suffix: str
    pm_suffix: str
    midday_suffix: str
    midnight_suffix: str

    special_times: dict[str, NamedPattern]
    relative_dates: dict[str, NamedPattern]
    special_dates: dict[str, NamedPattern]

    # Ways to join a date fragment and a time fragment, in precedence order
    date_time_templates: list[str] = Field(..., min_length=1)
    date_time_format: str = "{date} {time}"

    @field_validator("duration_units")
    @classmethod
    def validate_units(cls, v: dict[str, UnitStrings]) -> dict[str, UnitStrings]:
        missing = set(DurationToken.UNITS) - set(v)
        if missing:
            raise ValueError(f"Missing duration units: {sorted(missing)}")
        return v

    @field_validator("special_times")
    @classmethod
    def validate_special_times(cls, v: dict[str, NamedPattern]) -> dict[str, NamedPattern]:
        return _require_keys(v, [e.value for e in SpecialTime], "special_times")

    @field_validator("relative_dates")
    @classmethod
    def validate_relative_dates(cls, v: dict[str, NamedPattern]) -> dict[str, NamedPattern]:
        return _require_keys(v, [e.value for e in RelativeDate], "relative_dates")

    @field_validator("special_dates")
    @classmethod
    def validate_special_dates(cls, v: dict[str, NamedPattern]) -> dict[str, NamedPattern]:
        return _require_keys(v, [e.value for e in SpecialDate], "special_dates")

    @model_validator(mode="after")
    def validate_patterns_compile(self) -> "LocaleTable":
        patterns = [
            self.duration_minutes_only_pattern,
            self.duration_short_form_pattern,
            self.duration_long_form_pattern,
            self.military_time_pattern,
            self.time_with_separators_pattern,
            self.time_without_separators_pattern,
        ]
        for named in (self.special_times, self.relative_dates, self.special_dates):
            patterns.extend(entry.pattern for entry in named.values())
        patterns.extend(t.format(date="(?:d)", time="(?:t)") for t in self.date_time_templates)

        for pattern in patterns:
            try:
                regex.compile(pattern)
            except regex.error as e:
                raise ValueError(f"Invalid pattern for locale {self.locale}: {pattern!r} ({e})") from e
        return self


def _require_keys(value: dict[str, Any], keys: list[str], field_name: str) -> dict[str, Any]:
    missing = [key for key in keys if key not in value]
    if missing:
        raise ValueError(f"Missing {field_name} entries: {missing}")
    return value


# =============================================================================
# English
# =============================================================================

_EN_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)"

_EN_AM_PM = r"(?:\s*(?:(?P<am>a\.?\s*m\.?)|(?P<pm>p\.?\s*m\.?)))?"

_EN_SHORT_UNIT = (
    rf"(?:(?P<years>{_EN_NUMBER})\s*y"
    rf"|(?P<months>{_EN_NUMBER})\s*mo"
    rf"|(?P<weeks>{_EN_NUMBER})\s*w"
    rf"|(?P<days>{_EN_NUMBER})\s*d"
    rf"|(?P<hours>{_EN_NUMBER})\s*h"
    rf"|(?P<minutes>{_EN_NUMBER})\s*m"
    rf"|(?P<seconds>{_EN_NUMBER})\s*s)"
)

_EN_LONG_UNIT = (
    rf"(?:(?P<years>{_EN_NUMBER})\s*(?:years?|yrs?)"
    rf"|(?P<months>{_EN_NUMBER})\s*(?:months?|mos?)"
    rf"|(?P<weeks>{_EN_NUMBER})\s*(?:weeks?|wks?)"
    rf"|(?P<days>{_EN_NUMBER})\s*days?"
    rf"|(?P<hours>{_EN_NUMBER})\s*(?:hours?|hrs?)"
    rf"|(?P<minutes>{_EN_NUMBER})\s*(?:minutes?|mins?)"
    rf"|(?P<seconds>{_EN_NUMBER})\s*(?:seconds?|secs?))"
)

EN_TABLE: dict[str, Any] = {
    "locale": "en",
    "decimal_separator": ".",
    "duration_minutes_only_pattern": rf"(?P<minutes>{_EN_NUMBER})",
    "duration_short_form_pattern": rf"(?:{_EN_SHORT_UNIT}\s*,?\s*)+",
    "duration_long_form_pattern": rf"(?:{_EN_LONG_UNIT}(?:\s*,\s*|\s+and\s+|\s*))+",
    "duration_units": {
        "years": {"one": "{value} year", "many": "{value} years"},
        "months": {"one": "{value} month", "many": "{value} months"},
        "weeks": {"one": "{value} week", "many": "{value} weeks"},
        "days": {"one": "{value} day", "many": "{value} days"},
        "hours": {"one": "{value} hour", "many": "{value} hours"},
        "minutes": {"one": "{value} minute", "many": "{value} minutes"},
        "seconds": {"one": "{value} second", "many": "{value} seconds"},
    },
    "duration_unit_separator": " ",
    "military_time_pattern": (
        r"(?P<military>(?P<hour>[01]?\d|2[0-3])(?P<minute>[0-5]\d)(?P<second>[0-5]\d)?)"
        r"(?:\s*(?:hours|hrs|h))?"
    ),
    "time_with_separators_pattern": (
        r"(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?" + _EN_AM_PM
    ),
    "time_without_separators_pattern": (
        r"(?:(?P<hour>12)\s*(?:(?P<pm>noon|midday)|(?P<am>midnight))"
        r"|(?P<hour>\d{1,2})(?:\s*o['’]?\s*clock)?" + _EN_AM_PM + ")"
    ),
    "hour_format": "{hour}",
    "minute_format": ":{minute:02d}",
    "second_format": ":{second:02d}",
    "am_suffix": " am",
    "pm_suffix": " pm",
    "midday_suffix": " noon",
    "midnight_suffix": " midnight",
    "special_times": {
        "midday": {"name": "noon", "pattern": r"noon|mid-?day"},
        "midnight": {"name": "midnight", "pattern": r"midnight"},
    },
    "relative_dates": {
        "today": {"name": "today", "pattern": r"today|tonight"},
        "tomorrow": {"name": "tomorrow", "pattern": r"tomorrow|tmrw|tmr"},
    },
    "special_dates": {
        "new_year": {"name": "New Year's Day", "pattern": r"new\s*year(?:['’]?s)?(?:\s*day)?"},
        "christmas_day": {"name": "Christmas Day", "pattern": r"christmas(?:\s*day)?|x-?mas"},
        "new_years_eve": {"name": "New Year's Eve", "pattern": r"new\s*year(?:['’]?s)?\s*eve"},
    },
    "date_time_templates": [
        r"{date}(?:\s*,\s*|\s+at\s+|\s*@\s*|\s*){time}",
        r"{time}(?:\s*,\s*|\s+on\s+|\s*){date}",
    ],
    "date_time_format": "{date} at {time}",
}


# =============================================================================
# German
# =============================================================================

_DE_NUMBER = r"(?:\d+(?:,\d*)?|,\d+)"

_DE_UHR = r"(?:\s*uhr)?"

_DE_AM_PM = r"(?:\s*(?:(?P<am>vorm\.?|morgens)|(?P<pm>nachm\.?|abends)))?"

_DE_SHORT_UNIT = (
    rf"(?:(?P<years>{_DE_NUMBER})\s*j"
    rf"|(?P<months>{_DE_NUMBER})\s*mo"
    rf"|(?P<weeks>{_DE_NUMBER})\s*w"
    rf"|(?P<days>{_DE_NUMBER})\s*[td]"
    rf"|(?P<hours>{_DE_NUMBER})\s*(?:std|h)"
    rf"|(?P<minutes>{_DE_NUMBER})\s*(?:min|m)"
    rf"|(?P<seconds>{_DE_NUMBER})\s*(?:sek|s))"
)

_DE_LONG_UNIT = (
    rf"(?:(?P<years>{_DE_NUMBER})\s*jahr(?:en|e)?"
    rf"|(?P<months>{_DE_NUMBER})\s*monat(?:en|e)?"
    rf"|(?P<weeks>{_DE_NUMBER})\s*wochen?"
    rf"|(?P<days>{_DE_NUMBER})\s*tag(?:en|e)?"
    rf"|(?P<hours>{_DE_NUMBER})\s*stunden?"
    rf"|(?P<minutes>{_DE_NUMBER})\s*minuten?"
    rf"|(?P<seconds>{_DE_NUMBER})\s*sekunden?)"
)

DE_TABLE: dict[str, Any] = {
    "locale": "de",
    "decimal_separator": ",",
    "duration_minutes_only_pattern": rf"(?P<minutes>{_DE_NUMBER})",
    "duration_short_form_pattern": rf"(?:{_DE_SHORT_UNIT}\s*(?:und\s*)?)+",
    "duration_long_form_pattern": rf"(?:{_DE_LONG_UNIT}(?:\s*,\s*|\s+und\s+|\s*))+",
    "duration_units": {
        "years": {"one": "{value} Jahr", "many": "{value} Jahre"},
        "months": {"one": "{value} Monat", "many": "{value} Monate"},
        "weeks": {"one": "{value} Woche", "many": "{value} Wochen"},
        "days": {"one": "{value} Tag", "many": "{value} Tage"},
        "hours": {"one": "{value} Stunde", "many": "{value} Stunden"},
        "minutes": {"one": "{value} Minute", "many": "{value} Minuten"},
        "seconds": {"one": "{value} Sekunde", "many": "{value} Sekunden"},
    },
    "duration_unit_separator": ", ",
    "military_time_pattern": (
        r"(?P<military>(?P<hour>[01]?\d|2[0-3])(?P<minute>[0-5]\d)(?P<second>[0-5]\d)?)" + _DE_UHR
    ),
    "time_with_separators_pattern": (
        r"(?P<hour>\d{1,2})[:.](?P<minute>\d{2})(?:[:.](?P<second>\d{2}))?" + _DE_UHR + _DE_AM_PM
    ),
    "time_without_separators_pattern": (
        r"(?:(?P<hour>12)\s*(?:(?P<pm>mittags)|(?P<am>nachts))"
        r"|(?P<hour>\d{1,2})" + _DE_UHR + _DE_AM_PM + ")"
    ),
    "hour_format": "{hour}",
    "minute_format": ":{minute:02d}",
    "second_format": ":{second:02d}",
    "am_suffix": " vorm.",
    "pm_suffix": " nachm.",
    "midday_suffix": " mittags",
    "midnight_suffix": " nachts",
    "special_times": {
        "midday": {"name": "Mittag", "pattern": r"mittags?"},
        "midnight": {"name": "Mitternacht", "pattern": r"mitternacht"},
    },
    "relative_dates": {
        "today": {"name": "heute", "pattern": r"heute"},
        "tomorrow": {"name": "morgen", "pattern": r"morgen"},
    },
    "special_dates": {
        "new_year": {"name": "Neujahr", "pattern": r"neujahr(?:stag)?"},
        "christmas_day": {"name": "Weihnachten", "pattern": r"weihnachten|(?:erster\s+)?weihnachtstag"},
        "new_years_eve": {"name": "Silvester", "pattern": r"silvester"},
    },
    "date_time_templates": [
        r"{date}(?:\s*,\s*|\s+um\s+|\s*){time}",
        r"{time}(?:\s*,\s*|\s+am\s+|\s*){date}",
    ],
    "date_time_format": "{date} um {time}",
}


LOCALE_DATA: dict[str, dict[str, Any]] = {
    "en": EN_TABLE,
    "de": DE_TABLE,
}


def available_locales() -> list[str]:
    """List the locale keys that have a pattern table."""
    return sorted(LOCALE_DATA)


def _candidate_keys(locale: str) -> list[str]:
    """Lookup order for a locale string: full tag, language, default."""
    normalized = locale.split(".")[0].replace("_", "-").lower()
    language = normalized.split("-")[0]
    return [normalized, language, DEFAULT_LOCALE]


def is_supported_locale(locale: str) -> bool:
    """Whether the locale (or its language) has its own table, without falling back to English."""
    if not locale:
        return False
    return any(key in LOCALE_DATA for key in _candidate_keys(locale)[:2])


@lru_cache(maxsize=None)
def _load_table(key: str) -> LocaleTable:
    return LocaleTable.model_validate(LOCALE_DATA[key])


def get_locale_table(locale: str) -> LocaleTable:
    """
    Get the pattern table for a locale.

    Falls back from the full tag ("de-AT") to the language ("de") and then to
    English, mirroring resource fallback.

    Args:
        locale: Locale string such as "en-US", "de_DE" or "de"

    Returns:
        Validated LocaleTable

    Raises:
        TimerStartArgumentError: If locale is empty or None
    """
    if not locale:
        raise TimerStartArgumentError("locale is required")

    keys = _candidate_keys(locale)
    for key in keys:
        if key in LOCALE_DATA:
            if key != keys[0] and key != keys[1]:
                logger.debug(f"No pattern table for locale {locale!r}, falling back to {key!r}")
            return _load_table(key)

    # DEFAULT_LOCALE is always present
    return _load_table(DEFAULT_LOCALE)
