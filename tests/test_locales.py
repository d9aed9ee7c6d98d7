"""
Tests for locale pattern tables.
"""

import pytest
from pydantic import ValidationError

from src.parsing.errors import TimerStartArgumentError
from src.parsing.locales import (
    EN_TABLE,
    LocaleTable,
    available_locales,
    get_locale_table,
    is_supported_locale,
)


class TestLocaleLookup:
    """Tests for locale resolution and fallback."""

    def test_available_locales(self):
        assert available_locales() == ["de", "en"]

    @pytest.mark.parametrize(
        "locale,expected",
        [
            ("en", "en"),
            ("en-US", "en"),
            ("de", "de"),
            ("de_DE", "de"),
            ("de-AT", "de"),
            ("de_DE.UTF-8", "de"),
            ("fr-FR", "en"),
        ],
    )
    def test_fallback(self, locale: str, expected: str):
        assert get_locale_table(locale).locale == expected

    def test_missing_locale_raises(self):
        with pytest.raises(TimerStartArgumentError):
            get_locale_table("")

    def test_tables_are_cached(self):
        assert get_locale_table("en-US") is get_locale_table("en-GB")

    def test_is_supported_locale(self):
        assert is_supported_locale("de-CH")
        assert is_supported_locale("en")
        assert not is_supported_locale("fr")
        assert not is_supported_locale("")


class TestLocaleTableValidation:
    """Tests for the LocaleTable model."""

    def test_builtin_tables_are_valid(self):
        for locale in available_locales():
            table = get_locale_table(locale)
            assert table.date_time_templates

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ValidationError):
            LocaleTable.model_validate({**EN_TABLE, "military_time_pattern": "(unclosed"})

    def test_missing_unit_rejected(self):
        units = {k: v for k, v in EN_TABLE["duration_units"].items() if k != "weeks"}

        with pytest.raises(ValidationError):
            LocaleTable.model_validate({**EN_TABLE, "duration_units": units})

    def test_missing_named_pattern_rejected(self):
        with pytest.raises(ValidationError):
            LocaleTable.model_validate({**EN_TABLE, "special_times": {}})

    def test_empty_templates_rejected(self):
        with pytest.raises(ValidationError):
            LocaleTable.model_validate({**EN_TABLE, "date_time_templates": []})

    def test_table_is_frozen(self):
        table = get_locale_table("en")

        with pytest.raises(ValidationError):
            table.decimal_separator = ","
