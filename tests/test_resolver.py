"""Tests for preference resolution and its fallback chain."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from babel import UnknownLocaleError

from region_settings.context import StaticLocaleReader, SystemLocaleReader
from region_settings.conventions import (
    FRIDAY_START_REGIONS,
    NON_METRIC_REGIONS,
    SATURDAY_START_REGIONS,
    SUNDAY_START_REGIONS,
)
from region_settings.formats import DEFAULT_PATTERNS, BabelPatternSource, FormatPatternSource
from region_settings.resolver import PreferenceResolver
from region_settings.types import (
    FormatCategory,
    MeasurementSystem,
    PreferenceCategory,
    TemperatureUnit,
    WeekStartDay,
)


ALL_LISTED = NON_METRIC_REGIONS | FRIDAY_START_REGIONS | SATURDAY_START_REGIONS | SUNDAY_START_REGIONS
UNLISTED = ["FR", "DE", "GB", "NZ", "RU", "ES", "SE", "NG", "AR", "ZZ"]


def make_resolver(locale_id, patterns=None, **kwargs) -> PreferenceResolver:
    return PreferenceResolver(StaticLocaleReader(locale_id, **kwargs), patterns=patterns)


# =============================================================================
# Region Inference (no explicit preferences)
# =============================================================================


class TestRegionInference:
    @pytest.mark.parametrize("code", sorted(NON_METRIC_REGIONS))
    def test_non_metric_regions(self, code):
        resolver = make_resolver(f"en_{code}")
        assert resolver.resolve_measurement_system() is MeasurementSystem.US
        assert resolver.resolve_temperature_unit() is TemperatureUnit.FAHRENHEIT

    @pytest.mark.parametrize("code", UNLISTED + sorted(SATURDAY_START_REGIONS))
    def test_metric_regions(self, code):
        resolver = make_resolver(f"en_{code}")
        assert resolver.resolve_measurement_system() is MeasurementSystem.METRIC
        assert resolver.resolve_temperature_unit() is TemperatureUnit.CELSIUS

    @pytest.mark.parametrize("code", sorted(ALL_LISTED) + UNLISTED)
    def test_fahrenheit_iff_us_system(self, code):
        resolver = make_resolver(f"en_{code}")
        is_us = resolver.resolve_measurement_system() is MeasurementSystem.US
        assert (resolver.resolve_temperature_unit() is TemperatureUnit.FAHRENHEIT) == is_us

    @pytest.mark.parametrize("code", sorted(SATURDAY_START_REGIONS))
    def test_saturday_regions(self, code):
        assert make_resolver(f"ar_{code}").resolve_week_start() is WeekStartDay.SATURDAY

    def test_maldives_starts_friday(self):
        assert make_resolver("dv_MV").resolve_week_start() is WeekStartDay.FRIDAY

    @pytest.mark.parametrize("code", sorted(SUNDAY_START_REGIONS))
    def test_sunday_regions(self, code):
        assert make_resolver(f"en_{code}").resolve_week_start() is WeekStartDay.SUNDAY

    @pytest.mark.parametrize("code", UNLISTED)
    def test_monday_elsewhere(self, code):
        assert make_resolver(f"en_{code}").resolve_week_start() is WeekStartDay.MONDAY

    @pytest.mark.parametrize("locale_id", [None, "C", "fr", "es-419"])
    def test_no_region_uses_defaults(self, locale_id):
        resolver = make_resolver(locale_id)
        assert resolver.resolve_temperature_unit() is TemperatureUnit.CELSIUS
        assert resolver.resolve_measurement_system() is MeasurementSystem.METRIC
        assert resolver.resolve_week_start() is WeekStartDay.MONDAY

    def test_region_is_case_insensitive(self):
        resolver = make_resolver("en_us")
        assert resolver.resolve_week_start() is WeekStartDay.SUNDAY
        assert resolver.resolve_temperature_unit() is TemperatureUnit.FAHRENHEIT


class TestScenarios:
    def test_united_states(self):
        resolver = make_resolver("en_US")
        assert resolver.resolve_temperature_unit().value == "F"
        assert resolver.resolve_measurement_system().uses_metric is False
        assert resolver.resolve_week_start().value == "SUN"

    def test_france(self):
        resolver = make_resolver("fr_FR")
        assert resolver.resolve_temperature_unit().value == "C"
        assert resolver.resolve_measurement_system().uses_metric is True
        assert resolver.resolve_week_start().value == "MON"

    def test_united_arab_emirates(self):
        assert make_resolver("ar_AE").resolve_week_start().value == "SAT"


# =============================================================================
# Explicit Preferences
# =============================================================================


class TestExplicitPreferences:
    @pytest.mark.parametrize("code", ["US", "FR", "AE", "MV", "JP"])
    def test_override_always_wins(self, code):
        resolver = make_resolver(
            f"en_{code}",
            preferences={
                PreferenceCategory.TEMPERATURE_UNIT: TemperatureUnit.FAHRENHEIT,
                PreferenceCategory.MEASUREMENT_SYSTEM: MeasurementSystem.METRIC,
                PreferenceCategory.FIRST_DAY_OF_WEEK: WeekStartDay.FRIDAY,
            },
        )
        assert resolver.resolve_temperature_unit() is TemperatureUnit.FAHRENHEIT
        assert resolver.resolve_measurement_system() is MeasurementSystem.METRIC
        assert resolver.resolve_week_start() is WeekStartDay.FRIDAY

    def test_temperature_override_independent_of_measurement(self):
        resolver = make_resolver("en_US", preferences={PreferenceCategory.TEMPERATURE_UNIT: "C"})
        assert resolver.resolve_temperature_unit() is TemperatureUnit.CELSIUS
        assert resolver.resolve_measurement_system() is MeasurementSystem.US

    def test_uk_system_collapses_to_metric(self):
        resolver = make_resolver("en-US-u-ms-uksystem")
        assert resolver.resolve_measurement_system() is MeasurementSystem.METRIC
        # Temperature still follows the region when only ms is set
        assert resolver.resolve_temperature_unit() is TemperatureUnit.FAHRENHEIT

    def test_locale_keywords(self):
        resolver = make_resolver("en-US-u-fw-mon-mu-celsius")
        assert resolver.resolve_week_start() is WeekStartDay.MONDAY
        assert resolver.resolve_temperature_unit() is TemperatureUnit.CELSIUS
        assert resolver.resolve_measurement_system() is MeasurementSystem.US

    def test_unsupported_keyword_falls_back_to_region(self):
        resolver = make_resolver("en-US-u-mu-kelvin-fw-wed")
        assert resolver.resolve_temperature_unit() is TemperatureUnit.FAHRENHEIT
        assert resolver.resolve_week_start() is WeekStartDay.SUNDAY

    def test_unknown_measurement_keyword_falls_back_to_region(self):
        resolver = make_resolver("en-US-u-ms-banana")
        assert resolver.resolve_measurement_system() is MeasurementSystem.US

    def test_regional_override_keyword(self):
        resolver = make_resolver("en-US-u-rg-gbzzzz")
        assert resolver.resolve_temperature_unit() is TemperatureUnit.CELSIUS
        assert resolver.resolve_week_start() is WeekStartDay.MONDAY

    def test_host_without_preferences_api(self):
        resolver = make_resolver(
            "en-US-u-fw-mon",
            preferences={PreferenceCategory.TEMPERATURE_UNIT: "C"},
            capabilities=[],
        )
        assert resolver.resolve_temperature_unit() is TemperatureUnit.FAHRENHEIT
        assert resolver.resolve_week_start() is WeekStartDay.SUNDAY

    def test_system_reader_category_locales(self):
        reader = SystemLocaleReader(
            {"LANG": "en_US.UTF-8", "LC_MEASUREMENT": "de_DE.UTF-8", "LC_TIME": "ar_SA.UTF-8"}
        )
        resolver = PreferenceResolver(reader)
        assert resolver.resolve_temperature_unit() is TemperatureUnit.CELSIUS
        assert resolver.resolve_measurement_system() is MeasurementSystem.METRIC
        assert resolver.resolve_week_start() is WeekStartDay.SUNDAY


# =============================================================================
# Format Patterns
# =============================================================================


class TestFormatPatterns:
    def test_date_tiers_in_order(self, fake_patterns):
        resolver = make_resolver("en_US", patterns=fake_patterns)
        assert resolver.resolve_format_patterns(FormatCategory.DATE) == (
            "date:en_US:short",
            "date:en_US:medium",
            "date:en_US:long",
        )

    def test_time_tiers_in_order(self, fake_patterns):
        resolver = make_resolver("en_GB", patterns=fake_patterns)
        assert resolver.resolve_format_patterns(FormatCategory.TIME) == (
            "time:en_GB:short",
            "time:en_GB:medium",
            "time:en_GB:long",
        )

    def test_number_digits_normalized(self, fake_patterns):
        resolver = make_resolver("en_US", patterns=fake_patterns)
        assert resolver.resolve_format_patterns(FormatCategory.NUMBER) == (
            "#,###,###",
            "#,###,###.##",
        )
        assert [call[2] for call in fake_patterns.calls] == [0, 2]

    def test_explicit_locale(self, fake_patterns):
        resolver = make_resolver("en_US", patterns=fake_patterns)
        patterns = resolver.resolve_format_patterns(FormatCategory.DATE, "zh-Hant-TW")
        assert patterns[0] == "date:zh_Hant_TW:short"

    def test_keywords_not_passed_to_source(self, fake_patterns):
        resolver = make_resolver("de-DE-u-fw-sun", patterns=fake_patterns)
        assert resolver.resolve_format_patterns(FormatCategory.DATE)[0] == "date:de_DE:short"

    def test_category_locale(self, fake_patterns):
        reader = SystemLocaleReader({"LANG": "en_US", "LC_TIME": "fr_FR", "LC_NUMERIC": "de_DE"})
        resolver = PreferenceResolver(reader, patterns=fake_patterns)
        assert resolver.resolve_format_patterns(FormatCategory.DATE)[0] == "date:fr_FR:short"
        resolver.resolve_format_patterns(FormatCategory.NUMBER)
        assert fake_patterns.calls[-1] == ("number", "de_DE", 2)

    @pytest.mark.parametrize("category", list(FormatCategory))
    def test_no_locale_uses_defaults(self, fake_patterns, category):
        resolver = make_resolver(None, patterns=fake_patterns)
        assert resolver.resolve_format_patterns(category) == DEFAULT_PATTERNS[category]
        assert fake_patterns.calls == []

    def test_unknown_locale_uses_defaults(self, caplog):
        resolver = make_resolver("xx_XX")
        with caplog.at_level(logging.WARNING, logger="region_settings.resolver"):
            patterns = resolver.resolve_format_patterns(FormatCategory.DATE)
        assert patterns == DEFAULT_PATTERNS[FormatCategory.DATE]
        assert "using defaults" in caplog.text

    @pytest.mark.parametrize(
        "locale_id, language",
        [("ja_US", "ja"), ("fr_US", "fr")],
    )
    @pytest.mark.parametrize("category", list(FormatCategory))
    def test_unlisted_region_falls_back_to_language(self, locale_id, language, category):
        resolver = make_resolver(locale_id)
        patterns = resolver.resolve_format_patterns(category)

        assert patterns == BabelPatternSource().patterns(category, language)
        if category is not FormatCategory.NUMBER:
            assert patterns != DEFAULT_PATTERNS[category]

    def test_parent_lookup_order(self):
        source = MagicMock(spec=FormatPatternSource)
        source.patterns.side_effect = [
            UnknownLocaleError("zh_Hant_US"),
            UnknownLocaleError("zh_Hant"),
            ("a", "b", "c"),
        ]
        resolver = make_resolver("zh-Hant-US", patterns=source)

        assert resolver.resolve_format_patterns(FormatCategory.DATE) == ("a", "b", "c")
        assert [c.args[1] for c in source.patterns.call_args_list] == ["zh_Hant_US", "zh_Hant", "zh"]

    def test_unknown_language_has_no_parent(self, caplog):
        resolver = make_resolver("xx_US")
        with caplog.at_level(logging.WARNING, logger="region_settings.resolver"):
            patterns = resolver.resolve_format_patterns(FormatCategory.DATE)
        assert patterns == DEFAULT_PATTERNS[FormatCategory.DATE]
        assert "using defaults" in caplog.text

    def test_malformed_locale_uses_defaults(self):
        resolver = make_resolver("en_US")
        assert (
            resolver.resolve_format_patterns(FormatCategory.TIME, "???")
            == DEFAULT_PATTERNS[FormatCategory.TIME]
        )

    def test_babel_number_patterns(self):
        resolver = make_resolver("de_DE")
        assert resolver.resolve_format_patterns(FormatCategory.NUMBER) == (
            "#.###.###",
            "#.###.###,##",
        )


class TestResolveAll:
    def test_snapshot(self, fake_patterns):
        resolver = make_resolver("en_US", patterns=fake_patterns)
        prefs = resolver.resolve_all()

        assert prefs.region_code == "US"
        assert prefs.temperature_unit is TemperatureUnit.FAHRENHEIT
        assert prefs.measurement_system is MeasurementSystem.US
        assert prefs.first_day_of_week is WeekStartDay.SUNDAY
        assert len(prefs.date_formats) == 3
        assert len(prefs.time_formats) == 3
        assert prefs.number_formats == ("#,###,###", "#,###,###.##")

    def test_idempotent(self, fake_patterns):
        resolver = make_resolver("ja_JP", patterns=fake_patterns)
        assert resolver.resolve_all() == resolver.resolve_all()

    def test_default_reader_is_system(self):
        assert isinstance(PreferenceResolver().reader, SystemLocaleReader)
