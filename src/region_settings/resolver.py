"""Preference resolution.

Each preference follows the same fallback chain:

    explicit user preference (if the host supports one)
         |
         v
    region convention table (region of the active locale)
         |
         v
    fixed default (Celsius, Metric, Monday)

A preference the user set by hand always wins over what their region would
suggest. Region inference only fills the gap when no explicit preference
exists, which is the common case on hosts without a preferences API.

Example:
    >>> from region_settings import PreferenceResolver, StaticLocaleReader
    >>> resolver = PreferenceResolver(StaticLocaleReader("en_US"))
    >>> resolver.resolve_temperature_unit()
    <TemperatureUnit.FAHRENHEIT: 'F'>
    >>> resolver.resolve_week_start()
    <WeekStartDay.SUNDAY: 'SUN'>
"""

from __future__ import annotations

import logging

from babel import UnknownLocaleError

from region_settings.context import LocaleContextReader, LocaleTag, SystemLocaleReader
from region_settings.conventions import DEFAULT_TABLE, RegionConventionTable
from region_settings.formats import (
    DEFAULT_PATTERNS,
    BabelPatternSource,
    FormatPatternSource,
)
from region_settings.types import (
    FormatCategory,
    MeasurementSystem,
    PreferenceCategory,
    RegionPreferences,
    TemperatureUnit,
    WeekStartDay,
)

logger = logging.getLogger(__name__)


def _lookup_chain(tag: LocaleTag) -> list[str]:
    """Identifiers to try for pattern data, most specific first.

    A language/region pair without its own data (``ja_US``) falls back to
    the language, the way host formatters do.
    """
    chain = [tag.identifier]
    for parent in (LocaleTag(tag.language, tag.script), LocaleTag(tag.language)):
        if parent.identifier not in chain:
            chain.append(parent.identifier)
    return chain


class PreferenceResolver:
    """Resolve regional preferences for the current locale context.

    The resolver holds no state of its own; every call reads the context
    again, so results track the host's current settings.
    """

    def __init__(
        self,
        reader: LocaleContextReader | None = None,
        table: RegionConventionTable = DEFAULT_TABLE,
        patterns: FormatPatternSource | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            reader: Locale context reader (default: system environment).
            table: Region convention table.
            patterns: Formatting primitive for display patterns.
        """
        self._reader = reader or SystemLocaleReader()
        self._table = table
        self._patterns = patterns or BabelPatternSource()

    @property
    def reader(self) -> LocaleContextReader:
        return self._reader

    def resolve_temperature_unit(self) -> TemperatureUnit:
        category = PreferenceCategory.TEMPERATURE_UNIT
        explicit = self._reader.explicit_preference(category)
        if explicit is not None:
            logger.debug("Temperature unit from explicit preference: %s", explicit.value)
            return explicit

        region = self._reader.current_region_code(category)
        if self._table.is_non_metric(region):
            return TemperatureUnit.FAHRENHEIT
        return TemperatureUnit.CELSIUS

    def resolve_measurement_system(self) -> MeasurementSystem:
        category = PreferenceCategory.MEASUREMENT_SYSTEM
        explicit = self._reader.explicit_preference(category)
        if explicit is not None:
            logger.debug("Measurement system from explicit preference: %s", explicit.value)
            return explicit

        region = self._reader.current_region_code(category)
        return self._table.measurement_system_for(region)

    def resolve_week_start(self) -> WeekStartDay:
        category = PreferenceCategory.FIRST_DAY_OF_WEEK
        explicit = self._reader.explicit_preference(category)
        if explicit is not None:
            logger.debug("First day of week from explicit preference: %s", explicit.value)
            return explicit

        region = self._reader.current_region_code(category)
        return self._table.week_start_for(region)

    def resolve_format_patterns(
        self,
        category: FormatCategory,
        locale: str | LocaleTag | None = None,
    ) -> tuple[str, ...]:
        """Get the display patterns of a category.

        Args:
            category: Date, time or number.
            locale: Locale to read patterns for (default: the active locale
                for the category).

        Returns:
            Short, medium and long patterns for date and time; 0-decimal and
            2-decimal patterns for numbers, with digits rewritten to ``#``.
        """
        if isinstance(locale, str):
            try:
                locale = LocaleTag.parse(locale)
            except ValueError as e:
                logger.warning("Using default %s patterns: %s", category.value, e)
                return DEFAULT_PATTERNS[category]
        elif locale is None:
            locale = self._reader.current_locale(category)

        if locale is None:
            logger.debug("No active locale, using default %s patterns", category.value)
            return DEFAULT_PATTERNS[category]

        error: Exception | None = None
        for identifier in _lookup_chain(locale):
            try:
                return self._patterns.patterns(category, identifier)
            except UnknownLocaleError as e:
                logger.debug("No %s data for %s, trying parent locale", category.value, identifier)
                error = e
            except (ValueError, KeyError) as e:
                error = e
                break

        logger.warning(
            "No %s patterns for locale %s, using defaults: %s",
            category.value,
            locale,
            error,
        )
        return DEFAULT_PATTERNS[category]

    def resolve_all(self) -> RegionPreferences:
        """Resolve every preference into one snapshot."""
        return RegionPreferences(
            region_code=self._reader.current_region_code(),
            temperature_unit=self.resolve_temperature_unit(),
            measurement_system=self.resolve_measurement_system(),
            first_day_of_week=self.resolve_week_start(),
            date_formats=self.resolve_format_patterns(FormatCategory.DATE),
            time_formats=self.resolve_format_patterns(FormatCategory.TIME),
            number_formats=self.resolve_format_patterns(FormatCategory.NUMBER),
        )
