"""region_settings - Regional formatting preferences from the host locale.

Resolves temperature unit, measurement system, first day of the week and
date/time/number display patterns, honoring explicit user preferences
before falling back to region conventions.

Example:
    >>> from region_settings import QueryDispatcher
    >>> dispatcher = QueryDispatcher()
    >>> dispatcher.dispatch("getTemperatureUnits").value
    'C'
"""

from region_settings.bridge import CHANNEL_NAME, MethodCall, MethodCallHandler, MethodResult
from region_settings.context import (
    LocaleContextReader,
    LocaleTag,
    OverrideLocaleReader,
    StaticLocaleReader,
    SystemLocaleReader,
)
from region_settings.conventions import DEFAULT_TABLE, RegionConventionTable
from region_settings.dispatcher import QueryDispatcher, QueryName, QueryResult
from region_settings.errors import (
    InvalidPreferenceError,
    RegionSettingsError,
    UnsupportedQueryError,
)
from region_settings.formats import BabelPatternSource, FormatPatternSource
from region_settings.resolver import PreferenceResolver
from region_settings.types import (
    FormatCategory,
    MeasurementSystem,
    PreferenceCategory,
    RegionPreferences,
    TemperatureUnit,
    WeekStartDay,
    normalize_region_code,
)

__version__ = "1.0.0"

__all__ = [
    # Values
    "TemperatureUnit",
    "MeasurementSystem",
    "WeekStartDay",
    "PreferenceCategory",
    "FormatCategory",
    "RegionPreferences",
    "normalize_region_code",
    # Context
    "LocaleTag",
    "LocaleContextReader",
    "SystemLocaleReader",
    "StaticLocaleReader",
    "OverrideLocaleReader",
    # Conventions
    "RegionConventionTable",
    "DEFAULT_TABLE",
    # Resolution
    "PreferenceResolver",
    "FormatPatternSource",
    "BabelPatternSource",
    # Dispatch
    "QueryDispatcher",
    "QueryName",
    "QueryResult",
    "CHANNEL_NAME",
    "MethodCall",
    "MethodCallHandler",
    "MethodResult",
    # Errors
    "RegionSettingsError",
    "UnsupportedQueryError",
    "InvalidPreferenceError",
]
