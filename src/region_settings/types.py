"""Core value types for regional preferences.

Every preference value is a ``str`` enum whose value is the exact code sent
over the query interface ("C", "SUN", ...), so results can be returned to
callers without a separate serialization step.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


_REGION_RE = re.compile(r"^[A-Za-z]{2}$")


def normalize_region_code(value: str | None) -> str | None:
    """Normalize a region code to its uppercase ISO 3166-1 alpha-2 form.

    Args:
        value: Raw region code in any case.

    Returns:
        Uppercase two-letter code, or None for empty/malformed input.
    """
    if not value:
        return None
    value = value.strip()
    if not _REGION_RE.match(value):
        return None
    return value.upper()


# =============================================================================
# Preference Values
# =============================================================================


class TemperatureUnit(str, Enum):
    """Temperature unit shown to the user."""

    CELSIUS = "C"
    FAHRENHEIT = "F"

    @classmethod
    def from_string(cls, value: str) -> "TemperatureUnit":
        """Convert a user or platform string to a TemperatureUnit.

        Accepts the wire codes ("C", "F"), full names and the Unicode
        ``mu`` keyword values ("celsius", "fahrenhe").

        Raises:
            ValueError: If the value names no supported unit.
        """
        mapping = {
            "c": cls.CELSIUS,
            "celsius": cls.CELSIUS,
            "f": cls.FAHRENHEIT,
            "fahrenhe": cls.FAHRENHEIT,
            "fahrenheit": cls.FAHRENHEIT,
        }
        try:
            return mapping[value.strip().lower()]
        except KeyError:
            raise ValueError(f"Unsupported temperature unit: {value!r}") from None


class MeasurementSystem(str, Enum):
    """Measurement system, collapsed to metric vs. US customary."""

    METRIC = "metric"
    US = "us"

    @property
    def uses_metric(self) -> bool:
        return self is MeasurementSystem.METRIC

    @classmethod
    def from_platform(cls, value: str) -> "MeasurementSystem":
        """Map a platform measurement-system name onto the two-valued enum.

        Only the US system is non-metric. The UK system ("uksystem", "UK")
        is reported as metric.

        Raises:
            ValueError: If the value is not a known measurement system.
        """
        mapping = {
            "metric": cls.METRIC,
            "metric-system": cls.METRIC,
            "uk": cls.METRIC,
            "uksystem": cls.METRIC,
            "us": cls.US,
            "ussystem": cls.US,
            "imperial": cls.US,
            "imperial-us": cls.US,
        }
        try:
            return mapping[value.strip().lower()]
        except KeyError:
            raise ValueError(f"Unsupported measurement system: {value!r}") from None


class WeekStartDay(str, Enum):
    """First day of the calendar week."""

    MONDAY = "MON"
    FRIDAY = "FRI"
    SATURDAY = "SAT"
    SUNDAY = "SUN"

    @classmethod
    def from_string(cls, value: str) -> "WeekStartDay":
        """Convert a day code or name to a WeekStartDay.

        Accepts the wire codes in any case ("sun", "SUN") and full English
        day names.

        Raises:
            ValueError: If the value names a day outside the supported set.
        """
        key = value.strip().upper()
        if key in _DAY_NAMES:
            key = key[:3]
        for day in cls:
            if day.value == key:
                return day
        raise ValueError(f"Unsupported first day of week: {value!r}")


_DAY_NAMES = frozenset(
    {"MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"}
)


# =============================================================================
# Categories
# =============================================================================


class PreferenceCategory(str, Enum):
    """Categories a host may expose an explicit user preference for."""

    TEMPERATURE_UNIT = "temperature_unit"
    MEASUREMENT_SYSTEM = "measurement_system"
    FIRST_DAY_OF_WEEK = "first_day_of_week"

    def parse(self, value: str) -> "PreferenceValue":
        """Parse a raw string into this category's value type."""
        if self is PreferenceCategory.TEMPERATURE_UNIT:
            return TemperatureUnit.from_string(value)
        if self is PreferenceCategory.MEASUREMENT_SYSTEM:
            return MeasurementSystem.from_platform(value)
        return WeekStartDay.from_string(value)


class FormatCategory(str, Enum):
    """Pattern categories resolved from the formatting primitives."""

    DATE = "date"
    TIME = "time"
    NUMBER = "number"


PreferenceValue = TemperatureUnit | MeasurementSystem | WeekStartDay


# =============================================================================
# Resolution Snapshot
# =============================================================================


@dataclass(frozen=True)
class RegionPreferences:
    """Every resolved preference for one locale context.

    Attributes:
        region_code: Normalized region the values were inferred from.
        temperature_unit: Resolved temperature unit.
        measurement_system: Resolved measurement system.
        first_day_of_week: Resolved week start.
        date_formats: Short, medium and long date patterns.
        time_formats: Short, medium and long time patterns.
        number_formats: 0-decimal and 2-decimal number patterns.
    """

    region_code: str | None
    temperature_unit: TemperatureUnit
    measurement_system: MeasurementSystem
    first_day_of_week: WeekStartDay
    date_formats: tuple[str, ...] = field(default_factory=tuple)
    time_formats: tuple[str, ...] = field(default_factory=tuple)
    number_formats: tuple[str, ...] = field(default_factory=tuple)

    @property
    def uses_metric_system(self) -> bool:
        return self.measurement_system.uses_metric

    def to_dict(self) -> dict[str, object]:
        """Convert to the wire representation used by the query interface."""
        return {
            "regionCode": self.region_code,
            "temperatureUnits": self.temperature_unit.value,
            "usesMetricSystem": self.uses_metric_system,
            "firstDayOfWeek": self.first_day_of_week.value,
            "dateFormatsList": list(self.date_formats),
            "timeFormatsList": list(self.time_formats),
            "numberFormatsList": list(self.number_formats),
        }
