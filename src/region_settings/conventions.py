"""Regional convention table.

Static mapping from ISO 3166-1 alpha-2 region codes to the measurement
system and first day of the week used there. Lookups expect an already
normalized (uppercase) code; anything outside the listed sets, including
None, resolves to the metric system and a Monday week start.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from region_settings.types import MeasurementSystem, WeekStartDay


# =============================================================================
# Convention Data
# =============================================================================


NON_METRIC_REGIONS: frozenset[str] = frozenset(
    {
        "AS",  # American Samoa
        "BS",
        "BZ",
        "FM",
        "GU",  # Guam
        "KY",
        "LR",
        "MH",
        "MP",  # Northern Mariana Islands
        "PW",
        "TC",
        "UM",  # US Minor Outlying Islands
        "US",
        "VI",  # US Virgin Islands
    }
)

FRIDAY_START_REGIONS: frozenset[str] = frozenset({"MV"})

SATURDAY_START_REGIONS: frozenset[str] = frozenset(
    {
        "AE", "AF", "BH", "DJ", "DZ", "EG", "IQ", "IR",
        "JO", "KW", "LY", "OM", "QA", "SD", "SY",
    }
)

SUNDAY_START_REGIONS: frozenset[str] = frozenset(
    {
        # Americas
        "AG", "BR", "BS", "BZ", "CA", "CO", "DM", "DO", "GT", "HN", "JM",
        "MX", "NI", "PA", "PE", "PR", "PY", "SV", "TT", "US", "VE", "VI",
        # Asia and Middle East
        "BD", "BT", "CN", "HK", "ID", "IL", "IN", "JP", "KH", "KR", "LA",
        "MM", "MO", "NP", "PH", "PK", "SA", "SG", "TH", "TW", "YE",
        # Oceania and US territories
        "AS", "AU", "GU", "MH", "UM", "WS",
        # Africa
        "BW", "ET", "KE", "MZ", "ZA", "ZW",
        # Europe
        "MT", "PT",
    }
)


class ConventionTableError(ValueError):
    """The week-start region sets overlap."""

    pass


# =============================================================================
# Convention Table
# =============================================================================


@dataclass(frozen=True)
class RegionConventionTable:
    """Immutable region code -> convention lookup.

    Attributes:
        non_metric: Regions using the US customary measurement system.
        week_starts: Regions whose week does not start on Monday, keyed by
            their first day. The sets must be pairwise disjoint.
    """

    non_metric: frozenset[str] = NON_METRIC_REGIONS
    week_starts: Mapping[WeekStartDay, frozenset[str]] | None = None

    def __post_init__(self) -> None:
        if self.week_starts is None:
            object.__setattr__(
                self,
                "week_starts",
                {
                    WeekStartDay.FRIDAY: FRIDAY_START_REGIONS,
                    WeekStartDay.SATURDAY: SATURDAY_START_REGIONS,
                    WeekStartDay.SUNDAY: SUNDAY_START_REGIONS,
                },
            )
        overlap = find_overlaps(self.week_starts)
        if overlap:
            raise ConventionTableError(
                f"Regions assigned to more than one week start: {sorted(overlap)}"
            )

    def is_non_metric(self, region_code: str | None) -> bool:
        """Check whether a region uses the US customary system."""
        return region_code in self.non_metric

    def measurement_system_for(self, region_code: str | None) -> MeasurementSystem:
        if self.is_non_metric(region_code):
            return MeasurementSystem.US
        return MeasurementSystem.METRIC

    def week_start_for(self, region_code: str | None) -> WeekStartDay:
        """Get the first day of the week for a region.

        Args:
            region_code: Normalized region code, or None.

        Returns:
            The region's week start, Monday outside the listed sets.
        """
        if region_code:
            for day, regions in self.week_starts.items():
                if region_code in regions:
                    return day
        return WeekStartDay.MONDAY

    def regions_starting_on(self, day: WeekStartDay) -> frozenset[str]:
        """List the regions explicitly mapped to a week start.

        Monday is the default and has no explicit set.
        """
        return self.week_starts.get(day, frozenset())


def find_overlaps(groups: Mapping[WeekStartDay, Iterable[str]]) -> set[str]:
    """Find region codes that appear in more than one group."""
    seen: set[str] = set()
    duplicates: set[str] = set()
    for regions in groups.values():
        for code in regions:
            if code in seen:
                duplicates.add(code)
            seen.add(code)
    return duplicates


DEFAULT_TABLE = RegionConventionTable()
