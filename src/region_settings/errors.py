"""Exception hierarchy for region_settings."""

from __future__ import annotations

from typing import Any


class RegionSettingsError(Exception):
    """Base exception for all region_settings errors."""

    pass


class UnsupportedQueryError(RegionSettingsError):
    """A query name outside the supported set was dispatched.

    The dispatcher returns this inside a QueryResult instead of raising it,
    so callers receive an explicit "not implemented" outcome.
    """

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"Query not implemented: {query!r}")


class InvalidPreferenceError(RegionSettingsError):
    """An explicit preference value could not be parsed."""

    def __init__(self, category: str, value: Any) -> None:
        self.category = category
        self.value = value
        super().__init__(f"Invalid value for {category}: {value!r}")
