"""Named query dispatch.

Maps the fixed set of query names callers send over the host bridge onto
PreferenceResolver operations and converts results to wire values.
Unknown names produce a "not implemented" result instead of an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from region_settings.errors import UnsupportedQueryError
from region_settings.resolver import PreferenceResolver
from region_settings.types import FormatCategory

logger = logging.getLogger(__name__)


class QueryName(str, Enum):
    """Supported query names."""

    TEMPERATURE_UNITS = "getTemperatureUnits"
    USES_METRIC_SYSTEM = "getUsesMetricSystem"
    FIRST_DAY_OF_WEEK = "getFirstDayOfWeek"
    DATE_FORMATS = "getDateFormatsList"
    TIME_FORMATS = "getTimeFormatsList"
    NUMBER_FORMATS = "getNumberFormatsList"


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one dispatched query.

    Exactly one of ``value`` and ``error`` is meaningful: ``error`` is set
    only for unsupported queries.
    """

    query: str
    value: Any = None
    error: UnsupportedQueryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def not_implemented(self) -> bool:
        return isinstance(self.error, UnsupportedQueryError)

    def unwrap(self) -> Any:
        """Get the value, raising the carried error if there is one.

        Raises:
            UnsupportedQueryError: If the query was not recognized.
        """
        if self.error is not None:
            raise self.error
        return self.value


class QueryDispatcher:
    """Dispatch named queries to a PreferenceResolver.

    Example:
        dispatcher = QueryDispatcher(PreferenceResolver())
        dispatcher.dispatch("getFirstDayOfWeek").value  # "MON"
        dispatcher.dispatch("getFooBar").not_implemented  # True
    """

    def __init__(self, resolver: PreferenceResolver | None = None) -> None:
        self._resolver = resolver or PreferenceResolver()
        self._handlers: dict[QueryName, Callable[[], Any]] = {
            QueryName.TEMPERATURE_UNITS: lambda: self._resolver.resolve_temperature_unit().value,
            QueryName.USES_METRIC_SYSTEM: lambda: self._resolver.resolve_measurement_system().uses_metric,
            QueryName.FIRST_DAY_OF_WEEK: lambda: self._resolver.resolve_week_start().value,
            QueryName.DATE_FORMATS: lambda: self._patterns(FormatCategory.DATE),
            QueryName.TIME_FORMATS: lambda: self._patterns(FormatCategory.TIME),
            QueryName.NUMBER_FORMATS: lambda: self._patterns(FormatCategory.NUMBER),
        }

    @property
    def resolver(self) -> PreferenceResolver:
        return self._resolver

    @staticmethod
    def supported_queries() -> list[str]:
        return [name.value for name in QueryName]

    def dispatch(self, query_name: str) -> QueryResult:
        """Run a named query.

        Args:
            query_name: One of the QueryName values.

        Returns:
            QueryResult with the wire value, or carrying an
            UnsupportedQueryError for unknown names.
        """
        try:
            query = QueryName(query_name)
        except ValueError:
            logger.debug("Unsupported query %r", query_name)
            return QueryResult(query=query_name, error=UnsupportedQueryError(query_name))

        return QueryResult(query=query.value, value=self._handlers[query]())

    def _patterns(self, category: FormatCategory) -> list[str]:
        return list(self._resolver.resolve_format_patterns(category))
