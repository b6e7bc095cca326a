"""Method-call bridge adapter.

Host UI frameworks deliver queries as method calls on a named channel and
expect a reply through a result object. This adapter translates those
calls onto QueryDispatcher and keeps the resolution core free of any
framework dependency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from region_settings.dispatcher import QueryDispatcher

logger = logging.getLogger(__name__)

CHANNEL_NAME = "region_settings"


@dataclass(frozen=True)
class MethodCall:
    """A method call received from the host channel."""

    method: str
    arguments: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class MethodResult(Protocol):
    """Reply callbacks supplied by the host channel."""

    def success(self, value: Any) -> None:
        ...

    def error(self, code: str, message: str | None = None, details: Any = None) -> None:
        ...

    def not_implemented(self) -> None:
        ...


class MethodCallHandler:
    """Handle channel method calls with a QueryDispatcher.

    Exactly one reply callback is invoked per call. Unknown methods reply
    ``not_implemented()``; unexpected failures reply ``error()`` and are
    logged instead of escaping into the host transport.
    """

    def __init__(
        self,
        dispatcher: QueryDispatcher | None = None,
        channel: str = CHANNEL_NAME,
    ) -> None:
        self._dispatcher = dispatcher or QueryDispatcher()
        self._channel = channel

    @property
    def channel(self) -> str:
        return self._channel

    def on_method_call(self, call: MethodCall, result: MethodResult) -> None:
        try:
            outcome = self._dispatcher.dispatch(call.method)
        except Exception as e:
            logger.exception("Query %s failed on channel %s", call.method, self._channel)
            result.error("RESOLUTION_FAILED", str(e), {"method": call.method})
            return

        if outcome.not_implemented:
            result.not_implemented()
        else:
            result.success(outcome.value)
