"""Collaborator call wrapper.

Every store and browser call goes through :class:`Invoker`, which turns
arbitrary collaborator failures into :class:`ExternalServiceError`
subclasses and optionally traces the call at DEBUG level.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tabkeep._redact import redact_for_log
from tabkeep.config import TabkeepConfig
from tabkeep.exceptions import BrowserApiError, ExternalServiceError, TabkeepError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Invoker:
    """Run collaborator calls with uniform error mapping and tracing."""

    def __init__(self, *, trace: bool = False, redact_urls: bool = True) -> None:
        self._trace = trace
        self._redact_urls = redact_urls

    @classmethod
    def from_config(cls, config: TabkeepConfig) -> Invoker:
        return cls(trace=config.call_trace_enabled, redact_urls=config.redact_urls)

    def _loggable(self, value: Any) -> Any:
        if self._redact_urls:
            return redact_for_log(value)
        return value

    async def __call__(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        *,
        error_cls: type[ExternalServiceError] = BrowserApiError,
        **trace_args: Any,
    ) -> T:
        if self._trace:
            _logger.debug("-> %s %s", operation, self._loggable(trace_args))
        try:
            result = await call()
        except TabkeepError:
            raise
        except Exception as exc:
            _logger.debug("%s failed", operation, exc_info=True)
            raise error_cls(f"{operation} failed: {exc}", operation=operation) from exc
        if self._trace:
            _logger.debug("<- %s %s", operation, self._loggable(result))
        return result
