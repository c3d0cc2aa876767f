"""
Telemetry for AI Issue Resolver.

Records API calls, model operations and timings as named events. One instance
is built by the entry point and handed to every component that reports.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator, Optional


@dataclass
class TelemetryEvent:
    """A single recorded event."""

    name: str
    category: str
    properties: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Telemetry:
    """
    Event sink backed by logging.

    Events are kept in memory for the lifetime of the run and emitted on the
    ``issue_resolver.telemetry`` logger at DEBUG level.
    """

    def __init__(self, enabled: bool = True, logger: Optional[logging.Logger] = None) -> None:
        self._enabled = enabled
        self._logger = logger or logging.getLogger("issue_resolver.telemetry")
        self._events: list[TelemetryEvent] = []

    @property
    def events(self) -> list[TelemetryEvent]:
        """Events recorded so far."""
        return list(self._events)

    def capture(self, name: str, category: str, **properties: Any) -> None:
        """Record an event."""
        if not self._enabled:
            return
        event = TelemetryEvent(name=name, category=category, properties=properties)
        self._events.append(event)
        self._logger.debug(f"{category}.{name} {properties}")

    def log_api_call(self, endpoint: str, method: str, params: Optional[dict] = None) -> None:
        self.capture("api_call", "api", endpoint=endpoint, method=method, params=params or {})

    def log_api_response(self, endpoint: str, status: int, duration_ms: float) -> None:
        self.capture("api_response", "api", endpoint=endpoint, status=status, duration_ms=duration_ms)

    def log_error(self, error: Exception, context: Optional[dict] = None) -> None:
        self.capture(
            "error",
            "error",
            error_type=type(error).__name__,
            error_message=str(error),
            context=context or {},
        )

    def log_ai_operation(
        self,
        operation: str,
        model: str,
        duration_ms: float,
        success: bool,
    ) -> None:
        self.capture(
            "ai_operation",
            "ai",
            operation=operation,
            model=model,
            duration_ms=duration_ms,
            success=success,
        )

    def log_performance_metric(self, metric: str, value: float, **tags: str) -> None:
        self.capture("performance_metric", "performance", metric_name=metric, value=value, tags=tags)

    @contextmanager
    def timer(self, operation: str) -> Iterator[None]:
        """
        Time a block and record start/end events plus a metric.

        The end event is recorded even if the block raises.
        """
        operation_id = uuid.uuid4().hex[:8]
        self.capture("operation_start", "performance", operation=operation, operation_id=operation_id)
        start = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.capture(
                "operation_end",
                "performance",
                operation=operation,
                operation_id=operation_id,
                duration_ms=duration_ms,
            )
            self.log_performance_metric(operation, duration_ms)
