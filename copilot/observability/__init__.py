"""Observability module with conditional OpenTelemetry support.

When OTEL_ENABLED is false, noop implementations are exported so callers
never need to check the setting themselves.
"""

from typing import Any, Dict, Optional

from copilot.config import settings

if settings.OTEL_ENABLED:
    from copilot.observability.otel import (
        init_telemetry,
        create_span,
        record_search_metrics,
        record_tool_invocation,
        record_chat_turn,
    )
else:
    class NoopSpan:
        """Noop span that provides the span interface."""

        def set_attribute(self, key: str, value: Any) -> None:
            pass

        def add_event(self, name: str, attributes: Optional[Dict[str, Any]] = None) -> None:
            pass

        def end(self) -> None:
            pass

        def is_recording(self) -> bool:
            return False

    def init_telemetry(
        service_name: str = "maintenance-copilot",
        service_version: str = "1.0.0",
        environment: Optional[str] = None,
    ) -> None:
        """Noop: OpenTelemetry is disabled."""

    def create_span(
        name: str,
        kind: Any = None,
        attributes: Optional[Dict[str, Any]] = None
    ) -> NoopSpan:
        """Noop: Returns a NoopSpan when OpenTelemetry is disabled."""
        return NoopSpan()

    def record_search_metrics(
        results_count: int,
        search_time: float,
        threshold: Optional[float] = None,
    ) -> None:
        """Noop: OpenTelemetry is disabled."""

    def record_tool_invocation(
        tool_name: str,
        effect: str,
        execution_time: float,
        success: bool,
        error_type: Optional[str] = None,
    ) -> None:
        """Noop: OpenTelemetry is disabled."""

    def record_chat_turn(rounds: int, outcome: str, duration: float) -> None:
        """Noop: OpenTelemetry is disabled."""


__all__ = [
    "init_telemetry",
    "create_span",
    "record_search_metrics",
    "record_tool_invocation",
    "record_chat_turn",
]
