"""
OpenTelemetry configuration and initialization.

Sets up tracing and metrics for the copilot:
- Automatic instrumentation for FastAPI, HTTPx and SQLAlchemy
- Spans for chat turns and vector searches
- Counters and histograms for tool invocations and searches
- OTLP exporter when an endpoint is configured
"""

import logging
import os
from typing import Dict, Any, Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind

from copilot.config import settings

logger = logging.getLogger(__name__)

_tracer: Optional[trace.Tracer] = None
_instruments: Dict[str, Any] = {}


def init_telemetry(
    service_name: str = "maintenance-copilot",
    service_version: str = "1.0.0",
    environment: Optional[str] = None,
) -> None:
    """
    Initialize OpenTelemetry tracing and metrics.

    Args:
        service_name: Name of the service
        service_version: Version of the service
        environment: Environment (dev, staging, prod)
    """
    global _tracer

    resource = Resource.create(
        attributes={
            "service.name": service_name,
            "service.version": service_version,
            "deployment.environment": environment or os.getenv("ENVIRONMENT", "development"),
        }
    )

    trace_provider = TracerProvider(resource=resource)
    metric_readers = []
    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        trace_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT))
        )
        metric_readers.append(
            PeriodicExportingMetricReader(
                exporter=OTLPMetricExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT),
                export_interval_millis=30000,
            )
        )

    trace.set_tracer_provider(trace_provider)
    _tracer = trace_provider.get_tracer(__name__)

    meter_provider = MeterProvider(resource=resource, metric_readers=metric_readers)
    metrics.set_meter_provider(meter_provider)
    _init_instruments(meter_provider.get_meter(__name__))

    FastAPIInstrumentor().instrument()
    HTTPXClientInstrumentor().instrument()
    SQLAlchemyInstrumentor().instrument()

    logger.info(
        "OpenTelemetry initialized",
        extra={
            "service_name": service_name,
            "otel_endpoint": settings.OTEL_EXPORTER_OTLP_ENDPOINT,
        }
    )


def _init_instruments(meter: metrics.Meter) -> None:
    _instruments["tool_invocations"] = meter.create_counter(
        name="copilot_tool_invocations_total",
        description="Total number of tool invocations",
        unit="1",
    )
    _instruments["tool_duration"] = meter.create_histogram(
        name="copilot_tool_invocation_duration_seconds",
        description="Duration of tool invocations",
        unit="s",
    )
    _instruments["searches"] = meter.create_counter(
        name="copilot_vector_searches_total",
        description="Total number of vector searches",
        unit="1",
    )
    _instruments["search_duration"] = meter.create_histogram(
        name="copilot_vector_search_duration_seconds",
        description="Duration of vector searches",
        unit="s",
    )
    _instruments["chat_turns"] = meter.create_counter(
        name="copilot_chat_turns_total",
        description="Total number of chat turns by outcome",
        unit="1",
    )
    _instruments["chat_duration"] = meter.create_histogram(
        name="copilot_chat_turn_duration_seconds",
        description="Duration of chat turns",
        unit="s",
    )


def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None
) -> trace.Span:
    """Start a span; falls back to the global tracer before init_telemetry runs."""
    tracer = _tracer or trace.get_tracer(__name__)
    return tracer.start_span(name, kind=kind, attributes=attributes or {})


def record_search_metrics(
    results_count: int,
    search_time: float,
    threshold: Optional[float] = None,
) -> None:
    if "searches" not in _instruments:
        return
    attributes = {"has_results": str(results_count > 0)}
    _instruments["searches"].add(1, attributes=attributes)
    _instruments["search_duration"].record(search_time, attributes=attributes)


def record_tool_invocation(
    tool_name: str,
    effect: str,
    execution_time: float,
    success: bool,
    error_type: Optional[str] = None,
) -> None:
    if "tool_invocations" not in _instruments:
        return
    attributes = {
        "tool_name": tool_name,
        "effect": effect,
        "success": str(success),
        "error_type": error_type or "none",
    }
    _instruments["tool_invocations"].add(1, attributes=attributes)
    _instruments["tool_duration"].record(execution_time, attributes={"tool_name": tool_name})


def record_chat_turn(rounds: int, outcome: str, duration: float) -> None:
    if "chat_turns" not in _instruments:
        return
    _instruments["chat_turns"].add(1, attributes={"outcome": outcome, "rounds": rounds})
    _instruments["chat_duration"].record(duration, attributes={"outcome": outcome})
