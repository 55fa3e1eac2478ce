"""OpenTelemetry tracing helpers for toolgate.

The rest of the codebase calls :func:`get_tracer` without caring whether the
SDK is installed.  Without a configured SDK the API hands out no-op tracers,
so evaluation spans cost next to nothing unless tracing is switched on.

Usage::

    from toolgate.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("toolgate.evaluate") as span:
        span.set_attribute(ATTR_TOOL_NAME, "bash")

To export spans, call :func:`configure_telemetry` once at startup
(requires the ``otel`` extra: ``pip install toolgate[otel]``).
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys used throughout toolgate instrumentation
# ---------------------------------------------------------------------------

ATTR_TOOL_NAME = "toolgate.tool.name"
ATTR_FEATURE = "toolgate.feature"
ATTR_DECISION = "toolgate.decision"
ATTR_REASON = "toolgate.reason"
ATTR_USER_DENIED = "toolgate.user_denied"
ATTR_PATTERN = "toolgate.pattern"
ATTR_DESCRIPTION = "toolgate.description"

EVENT_DANGEROUS = "toolgate.dangerous"
EVENT_BLOCKED = "toolgate.blocked"

_INSTRUMENTATION_NAME = "toolgate"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def record_event(name: str, attributes: dict[str, Any]) -> None:
    """Attach an event to the current span (no-op outside a recording span)."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes)


def configure_telemetry(
    *,
    service_name: str = "toolgate",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider (requires ``toolgate[otel]``).

    Console export writes finished spans as JSON to stdout; *otlp_endpoint*
    additionally ships them over OTLP/gRPC.

    Raises:
        ImportError: If ``opentelemetry-sdk`` (or, for OTLP, the exporter
            package) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install toolgate[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if export_to_console:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(otlp_endpoint)))
    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install opentelemetry-exporter-otlp"
        )
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
