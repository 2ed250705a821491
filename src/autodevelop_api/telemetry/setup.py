"""OpenTelemetry setup and configuration."""

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    ParentBased,
    TraceIdRatioBased,
)

from autodevelop_api.config import Settings, get_settings

if TYPE_CHECKING:
    from fastapi import FastAPI
    from opentelemetry.sdk.trace.sampling import Sampler

logger = logging.getLogger(__name__)

_tracer_provider: TracerProvider | None = None


def _get_sampler(sampler_type: str, sampler_arg: float) -> "Sampler":
    """Get the appropriate sampler based on configuration."""
    if sampler_type == "always_on":
        return ALWAYS_ON
    elif sampler_type == "always_off":
        return ALWAYS_OFF
    elif sampler_type == "traceidratio":
        return TraceIdRatioBased(sampler_arg)
    elif sampler_type == "parentbased_always_on":
        return ParentBased(ALWAYS_ON)
    elif sampler_type == "parentbased_always_off":
        return ParentBased(ALWAYS_OFF)
    elif sampler_type == "parentbased_traceidratio":
        return ParentBased(TraceIdRatioBased(sampler_arg))
    else:
        logger.warning("Unknown sampler type '%s', using always_on", sampler_type)
        return ALWAYS_ON


def _create_exporter(settings: Settings):
    """Create the span exporter selected by ``OTEL_EXPORTER_TYPE``."""
    if settings.otel_exporter_type == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        return OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)

    if settings.otel_exporter_type == "otlp-http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter as HTTPSpanExporter,
        )

        return HTTPSpanExporter(
            endpoint=f"{settings.otel_exporter_otlp_http_endpoint}/v1/traces"
        )

    return ConsoleSpanExporter()


def setup_telemetry(settings: Settings | None = None) -> bool:
    """Initialize OpenTelemetry tracing.

    Call this early in startup, before the app is created.

    Args:
        settings: Application settings.

    Returns:
        True if tracing was enabled.
    """
    global _tracer_provider

    settings = settings or get_settings()

    if not settings.otel_enabled:
        logger.debug("OpenTelemetry tracing is disabled")
        return False

    logger.info(
        "Initializing OpenTelemetry tracing (service=%s, exporter=%s, sampler=%s)",
        settings.otel_service_name,
        settings.otel_exporter_type,
        settings.otel_traces_sampler,
    )

    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": "0.1.0",
            "deployment.environment": "development" if settings.debug else "production",
        }
    )
    sampler = _get_sampler(settings.otel_traces_sampler, settings.otel_traces_sampler_arg)

    _tracer_provider = TracerProvider(resource=resource, sampler=sampler)
    _tracer_provider.add_span_processor(BatchSpanProcessor(_create_exporter(settings)))
    trace.set_tracer_provider(_tracer_provider)

    logger.info("OpenTelemetry tracing initialized successfully")
    return True


def instrument_app(app: "FastAPI") -> None:
    """Instrument a FastAPI app once tracing is configured."""
    if _tracer_provider is None:
        return

    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app, tracer_provider=_tracer_provider)
        logger.debug("FastAPI instrumentation enabled")
    except ImportError:
        logger.warning(
            "FastAPI instrumentation not available. "
            "Install with: pip install opentelemetry-instrumentation-fastapi"
        )


def shutdown_telemetry() -> None:
    """Shutdown OpenTelemetry and flush any pending spans."""
    global _tracer_provider

    if _tracer_provider is not None:
        logger.info("Shutting down OpenTelemetry tracing")
        _tracer_provider.shutdown()
        _tracer_provider = None


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer for the given module name.

    Args:
        name: The name of the module requesting the tracer,
              typically __name__.

    Returns:
        A tracer instance for creating spans.
    """
    return trace.get_tracer(name)
