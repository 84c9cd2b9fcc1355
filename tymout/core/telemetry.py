"""
Metrics and tracing for the discovery API.

Prometheus is toggled by ENABLE_PROMETHEUS alone; tracing spans are shipped
over OTLP/gRPC when ENABLE_OTEL is set.
"""
import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_fastapi_instrumentator import Instrumentator

from tymout.config import Settings, get_settings

logger = logging.getLogger(__name__)

METRICS_PATH = "/metrics"
UNMETERED_PATHS = [METRICS_PATH, "/health", "/health/ready", "/docs", "/redoc", "/openapi.json"]


def _instrument_metrics(app: FastAPI) -> None:
    Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=UNMETERED_PATHS,
        inprogress_name="tymout_requests_inprogress",
        inprogress_labels=True,
    ).instrument(app).expose(app, endpoint=METRICS_PATH, include_in_schema=False)


def _instrument_tracing(app: FastAPI, settings: Settings) -> None:
    resource = Resource.create(attributes={
        "service.name": settings.APP_NAME,
        "service.namespace": "tymout",
        "service.version": settings.APP_VERSION,
        "deployment.environment": "development" if settings.DEBUG else "production",
    })

    # Unset endpoint falls back to OTEL_EXPORTER_OTLP_ENDPOINT / localhost:4317
    exporter = (
        OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_ENDPOINT)
        if settings.OTEL_EXPORTER_ENDPOINT
        else OTLPSpanExporter()
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=provider,
        excluded_urls=",".join(UNMETERED_PATHS),
    )


def setup_telemetry(app: FastAPI) -> None:
    """Attach Prometheus metrics and OpenTelemetry tracing per settings."""
    settings = get_settings()

    if settings.ENABLE_PROMETHEUS:
        _instrument_metrics(app)
        logger.info(f"Prometheus metrics exposed at {METRICS_PATH}")

    if settings.ENABLE_OTEL:
        _instrument_tracing(app, settings)
        logger.info(
            f"OpenTelemetry tracing enabled for {settings.APP_NAME}, "
            f"exporter={settings.OTEL_EXPORTER_ENDPOINT or 'default'}"
        )
