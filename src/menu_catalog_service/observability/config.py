"""Logging and OpenTelemetry configuration."""

import logging
import os
import sys
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

SERVICE_NAME = "menu-catalog-svc"
SERVICE_VERSION = "1.0.0"
METRIC_EXPORT_INTERVAL_MS = 60_000

# Config uses the short names error/warn/info/debug
LOG_LEVELS = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "CRITICAL": logging.CRITICAL,
}


def get_service_resource() -> Resource:
    """Build the resource attached to every span and metric.

    Returns:
        Resource identifying the service, its version and deployment
    """
    return Resource.create(
        {
            "service.name": os.getenv("OTEL_SERVICE_NAME", SERVICE_NAME),
            "service.version": SERVICE_VERSION,
            "deployment.environment": os.getenv("ENVIRONMENT", "development"),
            "square.environment": os.getenv("SQUARE_ENVIRONMENT", "sandbox").lower(),
        }
    )


def setup_tracing(resource: Resource, otlp_endpoint: str) -> None:
    """Export spans in batches to ``<otlp_endpoint>/v1/traces``."""
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{otlp_endpoint}/v1/traces"))
    )
    trace.set_tracer_provider(provider)

    logger.info(f"Trace export enabled: {otlp_endpoint}/v1/traces")


def setup_metrics(resource: Resource, otlp_endpoint: str) -> None:
    """Export cache and upstream metrics every minute to ``<otlp_endpoint>/v1/metrics``."""
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{otlp_endpoint}/v1/metrics"),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))

    logger.info(f"Metric export enabled: {otlp_endpoint}/v1/metrics")


def setup_observability(app: Any = None, enable_exporters: bool = True) -> None:
    """Install tracer and meter providers and instrument httpx and FastAPI.

    With ``ENVIRONMENT=test`` the providers are installed without exporters,
    so spans and metrics are created but never leave the process.

    Args:
        app: FastAPI application to instrument, if any
        enable_exporters: Whether to ship telemetry to the OTLP collector
    """
    if os.getenv("ENVIRONMENT", "development") == "test":
        enable_exporters = False

    resource = get_service_resource()

    if enable_exporters:
        otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")
        setup_tracing(resource, otlp_endpoint)
        setup_metrics(resource, otlp_endpoint)
    else:
        trace.set_tracer_provider(TracerProvider(resource=resource))
        metrics.set_meter_provider(MeterProvider(resource=resource))

    # Square calls are made with short-lived httpx clients
    httpx_instrumentor = HTTPXClientInstrumentor()
    if not httpx_instrumentor.is_instrumented_by_opentelemetry:
        httpx_instrumentor.instrument()

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls="health,api/health")
        logger.info("FastAPI routes instrumented (health checks excluded)")


def configure_logging(log_level: str = "info") -> None:
    """Send JSON log records to stdout at the configured level.

    Args:
        log_level: error, warn, info or debug, in any case
    """
    level_name = log_level.upper()
    level = LOG_LEVELS.get(level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            timestamp=True,
            static_fields={"service": SERVICE_NAME},
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # httpx logs every request at INFO; the adapter already logs failures
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    logger.info(f"JSON logging configured at {level_name}")
