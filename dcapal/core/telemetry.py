"""OpenTelemetry wiring for the API process."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes
from sqlalchemy.ext.asyncio import AsyncEngine

from dcapal import __version__
from dcapal.config import AppSettings
from dcapal.core.metrics import bind_meter_provider

logger = logging.getLogger(__name__)

_TELEMETRY_INITIALISED = False
_METRIC_EXPORT_INTERVAL_MS = 10000
# Liveness checks would otherwise dominate the request spans.
_EXCLUDED_URLS = "health"


@dataclass
class Telemetry:
    app: FastAPI
    tracer_provider: TracerProvider
    meter_provider: MeterProvider
    log_handler: LoggingHandler | None = None

    def shutdown(self) -> None:
        global _TELEMETRY_INITIALISED  # noqa: PLW0603

        FastAPIInstrumentor.uninstrument_app(self.app)
        HTTPXClientInstrumentor().uninstrument()
        SQLAlchemyInstrumentor().uninstrument()
        if self.log_handler is not None:
            logging.getLogger("dcapal").removeHandler(self.log_handler)
        bind_meter_provider(None)
        self.tracer_provider.shutdown()
        self.meter_provider.shutdown()
        _TELEMETRY_INITIALISED = False


def setup_telemetry(
    app: FastAPI,
    settings: AppSettings,
    engine: AsyncEngine | None = None,
    *,
    span_exporter: SpanExporter | None = None,
    metric_readers: Sequence[MetricReader] | None = None,
) -> Telemetry | None:
    """Export traces, metrics and ``dcapal`` logs over OTLP.

    Exporters default to OTLP/gRPC; ``span_exporter`` and ``metric_readers``
    replace them. The service counters in :mod:`dcapal.core.metrics` are bound
    to the new meter provider.
    """

    global _TELEMETRY_INITIALISED  # noqa: PLW0603 - single initialisation guard

    if _TELEMETRY_INITIALISED:
        return None

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return None

    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_NAMESPACE: "dcapal",
            ResourceAttributes.SERVICE_VERSION: __version__,
        }
    )
    exporter_options = _otlp_options(settings)

    tracer_provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    tracer_provider.add_span_processor(
        BatchSpanProcessor(span_exporter or OTLPSpanExporter(**exporter_options))
    )

    if metric_readers is None:
        metric_readers = [
            PeriodicExportingMetricReader(
                OTLPMetricExporter(**exporter_options),
                export_interval_millis=_METRIC_EXPORT_INTERVAL_MS,
            )
        ]
    meter_provider = MeterProvider(resource=resource, metric_readers=list(metric_readers))

    _install_global_providers(tracer_provider, meter_provider)
    bind_meter_provider(meter_provider)

    log_handler = None
    if settings.telemetry_export_logs:
        log_handler = _export_logs(resource, exporter_options)

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
        excluded_urls=_EXCLUDED_URLS,
    )
    # Outbound Yahoo Finance calls
    HTTPXClientInstrumentor().instrument(tracer_provider=tracer_provider)
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=tracer_provider)

    _TELEMETRY_INITIALISED = True
    logger.info("Telemetry initialised for %s", settings.telemetry_service_name)
    return Telemetry(app, tracer_provider, meter_provider, log_handler)


def _otlp_options(settings: AppSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        options["endpoint"] = settings.telemetry_otlp_endpoint
    return options


def _install_global_providers(tracer_provider: TracerProvider, meter_provider: MeterProvider) -> None:
    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(meter_provider)


def _export_logs(resource: Resource, exporter_options: dict[str, Any]) -> LoggingHandler:
    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(**exporter_options)))
    set_logger_provider(logger_provider)

    handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
    logging.getLogger("dcapal").addHandler(handler)
    return handler


__all__ = ["Telemetry", "setup_telemetry"]
