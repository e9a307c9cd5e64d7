import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter

from findoc.core.config import settings


def setup_telemetry(service_name: str = "findoc"):
    """Export traces and log records over OTLP/HTTP."""
    resource = Resource.create({SERVICE_NAME: service_name})
    otlp_endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT.rstrip("/")

    # Tracing setup
    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{otlp_endpoint}/v1/traces"))
    )
    trace.set_tracer_provider(tracer_provider)

    # Logging setup
    logger_provider = LoggerProvider(resource=resource)
    log_exporter = OTLPLogExporter(endpoint=f"{otlp_endpoint}/v1/logs")
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(log_exporter))

    # Attach OpenTelemetry logging to the findoc loggers
    handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
    logging.getLogger("findoc").addHandler(handler)

    return tracer_provider, logger_provider
