"""
OpenTelemetry tracing.

Spans are exported over OTLP/gRPC when OTEL_EXPORTER_OTLP_ENDPOINT is set and
printed to stdout when OTEL_CONSOLE_EXPORT=true; with neither, spans are
created (so trace ids still reach the logs) but go nowhere.
"""

from collections.abc import Iterator
import os
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ALWAYS_ON


# Probes and scrapes would drown the purchase spans
UNTRACED_PATHS = 'health,metrics'


class TracingConfig:
    """
    tracing = TracingConfig(service_name='ticket-reservation')
    tracing.setup()                          # once per process
    tracing.instrument_sqlalchemy(engine=get_engine())
    ...
    tracing.shutdown()                       # flushes pending spans
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool | None = None,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
        if enable_console is None:
            enable_console = os.getenv('OTEL_CONSOLE_EXPORT', 'false').lower() == 'true'
        self.enable_console = enable_console
        self._provider: TracerProvider | None = None

    def _exporters(self) -> Iterator[SpanExporter]:
        if self.otlp_endpoint:
            yield OTLPSpanExporter(endpoint=self.otlp_endpoint)
        if self.enable_console:
            yield ConsoleSpanExporter()

    def setup(self) -> None:
        resource = Resource.create(
            {
                SERVICE_NAME: self.service_name,
                'deployment.environment': os.getenv('DEPLOY_ENV', 'local'),
            }
        )
        # Failed purchases are only known at span end; sampling is the collector's job
        provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
        for exporter in self._exporters():
            provider.add_span_processor(BatchSpanProcessor(exporter))

        trace.set_tracer_provider(provider)
        self._provider = provider

    def instrument_fastapi(self, *, app: Any) -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_PATHS)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # Async engines are instrumented through the sync engine they wrap
        SQLAlchemyInstrumentor().instrument(engine=getattr(engine, 'sync_engine', engine))

    def shutdown(self) -> None:
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None
