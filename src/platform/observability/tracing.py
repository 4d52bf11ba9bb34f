"""
OpenTelemetry tracing for the booking service.

Spans from FastAPI requests, SQLAlchemy statements and the use cases' own
tracers are exported over OTLP when OTEL_EXPORTER_OTLP_ENDPOINT is set.
"""

from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from src.platform.config.core_setting import settings


# Comma separated, matched against the request path
UNTRACED_PATHS = 'health,metrics'


class TracingConfig:
    """
    Owned by the application lifespan:

        tracing = TracingConfig(service_name='mailer-booking')
        tracing.setup()
        ...
        tracing.shutdown()
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        console: bool | None = None,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        self.console = settings.OTEL_CONSOLE_EXPORT if console is None else console
        self._provider: TracerProvider | None = None

    def _exporters(self) -> Iterator[SpanExporter]:
        if self.otlp_endpoint:
            yield OTLPSpanExporter(endpoint=self.otlp_endpoint)
        if self.console:
            yield ConsoleSpanExporter()

    def setup(self) -> None:
        resource = Resource(
            attributes={SERVICE_NAME: self.service_name, SERVICE_VERSION: settings.VERSION}
        )
        provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
        for exporter in self._exporters():
            provider.add_span_processor(BatchSpanProcessor(exporter))

        trace.set_tracer_provider(provider)
        self._provider = provider

    @staticmethod
    def instrument_fastapi(*, app: Any) -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_PATHS)

    @staticmethod
    def instrument_sqlalchemy(*, engine: Any) -> None:
        # AsyncEngine wraps the sync engine the instrumentor hooks into
        SQLAlchemyInstrumentor().instrument(engine=getattr(engine, 'sync_engine', engine))

    def shutdown(self) -> None:
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None
