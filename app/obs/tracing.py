"""Tracing subsystem.

The orchestrators only see the ``TracingSubsystem`` protocol: open a span,
inject the current context into outbound headers, extract an inbound context
from request headers. ``OtelTracer`` is the OpenTelemetry implementation used
in production and in tests (with an in-memory exporter).
"""

from contextlib import AbstractContextManager
from typing import Any, Dict, Mapping, MutableMapping, Optional, Protocol

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from app.config import Settings
from app.obs.logger import log_event


TRACER_NAME = "zipcode-weather"


class TracingSubsystem(Protocol):
    def start_span(
        self,
        name: str,
        context: Optional[Any] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> AbstractContextManager:
        ...

    def inject(self, carrier: MutableMapping[str, str]) -> None:
        ...

    def extract(self, carrier: Mapping[str, str]) -> Any:
        ...


def build_propagator() -> CompositePropagator:
    return CompositePropagator([
        TraceContextTextMapPropagator(),
        W3CBaggagePropagator(),
    ])


class OtelTracer:
    """OpenTelemetry-backed tracing subsystem.

    Spans become the current span for their duration, so anything started
    inside (child spans, ``inject``) picks them up as parent.
    """

    def __init__(self, tracer_provider: Optional[trace.TracerProvider] = None,
                 name: str = TRACER_NAME):
        provider = tracer_provider or trace.get_tracer_provider()
        self._tracer = provider.get_tracer(name)
        self._propagator = build_propagator()

    def start_span(self, name: str, context: Optional[Context] = None,
                   attributes: Optional[Dict[str, Any]] = None):
        return self._tracer.start_as_current_span(
            name, context=context, attributes=attributes
        )

    def inject(self, carrier: MutableMapping[str, str]) -> None:
        self._propagator.inject(carrier)

    def extract(self, carrier: Mapping[str, str]) -> Context:
        # Start from an empty context: only the headers decide the parent
        return self._propagator.extract(carrier, context=Context())


def configure_tracing(settings: Settings) -> TracerProvider:
    """
    Build and install the process-wide tracer provider.

    Spans are always sampled. They are exported over OTLP/HTTP only when an
    endpoint is configured; otherwise they are recorded and dropped.
    """
    resource = Resource.create({SERVICE_NAME: settings.OTEL_SERVICE_NAME})
    provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        exporter = OTLPSpanExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            timeout=settings.OTEL_EXPORT_TIMEOUT_SECONDS,
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    set_global_textmap(build_propagator())
    log_event(
        "tracing_configured",
        service_name=settings.OTEL_SERVICE_NAME,
        exporter_endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
    )
    return provider
