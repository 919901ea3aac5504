import json

from opentelemetry import baggage, context as otel_context
from opentelemetry.sdk.trace import TracerProvider

from app.config import Settings
from app.obs.context import request_id_var, clear_context
from app.obs.logger import log_event, redact_url
from app.obs.tracing import configure_tracing


def test_modules_exist():
    import app.obs.context as ctx
    import app.obs.logger as log
    import app.obs.middleware as mid
    import app.obs.tracing as tr

    assert hasattr(ctx, "request_id_var")
    assert hasattr(log, "log_event")
    assert hasattr(mid, "ObservabilityMiddleware")
    assert hasattr(tr, "OtelTracer")


def test_log_line_carries_request_and_trace_ids(capsys, tracer):
    request_id_var.set("req-1")
    try:
        with tracer.start_span("unit-test") as span:
            log_event("step", step="unit-test")
            expected_trace = format(span.get_span_context().trace_id, "032x")
    finally:
        clear_context()

    line = json.loads(capsys.readouterr().out.strip())
    assert line["event"] == "step"
    assert line["request_id"] == "req-1"
    assert line["trace_id"] == expected_trace
    assert line["level"] == "INFO"


def test_log_line_outside_span_has_no_trace(capsys):
    log_event("idle")
    line = json.loads(capsys.readouterr().out.strip())
    assert line["trace_id"] is None


def test_logger_redacts_api_key(capsys):
    log_event("upstream_response", url="https://api.weatherapi.com/v1/current.json?key=abc123&q=Recife")
    out = capsys.readouterr().out
    assert "abc123" not in out
    assert "q=Recife" in out


def test_redact_url_leaves_plain_urls_alone():
    assert redact_url("https://viacep.com.br/ws/01001000/json/") == "https://viacep.com.br/ws/01001000/json/"


def test_inject_then_extract_keeps_trace_and_baggage(tracer):
    token = otel_context.attach(baggage.set_baggage("tenant", "acme"))
    try:
        with tracer.start_span("client") as span:
            carrier = {}
            tracer.inject(carrier)
            sent = span.get_span_context()
    finally:
        otel_context.detach(token)

    assert carrier["traceparent"].startswith("00-")
    assert "tenant=acme" in carrier["baggage"]

    extracted = tracer.extract(carrier)
    assert baggage.get_baggage("tenant", extracted) == "acme"

    with tracer.start_span("server", context=extracted) as child:
        assert child.get_span_context().trace_id == sent.trace_id
        assert child.parent.span_id == sent.span_id


def test_extract_ignores_ambient_context(tracer):
    with tracer.start_span("ambient"):
        with tracer.start_span("server", context=tracer.extract({})) as span:
            assert span.parent is None


def test_configure_tracing_without_exporter():
    provider = configure_tracing(Settings(_env_file=None, OTEL_SERVICE_NAME="temperature-service"))
    try:
        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "temperature-service"
    finally:
        provider.shutdown()
