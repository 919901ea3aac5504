import httpx
import pytest

from app.errors import UpstreamError
from app.weather.resolver import WeatherResolver
from stubs import connect_error, spans_by_name, weather_ok


def make_resolver(settings, upstreams, tracer):
    return WeatherResolver(settings, upstreams.client(settings), tracer)


async def test_returns_current_celsius(settings, upstreams, tracer, span_exporter):
    upstreams.route("weather.test", weather_ok(25.0))
    resolver = make_resolver(settings, upstreams, tracer)

    temp_c = await resolver.resolve("São Paulo")

    assert temp_c == 25.0
    assert "weatherapi.current" in spans_by_name(span_exporter)


async def test_query_carries_key_and_escaped_place(settings, upstreams, tracer):
    upstreams.route("weather.test", weather_ok())
    resolver = make_resolver(settings, upstreams, tracer)

    await resolver.resolve("São Paulo")

    url = upstreams.calls[0].url
    assert url.path == "/v1/current.json"
    assert url.params["key"] == "secret-key"
    assert url.params["q"] == "São Paulo"
    assert url.params["aqi"] == "no"
    # escaped on the wire
    assert b"S%C3%A3o" in url.query
    assert b" " not in url.query


def raw_json(body):
    return lambda r: httpx.Response(200, content=body, headers={"content-type": "application/json"})


async def test_integer_reading_is_accepted(settings, upstreams, tracer):
    upstreams.route("weather.test", weather_ok(25))
    resolver = make_resolver(settings, upstreams, tracer)

    assert await resolver.resolve("Recife") == 25.0


@pytest.mark.parametrize("handler, reason", [
    (connect_error, "transport"),
    (lambda r: httpx.Response(401, json={"error": {"code": 2006}}), "status"),
    (lambda r: httpx.Response(503, text="unavailable"), "status"),
    (lambda r: httpx.Response(200, text="{not json"), "decode"),
    (lambda r: httpx.Response(200, json={"current": {}}), "decode"),
    (lambda r: httpx.Response(200, json={"location": {}}), "decode"),
    (raw_json(b'{"current": {"temp_c": NaN}}'), "decode"),
    (raw_json(b'{"current": {"temp_c": Infinity}}'), "decode"),
    (lambda r: httpx.Response(200, json={"current": {"temp_c": True}}), "decode"),
    (lambda r: httpx.Response(200, json={"current": {"temp_c": "25"}}), "decode"),
])
async def test_failures_surface_as_upstream_error(settings, upstreams, tracer, handler, reason):
    upstreams.route("weather.test", handler)
    resolver = make_resolver(settings, upstreams, tracer)

    with pytest.raises(UpstreamError) as exc:
        await resolver.resolve("São Paulo")
    assert exc.value.upstream == "weatherapi"
    assert exc.value.reason == reason


async def test_read_timeout_is_transport_failure(settings, upstreams, tracer):
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstreams.route("weather.test", slow)
    resolver = make_resolver(settings, upstreams, tracer)

    with pytest.raises(UpstreamError) as exc:
        await resolver.resolve("Curitiba")
    assert exc.value.reason == "transport"
