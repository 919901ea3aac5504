import os
import sys
import asyncio
import inspect

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

# Ensure project root is on sys.path so `import app` works in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.config import Settings  # noqa: E402
from app.obs.tracing import OtelTracer  # noqa: E402
from stubs import StubUpstreams  # noqa: E402


def pytest_pyfunc_call(pyfuncitem):
    """Allow running async tests without pytest-asyncio.

    If the test function is a coroutine, run it in a fresh event loop.
    """
    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        funcargs = pyfuncitem.funcargs
        sig = inspect.signature(testfunction)
        # Filter only the parameters that the test function expects
        allowed = {name: funcargs[name] for name in sig.parameters.keys() if name in funcargs}
        asyncio.run(testfunction(**allowed))
        return True
    return None


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        TEMPERATURE_SERVICE_URL="http://temperature.test/temperatura",
        VIACEP_URL="https://viacep.test/ws/{cep}/json/",
        WEATHER_API_URL="https://weather.test/v1/current.json",
        WEATHER_API_KEY="secret-key",
        REQUEST_DEADLINE_SECONDS=5.0,
    )


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return OtelTracer(provider)


@pytest.fixture
def upstreams():
    return StubUpstreams()
