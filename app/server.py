"""FastAPI application factories for the two services.

Both apps share the same shell: request logging middleware, a /health route
and one exception handler that turns every ``ServiceError`` into its fixed
``{"message": ...}`` body. Collaborators can be injected (tests pass stub
transports and an in-memory tracer); otherwise they are built from settings.
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from app.cancellation import run_bound_to_request
from app.config import Settings
from app.errors import ServiceError
from app.http import build_http_client
from app.location.resolver import LocationResolver
from app.obs.logger import log_event
from app.obs.middleware import ObservabilityMiddleware
from app.obs.tracing import OtelTracer, TracingSubsystem, configure_tracing
from app.services.input_service import InputService
from app.services.temperature_service import TemperatureService
from app.weather.resolver import WeatherResolver


def _build_app(
    title: str,
    settings: Settings,
    http_client: Optional[httpx.AsyncClient],
    tracer: Optional[TracingSubsystem],
) -> FastAPI:
    owns_http = http_client is None
    owns_tracing = tracer is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        provider = configure_tracing(settings) if owns_tracing else None
        log_event("startup", service=title, role=settings.APP_ROLE, env=settings.APP_ENV)

        yield

        # Shutdown
        log_event("shutdown", service=title)
        if owns_http:
            await app.state.http.aclose()
        if provider is not None:
            provider.shutdown()

    app = FastAPI(title=title, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.http = http_client or build_http_client(settings)
    app.state.tracer = tracer or OtelTracer()

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        log_event(
            "request_failed",
            level="WARNING" if exc.status_code < 500 else "ERROR",
            error=type(exc).__name__,
            status=exc.status_code,
            detail=str(exc),
        )
        return JSONResponse(exc.to_body(), status_code=exc.status_code)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": title}

    app.add_middleware(ObservabilityMiddleware, service_name=title)
    return app


def create_input_app(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    tracer: Optional[TracingSubsystem] = None,
) -> FastAPI:
    app = _build_app("input-service", settings, http_client, tracer)
    app.state.input_service = InputService(settings, app.state.http, app.state.tracer)

    @app.post("/")
    async def lookup_zipcode(request: Request):
        body = await request.body()
        result = await run_bound_to_request(
            request,
            request.app.state.input_service.lookup(body),
            settings.REQUEST_DEADLINE_SECONDS,
        )
        return result.model_dump()

    return app


def create_temperature_app(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    tracer: Optional[TracingSubsystem] = None,
) -> FastAPI:
    app = _build_app("temperature-service", settings, http_client, tracer)
    app.state.temperature_service = TemperatureService(
        location=LocationResolver(settings, app.state.http, app.state.tracer),
        weather=WeatherResolver(settings, app.state.http, app.state.tracer),
        tracer=app.state.tracer,
    )

    @app.get("/temperatura")
    async def get_temperature(request: Request, cep: Optional[str] = Query(None)):
        result = await run_bound_to_request(
            request,
            request.app.state.temperature_service.lookup(cep, dict(request.headers)),
            settings.REQUEST_DEADLINE_SECONDS,
        )
        return result.model_dump()

    return app
