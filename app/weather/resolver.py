import time

import httpx
from pydantic import ValidationError

from app.config import Settings
from app.errors import UpstreamError
from app.obs.logger import log_event
from app.obs.tracing import TracingSubsystem
from app.types import WeatherReport

UPSTREAM = "weatherapi"


class WeatherResolver:
    """Place name -> current temperature in Celsius, via WeatherAPI."""

    def __init__(self, settings: Settings, http: httpx.AsyncClient, tracer: TracingSubsystem):
        self.url = settings.WEATHER_API_URL
        self.api_key = settings.WEATHER_API_KEY
        self._http = http
        self.tracer = tracer

    def build_params(self, place: str) -> dict:
        # httpx URL-escapes query values, accents and spaces included
        return {"key": self.api_key, "q": place, "aqi": "no"}

    async def resolve(self, place: str) -> float:
        with self.tracer.start_span("weatherapi.current", attributes={"place": place}):
            start = time.monotonic()
            try:
                r = await self._http.get(self.url, params=self.build_params(place))
            except httpx.HTTPError as e:
                log_event("upstream_error", level="WARNING", upstream=UPSTREAM,
                          reason="transport", error=type(e).__name__)
                raise UpstreamError(UPSTREAM, "transport", str(e)) from e

            log_event("upstream_response", upstream=UPSTREAM, url=str(r.request.url),
                      status=r.status_code,
                      ms_total=round((time.monotonic() - start) * 1000.0, 2))
            if not r.is_success:
                raise UpstreamError(UPSTREAM, "status", status=r.status_code)

            try:
                report = WeatherReport.model_validate(r.json())
            except (ValueError, ValidationError) as e:
                raise UpstreamError(UPSTREAM, "decode", str(e)) from e
            return report.current.temp_c
