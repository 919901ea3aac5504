from typing import Mapping, Optional

from app.errors import UpstreamError, WeatherFetchError, ZipcodeNotFoundError
from app.location.resolver import LocationResolver
from app.obs.context import cep_var
from app.obs.logger import log_event
from app.obs.tracing import TracingSubsystem
from app.types import LookupResult
from app.validation import validate_zipcode
from app.weather.resolver import WeatherResolver
from app.weather.units import convert_celsius


class TemperatureService:
    """
    Temperature service orchestration: zipcode -> place -> temperature.

    The two lookups run strictly in sequence, since the weather query needs the
    place resolved by the first one. Any location failure is reported as "not
    found"; any weather failure as a weather fetch error.
    """

    def __init__(self, location: LocationResolver, weather: WeatherResolver,
                 tracer: TracingSubsystem):
        self.location = location
        self.weather = weather
        self.tracer = tracer

    async def lookup(self, cep: Optional[str], headers: Mapping[str, str]) -> LookupResult:
        parent = self.tracer.extract(headers)
        with self.tracer.start_span("temperature.lookup", context=parent,
                                    attributes={"zipcode": cep or ""}):
            cep_var.set(cep)
            cep = validate_zipcode(cep)

            try:
                place = await self.location.resolve(cep)
            except (UpstreamError, ZipcodeNotFoundError) as e:
                log_event("zipcode_not_found", level="WARNING", reason=str(e))
                raise ZipcodeNotFoundError(str(e)) from e

            try:
                temp_c = await self.weather.resolve(place)
            except UpstreamError as e:
                log_event("weather_fetch_failed", level="ERROR", place=place,
                          reason=e.reason, upstream_status=e.status)
                raise WeatherFetchError(str(e)) from e

            temperature = convert_celsius(temp_c)
            log_event("temperature_resolved", place=place, temp_c=temperature.temp_C)
            return LookupResult(city=place, **temperature.model_dump())
