import time

import httpx
from pydantic import ValidationError

from app.config import Settings
from app.errors import UpstreamError, ZipcodeNotFoundError
from app.obs.logger import log_event
from app.obs.tracing import TracingSubsystem
from app.types import ViaCepAddress

UPSTREAM = "viacep"


class LocationResolver:
    """Postal code -> place name, via ViaCEP. One call per lookup, no retries."""

    def __init__(self, settings: Settings, http: httpx.AsyncClient, tracer: TracingSubsystem):
        self.url_template = settings.VIACEP_URL
        self._http = http
        self.tracer = tracer

    def build_url(self, cep: str) -> str:
        return self.url_template.format(cep=cep)

    async def resolve(self, cep: str) -> str:
        url = self.build_url(cep)
        with self.tracer.start_span("viacep.lookup", attributes={"zipcode": cep}):
            start = time.monotonic()
            try:
                r = await self._http.get(url)
            except httpx.HTTPError as e:
                log_event("upstream_error", level="WARNING", upstream=UPSTREAM,
                          reason="transport", url=url, error=type(e).__name__)
                raise UpstreamError(UPSTREAM, "transport", str(e)) from e

            log_event("upstream_response", upstream=UPSTREAM, url=url, status=r.status_code,
                      ms_total=round((time.monotonic() - start) * 1000.0, 2))
            if not r.is_success:
                raise UpstreamError(UPSTREAM, "status", status=r.status_code)

            try:
                address = ViaCepAddress.model_validate(r.json())
            except (ValueError, ValidationError) as e:
                log_event("upstream_error", level="WARNING", upstream=UPSTREAM,
                          reason="decode", url=url)
                raise UpstreamError(UPSTREAM, "decode", str(e)) from e

            if not address.localidade:
                raise ZipcodeNotFoundError(f"no locality for {cep}")
            return address.localidade
