from typing import Any, Dict

import httpx
from pydantic import ValidationError

from app.config import Settings
from app.errors import InternalError, UpstreamError
from app.obs.context import cep_var, request_id_var
from app.obs.logger import log_event
from app.obs.tracing import TracingSubsystem
from app.types import LookupResult
from app.validation import parse_lookup_request

UPSTREAM = "temperature-service"


class InputService:
    """
    Input service orchestration: validate the client body, forward it to the
    temperature service with the trace context attached, relay the answer.

    Whatever goes wrong downstream, the client only ever sees a generic
    internal error.
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient, tracer: TracingSubsystem):
        self.temperature_url = settings.TEMPERATURE_SERVICE_URL
        self._http = http
        self.tracer = tracer

    async def lookup(self, raw_body: Any) -> LookupResult:
        with self.tracer.start_span("zipcode.lookup"):
            request = parse_lookup_request(raw_body)
            cep_var.set(request.cep)

            headers: Dict[str, str] = {}
            self.tracer.inject(headers)
            if request_id_var.get():
                headers["x-request-id"] = request_id_var.get()

            try:
                outbound = self._http.build_request(
                    "GET", self.temperature_url, params={"cep": request.cep}, headers=headers
                )
            except (httpx.InvalidURL, httpx.UnsupportedProtocol, ValueError) as e:
                log_event("outbound_request_invalid", level="ERROR", error=str(e))
                raise InternalError(str(e)) from e

            try:
                r = await self._http.send(outbound)
            except httpx.HTTPError as e:
                log_event("upstream_error", level="ERROR", upstream=UPSTREAM,
                          reason="transport", error=type(e).__name__)
                raise UpstreamError(UPSTREAM, "transport", str(e)) from e

            if not r.is_success:
                log_event("upstream_error", level="ERROR", upstream=UPSTREAM,
                          reason="status", upstream_status=r.status_code)
                raise UpstreamError(UPSTREAM, "status", status=r.status_code)

            try:
                return LookupResult.model_validate(r.json())
            except (ValueError, ValidationError) as e:
                log_event("upstream_error", level="ERROR", upstream=UPSTREAM, reason="decode")
                raise UpstreamError(UPSTREAM, "decode", str(e)) from e
