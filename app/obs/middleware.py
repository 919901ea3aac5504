"""ASGI middleware for lightweight observability.

Reuses the caller's ``x-request-id`` when present (the input service forwards
its own to the temperature service), echoes it on the response and logs one
line per request.
"""

from typing import Callable, Any
import time
import uuid

from app.obs.context import request_id_var, service_var, cep_var
from app.obs.logger import log_event

REQUEST_ID_HEADER = b"x-request-id"


def _inbound_request_id(scope: dict) -> str:
    for name, value in scope.get("headers") or []:
        if name.lower() == REQUEST_ID_HEADER and value:
            return value.decode("latin-1")[:128]
    return str(uuid.uuid4())


class ObservabilityMiddleware:
    def __init__(self, app: Any, service_name: str = "zipcode-weather"):
        self.app = app
        self.service_name = service_name

    async def __call__(self, scope: dict, receive: Callable, send: Callable[[dict], Any]):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        req_id = _inbound_request_id(scope)
        request_id_var.set(req_id)
        service_var.set(self.service_name)
        cep_var.set(None)
        start = time.monotonic()
        status_code = 500

        async def send_wrapper(message: dict):
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 200))
                headers = list(message.get("headers") or [])
                headers.append((REQUEST_ID_HEADER, req_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            log_event(
                "request",
                method=scope.get("method", ""),
                route=scope.get("path", ""),
                status=status_code,
                ms_total=round((time.monotonic() - start) * 1000.0, 2),
            )
