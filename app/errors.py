"""Error taxonomy shared by both services.

Every error carries the HTTP status and the fixed message sent to the client.
Upstream detail stays in the exception (and the logs); it never reaches the
response body.
"""

from typing import Optional


class ServiceError(Exception):
    status_code: int = 500
    message: str = "internal server error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.message)
        self.detail = detail

    def to_body(self) -> dict:
        return {"message": self.message}


class InvalidZipcodeError(ServiceError):
    status_code = 422
    message = "invalid zipcode"


class ZipcodeNotFoundError(ServiceError):
    status_code = 404
    message = "cannot find zipcode"


class UpstreamError(ServiceError):
    """Transport, status or decode failure talking to an upstream."""

    status_code = 500
    message = "internal server error"

    def __init__(self, upstream: str, reason: str, detail: Optional[str] = None,
                 status: Optional[int] = None):
        super().__init__(detail or f"{upstream}: {reason}")
        self.upstream = upstream
        self.reason = reason  # "transport" | "status" | "decode"
        self.status = status


class WeatherFetchError(ServiceError):
    status_code = 500
    message = "error fetching weather data"


class InternalError(ServiceError):
    status_code = 500
    message = "internal server error"


class DeadlineExceededError(ServiceError):
    status_code = 504
    message = "request timed out"


class ClientDisconnectedError(ServiceError):
    status_code = 499
    message = "client closed request"
