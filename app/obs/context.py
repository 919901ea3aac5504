"""Request context helpers using ContextVars.

Values set by the middleware are copied into the task that runs the lookup,
so every log line of one request carries the same identifiers.
"""

from contextvars import ContextVar
from typing import Optional


# Public ContextVars (names are stable API)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
service_var: ContextVar[Optional[str]] = ContextVar("service", default=None)
cep_var: ContextVar[Optional[str]] = ContextVar("cep", default=None)


def clear_context() -> None:
    """Reset context variables to defaults."""
    request_id_var.set(None)
    service_var.set(None)
    cep_var.set(None)
