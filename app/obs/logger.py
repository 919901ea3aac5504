"""Structured JSON logging to stdout.

Each line carries the request id plus the active OpenTelemetry trace and span
ids, so log lines can be joined with the exported traces.
"""

from typing import Any, Dict
from datetime import datetime, timezone
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode
import json

from opentelemetry import trace

from app.obs.context import request_id_var, service_var, cep_var


_SECRET_PARAMS = {"key", "api_key", "apikey", "token"}


def redact_url(value: Any) -> Any:
    """Mask secret query parameters (the WeatherAPI key travels in the URL)."""
    s = str(value) if value is not None else ""
    if "?" not in s:
        return s
    parts = urlsplit(s)
    query = [
        (k, "***" if k.lower() in _SECRET_PARAMS else v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="*")))


def _trace_ids() -> Dict[str, Any]:
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return {"trace_id": None, "span_id": None}
    return {
        "trace_id": format(ctx.trace_id, "032x"),
        "span_id": format(ctx.span_id, "016x"),
    }


def log_event(event: str, **fields: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": fields.pop("level", "INFO"),
        "event": event,
        "service": service_var.get(),
        "request_id": request_id_var.get(),
    }
    payload.update(_trace_ids())
    # cep is only set inside the lookup task
    if cep_var.get() is not None:
        payload["cep"] = cep_var.get()

    # Merge remaining fields
    for k, v in fields.items():
        if k == "url":
            payload[k] = redact_url(v)
        else:
            payload[k] = v

    try:
        print(json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str))
    except (TypeError, ValueError):
        # As a last resort, avoid crashing the app due to logging
        pass
