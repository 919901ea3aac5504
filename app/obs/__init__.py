"""Observability package.

Structured logging, request-scoped context, the ASGI request logger and the
tracing subsystem (OpenTelemetry).
"""

__all__ = [
    "middleware",
    "logger",
    "context",
    "tracing",
]
