import httpx

from app.config import Settings


def build_http_client(settings: Settings, **kwargs) -> httpx.AsyncClient:
    """
    Shared outbound client for one service process.

    Holds no per-request state, so concurrent requests reuse it safely. Extra
    kwargs (e.g. ``transport``) are passed through, which is how tests plug in
    stub upstreams.
    """
    timeout = httpx.Timeout(
        connect=settings.HTTP_CONNECT_TIMEOUT_SECONDS,
        read=settings.HTTP_READ_TIMEOUT_SECONDS,
        write=settings.HTTP_READ_TIMEOUT_SECONDS,
        pool=settings.HTTP_CONNECT_TIMEOUT_SECONDS,
    )
    kwargs.setdefault("http2", "transport" not in kwargs)
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"Accept": "application/json"},
        **kwargs,
    )
