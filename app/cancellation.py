import asyncio
from typing import Any, Awaitable, Optional, Protocol

from app.errors import ClientDisconnectedError, DeadlineExceededError
from app.obs.logger import log_event


class Disconnectable(Protocol):
    async def is_disconnected(self) -> bool:
        ...


async def run_bound_to_request(
    request: Optional[Disconnectable],
    work: Awaitable[Any],
    deadline_seconds: Optional[float],
    poll_interval: float = 0.1,
) -> Any:
    """Run ``work`` in a child task tied to the inbound request's lifetime.

    The task (and whatever outbound call it is awaiting) is cancelled when the
    client disconnects or the deadline passes. Cancelling the caller cancels
    the task as well.
    """
    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(work)
    expires_at = loop.time() + deadline_seconds if deadline_seconds else None
    try:
        while True:
            timeout = poll_interval
            if expires_at is not None:
                timeout = min(timeout, max(expires_at - loop.time(), 0))
            done, _ = await asyncio.wait({task}, timeout=timeout)
            if done:
                return task.result()
            if expires_at is not None and loop.time() >= expires_at:
                log_event("request_deadline_exceeded", level="WARNING",
                          deadline_seconds=deadline_seconds)
                raise DeadlineExceededError()
            if request is not None and await request.is_disconnected():
                log_event("client_disconnected", level="WARNING")
                raise ClientDisconnectedError()
    finally:
        if not task.done():
            task.cancel()
            # let the task unwind (spans closed, sockets released)
            await asyncio.gather(task, return_exceptions=True)
