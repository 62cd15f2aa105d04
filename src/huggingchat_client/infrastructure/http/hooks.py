"""httpx event hooks: request id propagation and request timing."""
from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

import httpx

logger = logging.getLogger(__name__)

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

HEADER = "X-Request-ID"


async def attach_request_id(request: httpx.Request) -> None:
    if HEADER not in request.headers:
        request.headers[HEADER] = request_id_ctx.get() or uuid.uuid4().hex
    request.extensions["started_at"] = time.perf_counter()


async def log_response(response: httpx.Response) -> None:
    request = response.request
    started = request.extensions.get("started_at")
    elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
    logger.debug(
        "%s %s %s %.1fms rid=%s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        request.headers.get(HEADER, ""),
    )


EVENT_HOOKS = {
    "request": [attach_request_id],
    "response": [log_response],
}
