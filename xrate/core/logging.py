"""Structured JSON logging with per-request context.

Every record carries the request id, HTTP method and path of the request that
emitted it ("-" outside a request), so cache misses and provider failures can be
traced back to the ``/convert`` call that caused them.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, NamedTuple, Optional


class RequestContext(NamedTuple):
    request_id: str
    method: str
    path: str


request_ctx: ContextVar[Optional[RequestContext]] = ContextVar("request_ctx", default=None)

# Optional record attributes copied into the JSON document when present.
_EXTRA_FIELDS = ("status", "duration_ms")


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        ctx = request_ctx.get()
        record.request_id = ctx.request_id if ctx else "-"
        record.method = ctx.method if ctx else "-"
        record.path = ctx.path if ctx else "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        base: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "request_id": getattr(record, "request_id", "-"),
            "method": getattr(record, "method", "-"),
            "path": getattr(record, "path", "-"),
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                base[name] = getattr(record, name)
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


def init_logging(debug: bool = False) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    level = logging.DEBUG if debug else logging.INFO
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)


async def request_context_middleware(request, call_next):  # type: ignore
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    token = request_ctx.set(RequestContext(rid, request.method, request.url.path))
    logger = logging.getLogger("xrate.request")
    started = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        response.headers["X-Request-ID"] = rid
        return response
    finally:
        logger.info(
            "request handled",
            extra={
                "status": status,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        request_ctx.reset(token)
