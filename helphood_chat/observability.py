from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

LOGGER_NAME = "helphood_chat"


class RequestIdFilter(logging.Filter):
    """Give every record a request_id so the JSON format never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def setup_json_logging(logger_name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    One JSON object per line:

      {"ts":"...","level":"...","logger":"...","msg":"...","request_id":"..."}

    Child loggers (helphood_chat.chat, helphood_chat.gemini, ...) propagate here.
    Calling it again is a no-op.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    fmt = logging.Formatter(
        '{"ts":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s",'
        '"msg":"%(message)s","request_id":"%(request_id)s"}'
    )
    handler.setFormatter(fmt)
    handler.addFilter(RequestIdFilter())

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Propagate/assign X-Request-ID and write one access line per request.
    Chat answers also log which path served them (X-Chat-Source).
    """

    def __init__(self, app, logger: logging.Logger):
        super().__init__(app)
        self.log = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        client = request.client.host if request.client else "-"
        start = time.time()
        try:
            response = await call_next(request)
        except Exception:
            self.log.exception(
                'unhandled_exception method="%s" path="%s" duration_ms=%d client="%s"',
                request.method,
                request.url.path,
                int((time.time() - start) * 1000),
                client,
                extra={"request_id": rid},
            )
            raise

        response.headers["X-Request-ID"] = rid
        self.log.info(
            'access method="%s" path="%s" status=%d source="%s" duration_ms=%d client="%s"',
            request.method,
            request.url.path,
            response.status_code,
            response.headers.get("X-Chat-Source", "-"),
            int((time.time() - start) * 1000),
            client,
            extra={"request_id": rid},
        )
        return response
