from __future__ import annotations

import json
import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from busbooking.config import settings

_rid_ctx: ContextVar[str] = ContextVar("request_id", default="")

SENSITIVE_KEYS = {"password", "token", "access_token", "secret", "authorization", "cookie"}

# attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def get_request_id() -> str:
    return _rid_ctx.get()


def redact(data: dict) -> dict:
    return {
        key: "***" if key.lower() in SENSITIVE_KEYS else value
        for key, value in data.items()
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "request_id": get_request_id(),
        }
        extra = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        if extra:
            data.update(redact(extra))
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str, ensure_ascii=False)


def setup_logging(level: str | None = None):
    lvl = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(lvl)


class RequestIDMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get(self.header_name) or uuid.uuid4().hex
        _rid_ctx.set(rid)
        response: Response = await call_next(request)
        response.headers.setdefault(self.header_name, rid)
        return response
