"""
Application error taxonomy and the handlers that turn it into HTTP responses.

Every error body has the shape ``{"message": ..., "error"?: ..., "field"?: ...}``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_body(self) -> dict:
        body = {"message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(AppError):
    """Malformed or logically inconsistent input, raised before any write"""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """A natural key already exists; the route resolver recovers from it"""
    status_code = status.HTTP_409_CONFLICT


class StorageError(AppError):
    """Database failure; the client only sees a generic message"""

    def __init__(self, operation: str, message: str = "A storage error occurred"):
        super().__init__(message)
        self.operation = operation

    def to_body(self) -> dict:
        return {"message": self.message, "error": f"{self.operation} failed"}


def _app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def _http_exception_handler(request: Request, exc: HTTPException):
    body = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


def _request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    content = {
        "message": first.get("msg", "Invalid request"),
        "error": "validation_error",
    }
    if field:
        content["field"] = field
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


def _unhandled_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
