# ============================================================================
# FILE: videotube/core/errors.py
# Single error type raised by handlers plus the boundary that renders it
# ============================================================================
from enum import Enum
from typing import Any, List, Optional
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"

    @classmethod
    def from_status(cls, status_code: int) -> "ErrorKind":
        if status_code == 401 or status_code == 403:
            return cls.UNAUTHORIZED
        if status_code == 404:
            return cls.NOT_FOUND
        if status_code == 409:
            return cls.CONFLICT
        if status_code >= 500:
            return cls.INTERNAL
        return cls.BAD_REQUEST


class ApiError(Exception):
    """
    Structured error raised anywhere in a request.
    The exception handler turns it into the error envelope.
    """

    def __init__(
        self,
        status_code: int,
        message: str = "Something went wrong",
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.from_status(self.status_code)

    def to_dict(self) -> dict:
        return {
            "statusCode": self.status_code,
            "data": None,
            "message": self.message,
            "success": False,
            "errorKind": self.kind.value,
            "errors": jsonable_encoder(self.errors),
        }


def error_response(error: ApiError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(ApiError(exc.status_code, str(exc.detail)))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        ApiError(status.HTTP_400_BAD_REQUEST, "Invalid request data", errors=exc.errors())
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error boundary on the application"""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
