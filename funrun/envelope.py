# error taxonomy + envelope responses
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .models import Envelope, ErrorDetail

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
UNAUTHORIZED = "UNAUTHORIZED"
INVALID_TOKEN_FORMAT = "INVALID_TOKEN_FORMAT"
TOKEN_EXPIRED = "TOKEN_EXPIRED"
INVALID_STATUS = "INVALID_STATUS"
PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
INTERNAL_ERROR = "INTERNAL_ERROR"
# client-side only
NETWORK_ERROR = "NETWORK_ERROR"
REQUEST_ERROR = "REQUEST_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"


class APIError(Exception):
    """
    Structured API failure. Raised by route handlers (rendered into the
    error envelope) and by the client (carrying the decoded envelope).
    status is 0 when no response was received.
    """

    def __init__(self, status: int, code: str, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.details = details

    @property
    def session_expired(self) -> bool:
        return self.status in (401, 403)

    def __repr__(self) -> str:
        return f"APIError(status={self.status}, code={self.code!r}, message={self.message!r})"


def success_response(status_code: int, data: Any = None, message: str = "") -> JSONResponse:
    env = Envelope(success=True, message=message or None, data=data)
    return JSONResponse(status_code=status_code, content=env.to_json())


def error_response(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    env = Envelope(success=False, error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=env.to_json())


async def _api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return error_response(exc.status, exc.code, exc.message, exc.details)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, VALIDATION_ERROR, "Invalid request data")


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = UNAUTHORIZED if exc.status_code == 401 else REQUEST_ERROR
    return error_response(exc.status_code, code, str(exc.detail))


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, INTERNAL_ERROR, "An unexpected error occurred")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
