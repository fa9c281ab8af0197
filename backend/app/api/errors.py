import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.middleware import CORS_HEADERS
from app.schemas import ErrorResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error rendered as ``{"success": false, "error": message}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingFileError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self) -> None:
        super().__init__("No file was provided")


class FileTooLargeError(ApiError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE

    def __init__(self, limit: int) -> None:
        super().__init__(f"File exceeds the maximum upload size of {limit} bytes")


class MissingKeyError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self) -> None:
        super().__init__("Not Found")


class BackendError(ApiError):
    """Object store failure; the message is the backend's own."""


def error_response(
    message: str, status_code: int, headers: dict[str, str] | None = None
) -> JSONResponse:
    body = ErrorResponse(error=message or "Unknown error")
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.message, exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(str(exc.detail), exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    ]
    return error_response("; ".join(messages), status.HTTP_400_BAD_REQUEST)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # Sent by the outermost error middleware, outside CORSHeadersMiddleware
    return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR, headers=CORS_HEADERS)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
