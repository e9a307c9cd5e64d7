from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from findoc.core.config import settings
from findoc.core.exceptions import (
    ExtractionError, FinDocError, NetworkError, UnsupportedFormatError,
)
from findoc.utils import get_logger

logger = get_logger("findoc.error_handler")

# Most specific first
ERROR_STATUS_CODES = [
    (UnsupportedFormatError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
    (ExtractionError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NetworkError, status.HTTP_502_BAD_GATEWAY),
]


def status_code_for(error: FinDocError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def findoc_error_handler(request: Request, exc: FinDocError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FinDocError, findoc_error_handler)


class ErrorMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.exception("Unhandled exception occurred")
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "detail": str(e) if settings.DEBUG else "An unexpected error occurred"
                }
            )
