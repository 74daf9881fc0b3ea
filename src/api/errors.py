"""Exception handlers rendering every error as ``{"error": message}``."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.clients.errors import ClientServiceError
from src.core.logging import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def client_service_error_handler(
    request: Request, exc: ClientServiceError
) -> JSONResponse:
    """Map client operation failures to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(
            "client_request_failed",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unbindable requests as 400 rather than FastAPI's 422."""
    messages = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages))


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""
    app.add_exception_handler(ClientServiceError, client_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
