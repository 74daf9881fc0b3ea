"""Request context middleware for correlation ID tracking."""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.logging import client_slug_ctx, get_logger, request_id_ctx

logger = get_logger(__name__)

RequestResponseEndpoint = Callable[[Request], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to the logging context for each request.

    The X-Request-ID header is reused when the caller sends one, otherwise a
    UUID is generated. The ID is echoed back on the response and a
    ``request_completed`` event is logged with status and duration.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_token = request_id_ctx.set(request_id)
        slug_token = client_slug_ctx.set(None)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            request_id_ctx.reset(request_token)
            client_slug_ctx.reset(slug_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
