"""Request logging middleware for structured logging."""

import logging
import time
from typing import Any, Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _request_context(request: Request, request_id: str) -> dict[str, Any]:
    return {
        "request_id": request_id,
        "endpoint": request.url.path,
        "method": request.method,
        "client_ip": request.client.host if request.client else "unknown",
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each inbound request once on arrival and once on completion.

    A caller-supplied ``X-Request-ID`` is reused, otherwise one is generated;
    either way it is echoed on the response and stored on ``request.state``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        context = _request_context(request, request_id)

        logger.info(
            f"{context['method']} {context['endpoint']}",
            extra={**context, "user_agent": request.headers.get("user-agent", "unknown")},
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{context['method']} {context['endpoint']} ERROR: {e}",
                extra={**context, "status_code": 500, "error": str(e),
                       "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
                exc_info=True,
            )
            raise

        logger.log(
            logging.INFO if response.status_code < 400 else logging.WARNING,
            f"{context['method']} {context['endpoint']} {response.status_code}",
            extra={**context, "status_code": response.status_code,
                   "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
