"""
Observability middleware.

Records request counts, status codes and latency per endpoint, and counts
authentication events: registrations, activations, logins, and whether each
request carried an authenticated security context. Every request is also
logged as a structured line.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .redis_metrics_storage import RedisMetricsStorage, get_metrics_storage

logger = logging.getLogger(__name__)

# (method, path, success status) -> auth event name
AUTH_EVENT_ROUTES = {
    ("POST", "/auth/register", 202): "registrations",
    ("GET", "/auth/activate-account", 200): "activations",
    ("POST", "/auth/authenticate", 200): "authentications",
}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Tracks HTTP and authentication metrics in Redis."""

    def __init__(
        self,
        app: ASGIApp,
        storage_factory: Callable[[], RedisMetricsStorage] = get_metrics_storage,
    ):
        super().__init__(app)
        self.storage_factory = storage_factory

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.error(
                "Request failed with exception",
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            authenticated = getattr(request.state, "security_context", None) is not None
            await self._record(method, path, status_code, duration_ms, authenticated)
            self._log_request(method, path, status_code, duration_ms, authenticated)

        return response

    async def _record(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        authenticated: bool,
    ) -> None:
        storage = self.storage_factory()
        endpoint = f"{method} {path}"

        await storage.add_latency(endpoint, duration_ms)
        await storage.increment_request_count(endpoint)
        await storage.increment_status_count(status_code)
        await storage.increment_auth_event(
            "authenticated_requests" if authenticated else "anonymous_requests"
        )

        event = AUTH_EVENT_ROUTES.get((method, path, status_code))
        if event:
            await storage.increment_auth_event(event)

    @staticmethod
    def _log_request(
        method: str, path: str, status_code: int, duration_ms: float, authenticated: bool
    ) -> None:
        log_data = {
            "type": "request_metric",
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
            "authenticated": authenticated,
        }

        if status_code >= 500:
            logger.error("Request completed with server error", extra=log_data)
        elif status_code >= 400:
            logger.warning("Request completed with client error", extra=log_data)
        else:
            logger.info("Request completed successfully", extra=log_data)
