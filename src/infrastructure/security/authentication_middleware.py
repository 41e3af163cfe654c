"""
Bearer token authentication middleware.

Runs once per request before routing. The resulting SecurityContext (or
None) is stored on ``request.state.security_context`` for downstream
handlers; the middleware itself never rejects a request.
"""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.application.request_authenticator import RequestAuthenticator

logger = logging.getLogger(__name__)

AuthenticatorFactory = Callable[[], RequestAuthenticator]


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Installs the per-request security context.

    The authenticator is built per request through ``authenticator_factory``.
    When the application defines a dependency override for that factory it
    is used instead, so tests wire fakes exactly as they do for routes.
    """

    def __init__(self, app: ASGIApp, authenticator_factory: AuthenticatorFactory):
        super().__init__(app)
        self.authenticator_factory = authenticator_factory

    def _resolve_authenticator(self, request: Request) -> RequestAuthenticator:
        overrides = getattr(request.app, "dependency_overrides", {}) or {}
        factory = overrides.get(self.authenticator_factory, self.authenticator_factory)
        return factory()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        existing = getattr(request.state, "security_context", None)

        authenticator = self._resolve_authenticator(request)
        context = await authenticator.authenticate(
            path=request.url.path,
            authorization=request.headers.get("Authorization"),
            existing=existing,
        )
        request.state.security_context = context

        if context is not None and existing is None:
            logger.debug(f"Authenticated {context.name} for {request.method} {request.url.path}")

        return await call_next(request)
