"""HTTP middleware: RemLog headers, security headers, CORS guard, compression."""

from typing import Any, Awaitable, Callable, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.types import ASGIApp

from ..config import APP_VERSION
from ..errors import OriginNotAllowedError
from ..logging_config import get_logger
from .responses import error_response

logger = get_logger(__name__)

CLIENT_HEADER = "X-RemLog-Client"
SERVER_VERSION_HEADER = "X-RemLog-Server-Version"
NO_COMPRESSION_HEADER = b"x-no-compression"


class RemlogHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp every response with the caller IP and the server version.

    Also the last-resort request boundary: anything the exception handlers
    did not render becomes a 500 envelope here.
    """

    async def dispatch(self, request, call_next: Callable):
        try:
            resp = await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error processing %s %s", request.method, request.url.path)
            resp = error_response(str(exc) or "Unknown error", 500)
        resp.headers[CLIENT_HEADER] = request.client.host if request.client else ""
        resp.headers[SERVER_VERSION_HEADER] = APP_VERSION
        return resp


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, hsts: bool = False):
        super().__init__(app)
        self._hsts = hsts

    async def dispatch(self, request, call_next: Callable):
        resp = await call_next(request)
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        resp.headers.setdefault("X-DNS-Prefetch-Control", "off")
        resp.headers.setdefault("X-Download-Options", "noopen")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._hsts:
            resp.headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")
        return resp


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Reject cross-origin requests whose Origin is not on the allow-list.

    Requests without an Origin header are not CORS requests and pass.
    """

    def __init__(self, app: ASGIApp, allowed_origins: list[str]):
        super().__init__(app)
        self._allowed = set(allowed_origins)

    async def dispatch(self, request, call_next: Callable):
        origin = request.headers.get("origin")
        if origin is not None and origin not in self._allowed:
            exc = OriginNotAllowedError(origin)
            logger.warning("%s (%s %s)", exc, request.method, request.url.path)
            return error_response(str(exc), exc.status_code)
        return await call_next(request)


class SelectiveGZipMiddleware:
    """Gzip responses unless the request carries an X-No-Compression header."""

    def __init__(self, app: ASGIApp, minimum_size: int = 500):
        self.app = app
        self.gzip = GZipMiddleware(app, minimum_size=minimum_size)

    async def __call__(
        self,
        scope: Dict[str, Any],
        receive: Callable[..., Awaitable[Dict[str, Any]]],
        send: Callable[..., Awaitable[None]],
    ) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        if NO_COMPRESSION_HEADER in headers:
            await self.app(scope, receive, send)
            return

        await self.gzip(scope, receive, send)
