"""FastAPI application setup."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..app import Application
from ..config import APP_NAME, APP_VERSION
from ..errors import NotFoundError, RemlogError
from ..logging_config import get_logger
from .middleware import (
    OriginGuardMiddleware,
    RemlogHeadersMiddleware,
    SecurityHeadersMiddleware,
    SelectiveGZipMiddleware,
)
from .responses import error_response
from .routes import info, logs, tracing

logger = get_logger(__name__)

RESOURCES_DIR = Path(__file__).resolve().parent / "resources"


def _register_error_handlers(fastapi_app: FastAPI) -> None:
    @fastapi_app.exception_handler(RemlogError)
    async def handle_remlog_error(request: Request, exc: RemlogError):
        if isinstance(exc, NotFoundError):
            logger.info("%s %s: %s", request.method, request.url.path, exc)
        else:
            logger.error("%s %s: %s", request.method, request.url.path, exc)
        return error_response(str(exc), exc.status_code)

    @fastapi_app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        logger.info("%s %s: %s", request.method, request.url.path, exc.detail)
        return error_response(str(exc.detail), exc.status_code)


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or Application()
    config = application.config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title=APP_NAME,
        description="Trace beacon collector",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    fastapi_app.state.application = application

    # Added innermost first; requests pass them in reverse order
    fastapi_app.add_middleware(SelectiveGZipMiddleware)
    if config.cors_unrestricted:
        fastapi_app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        fastapi_app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        fastapi_app.add_middleware(OriginGuardMiddleware, allowed_origins=config.cors)
    fastapi_app.add_middleware(SecurityHeadersMiddleware, hsts=config.ssl is not None)
    fastapi_app.add_middleware(RemlogHeadersMiddleware)

    _register_error_handlers(fastapi_app)

    fastapi_app.mount("/.resources", StaticFiles(directory=RESOURCES_DIR), name="resources")
    fastapi_app.include_router(info.create_info_router())
    fastapi_app.include_router(logs.create_logs_router(application))
    fastapi_app.include_router(tracing.create_tracing_router(application))

    return fastapi_app
