"""Server info route."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ...config import APP_NAME, APP_VERSION


def create_info_router() -> APIRouter:
    """Create info router."""
    router = APIRouter(tags=["info"])

    @router.get("/info", response_class=PlainTextResponse)
    async def info() -> str:
        return f"{APP_NAME} v{APP_VERSION}"

    return router
