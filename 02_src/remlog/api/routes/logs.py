"""Read-back routes over the trace store."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response

from ...app import IApplication
from ...config import APP_NAME, APP_VERSION
from ..views import render_index


def create_logs_router(app: IApplication) -> APIRouter:
    """Create logs router."""
    router = APIRouter(tags=["logs"])

    @router.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Render every recorded trace; an empty or missing store is fine."""
        logs = await app.reader.list_logs()
        return HTMLResponse(render_index(APP_NAME, APP_VERSION, logs))

    @router.get("/logs.json")
    async def list_logs() -> Response:
        return Response(await app.reader.list_logs_json(), media_type="application/json")

    @router.get("/logs/{trace_id}.json")
    async def get_log(trace_id: str) -> dict:
        record = await app.reader.get_log(trace_id)
        return record.to_document()

    return router
