"""Trace ingestion routes: JSON POST and tracking pixel."""

import json
from pathlib import Path
from typing import Any
from urllib.parse import unquote

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from ...app import IApplication
from ...errors import ValidationError
from ..responses import success_envelope

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
PIXEL_PATH = Path(__file__).resolve().parent.parent / "resources" / "tracer.jpg"


def _client(request: Request) -> dict[str, str | None]:
    return {
        "forwarded_for": request.headers.get("x-forwarded-for"),
        "remote_addr": request.client.host if request.client else None,
    }


def parse_pixel_query(query: str) -> Any:
    """Decode the URL-encoded JSON carried by a tracking pixel request."""
    if not query:
        raise ValidationError("Tracer query string is empty, expected URL-encoded JSON")

    try:
        return json.loads(unquote(query))
    except ValueError as e:
        raise ValidationError(f"Tracer query string is not valid JSON: {e}") from e


def create_tracing_router(app: IApplication) -> APIRouter:
    """Create tracing router."""
    router = APIRouter(tags=["tracing"])

    @router.get("/tracer.jpg")
    async def trace_pixel(request: Request) -> FileResponse:
        """Accept a beacon from an <img> request and answer with a 1x1 JPEG."""
        payload = parse_pixel_query(request.url.query)
        await app.tracer.trace(payload, **_client(request))

        return FileResponse(
            PIXEL_PATH,
            media_type="image/jpeg",
            headers={"Cache-Control": "no-store, max-age=0"},
        )

    @router.post("/trace")
    async def trace(request: Request) -> dict:
        """Accept a beacon posted as a JSON object or as form fields."""
        content_type = request.headers.get("content-type", "")
        if content_type.split(";")[0].strip().lower() == FORM_CONTENT_TYPE:
            payload = dict(await request.form())
        else:
            try:
                payload = await request.json()
            except ValueError as e:
                raise ValidationError(f"Request body is not valid JSON: {e}") from e

        record = await app.tracer.trace(payload, **_client(request))
        return success_envelope(record.id)

    return router
