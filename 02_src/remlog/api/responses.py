"""Uniform JSON envelopes returned by the collector."""

from typing import Any

from fastapi.responses import JSONResponse

from ..models import utc_now_iso


def success_envelope(trace_id: str) -> dict[str, Any]:
    return {
        "timestamp": utc_now_iso(),
        "error": None,
        "id": trace_id,
        "httpStatus": 200,
    }


def error_envelope(message: str, status_code: int = 500) -> dict[str, Any]:
    return {
        "timestamp": utc_now_iso(),
        "error": message,
        "httpStatus": status_code,
    }


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(error_envelope(message, status_code), status_code=status_code)
