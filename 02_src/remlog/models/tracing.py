"""Trace beacon data models."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TraceLevel = Literal["debug", "log", "info", "warn", "error", "success"]


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string, accepting the JavaScript style Z suffix."""
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class TraceRecord(BaseModel):
    """Canonical trace beacon; unknown keys are kept as opaque metadata."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, min_length=1)
    host: str
    timestamp: str
    level: TraceLevel | None = None
    message: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_null_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("id") is None:
            data = {key: value for key, value in data.items() if key != "id"}
        return data

    @field_validator("timestamp")
    @classmethod
    def check_timestamp(cls, value: str) -> str:
        try:
            parse_iso(value)
        except ValueError:
            raise ValueError(f"timestamp {value!r} is not ISO-8601") from None
        return value

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict including passthrough metadata."""
        document = self.model_dump(mode="json")
        for key in ("level", "message"):
            if document.get(key) is None:
                document.pop(key, None)
        return document


@dataclass
class TraceFailure:
    """Structured normalization failure."""

    error: str
    id: None = None
