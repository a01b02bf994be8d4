"""Error taxonomy shared by the collector components."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TraceFailure


class RemlogError(Exception):
    """Base class for errors rendered as the JSON error envelope."""

    status_code = 500


class ValidationError(RemlogError):
    """A trace payload could not be normalized."""

    def __init__(self, message: str, failure: "TraceFailure | None" = None):
        super().__init__(message)
        self.failure = failure


class NotFoundError(RemlogError):
    """A requested trace id is not in the store."""

    status_code = 404

    def __init__(self, trace_id: str):
        super().__init__(f"Logfile with ID {trace_id} was not found")
        self.trace_id = trace_id


class StoreUnavailableError(RemlogError):
    """The backing lock file cannot be read or written."""


class ConfigurationError(RemlogError):
    """Bootstrap settings are invalid, or a request falls outside the configured policy."""


class OriginNotAllowedError(ConfigurationError):
    """A cross-origin request came from an Origin outside the allow-list."""

    status_code = 403

    def __init__(self, origin: str):
        super().__init__(f"Origin {origin} not allowed by CORS policy")
        self.origin = origin
