"""Error taxonomy surfaced at the HTTP boundary.

Each error knows its HTTP status and the generic `error` string clients see.
The optional `message` carries the detail (missing variables, upstream status).
"""

from typing import Any


class ProxyError(Exception):
    """Base class for errors rendered as `{"error": ..., "message": ...}`."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.error)
        self.message = message

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.error}
        if self.message:
            content["message"] = self.message
        return content


class ConfigurationError(ProxyError):
    """Required settings are missing."""

    error = "Server configuration error"


class UpstreamError(ProxyError):
    """Airtable answered with a non-success status."""

    error = "Failed to fetch data from Airtable"

    def __init__(self, status_code: int):
        super().__init__(f"Airtable API error: {status_code}")
        self.upstream_status = status_code


class Unauthorized(ProxyError):
    status_code = 401
    error = "Invalid or missing token"


class MethodNotAllowed(ProxyError):
    status_code = 405
    error = "Method not allowed"
