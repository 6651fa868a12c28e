"""Common schemas used across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": str, "message": str }
    `message` is omitted when there is no detail.
    """

    error: str
    message: str | None = None
