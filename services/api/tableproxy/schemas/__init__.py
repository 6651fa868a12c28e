"""Pydantic schemas for API responses."""

from tableproxy.schemas.common import ErrorResponse
from tableproxy.schemas.services import ServicesResponse

__all__ = [
    "ErrorResponse",
    "ServicesResponse",
]
