"""Schemas for the services endpoint."""

from typing import Any, Literal

from pydantic import BaseModel


class ServicesResponse(BaseModel):
    """Records from the services table and where they came from."""

    records: list[dict[str, Any]]
    source: Literal["cache", "airtable"]
