"""Airtable client for the services table.

Paging rules:
- Airtable returns at most one page of records per request
- A response carrying `offset` means more pages remain; the cursor is passed
  back verbatim as the `offset` query parameter
- The last page has no `offset`

Failure rules:
- Any non-2xx page aborts the whole fetch with UpstreamError
- No retries, no partial results

Records are passed through verbatim; their fields are never inspected.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from tableproxy.errors import ConfigurationError, UpstreamError
from tableproxy.settings import Settings

logger = logging.getLogger("uvicorn.error")


@dataclass
class AirtablePage:
    """One page of a list-records response."""

    records: list[dict[str, Any]] = field(default_factory=list)
    offset: str | None = None


class AirtableClient:
    """Client for the Airtable list-records endpoint of a single table."""

    DEFAULT_API_URL = "https://api.airtable.com/v0"
    TIMEOUT = 30.0

    def __init__(
        self,
        base_id: str,
        table_name: str,
        access_token: str,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_id = base_id
        self.table_name = table_name
        self.api_url = api_url.rstrip("/")
        self._access_token = access_token
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "AirtableClient":
        """Build a client from settings.

        Raises:
            ConfigurationError: If base id, table name or token is missing.
        """
        missing = settings.missing_airtable_settings()
        if missing:
            logger.error(f"Airtable settings missing: {', '.join(missing)}")
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}"
            )
        return cls(
            base_id=settings.airtable_base_id,
            table_name=settings.airtable_table_name,
            access_token=settings.airtable_pat,
            api_url=settings.airtable_api_url,
            transport=transport,
        )

    @property
    def table_url(self) -> str:
        """List-records URL; the table name is percent-encoded as one path segment."""
        return f"{self.api_url}/{self.base_id}/{quote(self.table_name, safe='')}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.TIMEOUT,
                transport=self._transport,
                headers={"Authorization": f"Bearer {self._access_token}"},
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "AirtableClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def iter_pages(self) -> AsyncIterator[AirtablePage]:
        """Yield pages in upstream order until no cursor is returned.

        Each call starts again from the first page.

        Raises:
            UpstreamError: If any page request returns a non-success status.
        """
        client = await self._get_client()
        offset: str | None = None
        page_number = 0

        while True:
            params = {"offset": offset} if offset else None
            response = await client.get(self.table_url, params=params)

            if not response.is_success:
                logger.error(
                    f"Airtable API error: {response.status_code} on page {page_number + 1} "
                    f"- {response.text[:200]}"
                )
                raise UpstreamError(response.status_code)

            page = _parse_page(response.json())
            page_number += 1
            yield page

            if not page.offset:
                return
            offset = page.offset

    async def fetch_all_records(self) -> list[dict[str, Any]]:
        """Fetch every record of the table, concatenated in page order."""
        records: list[dict[str, Any]] = []
        pages = 0
        async for page in self.iter_pages():
            records.extend(page.records)
            pages += 1
        logger.info(f"Fetched {len(records)} Airtable records across {pages} page(s)")
        return records


def _parse_page(data: Any) -> AirtablePage:
    if not isinstance(data, dict):
        return AirtablePage()

    records = data.get("records")
    offset = data.get("offset")
    return AirtablePage(
        records=list(records) if isinstance(records, list) else [],
        offset=str(offset) if offset else None,
    )
