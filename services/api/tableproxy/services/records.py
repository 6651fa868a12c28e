"""Cache-aside reader for the services records.

Flow:
1. Cache HIT -> return cached records, Airtable is not contacted
2. Cache MISS -> fetch every page from Airtable, cache for 1 hour, return

Concurrent misses are not coordinated: each may fetch and write, last write wins.
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal

import httpx

from tableproxy.services.airtable_client import AirtableClient
from tableproxy.settings import Settings
from tableproxy.stores.redis import get_services_cache, set_services_cache

logger = logging.getLogger("uvicorn.error")

Source = Literal["cache", "airtable"]


@dataclass
class ServicesResult:
    records: list[dict[str, Any]]
    source: Source


async def get_services(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ServicesResult:
    """Return services records from cache, falling back to Airtable.

    Args:
        settings: Application settings (Airtable credentials).
        transport: Optional httpx transport for the Airtable client.

    Raises:
        ConfigurationError: If Airtable settings are missing.
        UpstreamError: If Airtable returns a non-success status.
    """
    # Build the client first so missing configuration fails before touching Redis.
    client = AirtableClient.from_settings(settings, transport=transport)

    cached = await get_services_cache()
    if cached is not None:
        logger.info(f"Services cache HIT ({len(cached)} records)")
        await client.close()
        return ServicesResult(records=cached, source="cache")

    logger.info("Services cache MISS, fetching from Airtable")
    async with client:
        records = await client.fetch_all_records()

    await set_services_cache(records)
    logger.info(f"Cached {len(records)} services records")
    return ServicesResult(records=records, source="airtable")
