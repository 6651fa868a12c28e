#!/usr/bin/env python3
"""Re-populate (or clear) the services cache.

Useful from a cron job or a deploy hook so the first visitor after a deploy
does not pay for the Airtable fetch.

Run (local / cron):
  cd services/api
  python -m scripts.warm_cache
  python -m scripts.warm_cache --clear-only

Exit code is 1 on configuration or Airtable errors.
"""

import argparse
import asyncio
import json
import sys
from typing import Any

import httpx

from tableproxy.errors import ProxyError
from tableproxy.services.airtable_client import AirtableClient
from tableproxy.settings import Settings, get_settings
from tableproxy.stores.redis import (
    close_redis,
    delete_services_cache,
    init_redis,
    set_services_cache,
    TTL_SERVICES_CACHE,
)


async def warm(
    settings: Settings,
    *,
    clear_only: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Refill the cache entry from Airtable, or only drop it with `clear_only`.

    The existing entry is replaced only after a full fetch succeeds, so a
    configuration or Airtable error leaves it in place. Redis must already be
    initialized.
    """
    if clear_only:
        await delete_services_cache()
        return {"cleared": True, "records": None, "ttl": None}

    async with AirtableClient.from_settings(settings, transport=transport) as client:
        records = await client.fetch_all_records()

    # SETEX replaces the previous value in one step.
    await set_services_cache(records)
    return {"cleared": False, "records": len(records), "ttl": TTL_SERVICES_CACHE}


async def _main(clear_only: bool) -> int:
    settings = get_settings()
    await init_redis(settings.redis_url)
    try:
        summary = await warm(settings, clear_only=clear_only)
    except ProxyError as e:
        print(json.dumps({"ok": False, **e.to_content()}), file=sys.stderr)
        return 1
    finally:
        await close_redis()

    print(json.dumps({"ok": True, **summary}))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Re-populate the services cache from Airtable")
    parser.add_argument(
        "--clear-only",
        action="store_true",
        help="Only delete the cache entry; the next request repopulates it",
    )
    args = parser.parse_args(argv)
    return asyncio.run(_main(args.clear_only))


if __name__ == "__main__":
    raise SystemExit(main())
