"""Manual cache invalidation guarded by a shared secret."""

import hmac
import logging

from tableproxy.errors import ConfigurationError, Unauthorized
from tableproxy.settings import Settings
from tableproxy.stores.redis import delete_services_cache

logger = logging.getLogger("uvicorn.error")


def verify_refresh_token(settings: Settings, token: str | None) -> None:
    """Check `token` against CACHE_REFRESH_TOKEN.

    Raises:
        ConfigurationError: If CACHE_REFRESH_TOKEN is not set.
        Unauthorized: If the token is missing or does not match exactly.
    """
    expected = settings.cache_refresh_token
    if not expected:
        logger.error("CACHE_REFRESH_TOKEN is not set - cannot refresh cache")
        raise ConfigurationError("CACHE_REFRESH_TOKEN not set.")

    if token is None or not hmac.compare_digest(token.encode(), expected.encode()):
        logger.warning("Cache refresh rejected: invalid or missing token")
        raise Unauthorized()


async def refresh_cache(settings: Settings, token: str | None) -> None:
    """Delete the services cache entry if `token` is valid. Missing entries are a no-op."""
    verify_refresh_token(settings, token)
    await delete_services_cache()
    logger.info("Services cache cleared")
