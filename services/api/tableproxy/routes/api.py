"""Public API endpoints.

GET /api/get-services           - Services records (cache-aside over Airtable)
GET /api/refresh-cache?token=.. - Clear the services cache (shared secret)

Routers are thin: call services for business logic.
"""

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import HTMLResponse, JSONResponse

from tableproxy.errors import MethodNotAllowed, ProxyError
from tableproxy.schemas import ErrorResponse, ServicesResponse
from tableproxy.services.cache_refresh import refresh_cache
from tableproxy.services.records import get_services
from tableproxy.settings import Settings, get_settings

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

# The services endpoint is called directly from the public frontend.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SERVICES_PATH = "/api/get-services"
REFRESH_PATH = "/api/refresh-cache"

# Allow header for 405 responses, by full request path.
ALLOWED_METHODS = {
    SERVICES_PATH: "GET, OPTIONS",
    REFRESH_PATH: "GET",
}

REFRESHED_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <title>Cache Refreshed</title>
    <style>
      body { font-family: system-ui, sans-serif; max-width: 500px; margin: 100px auto; text-align: center; }
      .success { color: #22c55e; font-size: 48px; }
      p { color: #666; }
    </style>
  </head>
  <body>
    <div class="success">&#10003;</div>
    <h1>Cache Cleared</h1>
    <p>The service status page will show fresh data on the next visit.</p>
  </body>
</html>
"""


def get_airtable_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for the Airtable client; None means the default network transport."""
    return None


def _error_response(
    status_code: int,
    content: dict[str, Any],
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _proxy_error_response(exc: ProxyError, headers: dict[str, str] | None = None) -> JSONResponse:
    return _error_response(exc.status_code, exc.to_content(), headers)


def method_not_allowed_response(path: str, headers: dict[str, str] | None = None) -> JSONResponse:
    """405 in the `{"error": ...}` format, with CORS headers on the services path.

    Used by the app-level handler for every method the routes do not accept.
    """
    response_headers = dict(headers or {})
    if path in ALLOWED_METHODS:
        response_headers["Allow"] = ALLOWED_METHODS[path]
    if path == SERVICES_PATH:
        response_headers.update(CORS_HEADERS)
    return _proxy_error_response(MethodNotAllowed(), response_headers)


# ============================================================
# Services
# ============================================================


@router.get(
    "/get-services",
    response_model=ServicesResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_services_endpoint(
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_airtable_transport),
) -> JSONResponse:
    """Get all services records.

    Served from Redis when cached, otherwise fetched from Airtable and cached for 1 hour.

    Returns:
        `{records, source}` where source is "cache" or "airtable".
    """
    try:
        result = await get_services(settings, transport=transport)
        payload = ServicesResponse(records=result.records, source=result.source)
    except ProxyError as e:
        logger.error(f"Error fetching services: {e}")
        return _proxy_error_response(e, CORS_HEADERS)
    except Exception as e:
        logger.exception("Error fetching from Airtable")
        return _error_response(
            500,
            {"error": "Failed to fetch data from Airtable", "message": str(e)},
            CORS_HEADERS,
        )

    return JSONResponse(content=payload.model_dump(), headers=CORS_HEADERS)


@router.options("/get-services", include_in_schema=False)
async def get_services_preflight() -> Response:
    """CORS preflight. Does not depend on configuration."""
    return Response(status_code=200, headers=CORS_HEADERS)


# ============================================================
# Cache refresh
# ============================================================


@router.get(
    "/refresh-cache",
    response_class=HTMLResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def refresh_cache_endpoint(
    token: str | None = Query(default=None, description="Shared secret (CACHE_REFRESH_TOKEN)"),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Clear the services cache.

    Meant to be opened in a browser by non-technical users, so success is an HTML page.
    """
    try:
        await refresh_cache(settings, token)
    except ProxyError as e:
        return _proxy_error_response(e)
    except Exception as e:
        logger.exception("Error clearing cache")
        return _error_response(500, {"error": "Failed to clear cache", "message": str(e)})

    return HTMLResponse(content=REFRESHED_PAGE, status_code=200)

