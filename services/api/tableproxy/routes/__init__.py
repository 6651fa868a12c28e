"""API routes."""

from fastapi import APIRouter

from tableproxy.routes import api

api_router = APIRouter()

# Public endpoints (services records, cache refresh)
api_router.include_router(api.router, prefix="/api", tags=["api"])
