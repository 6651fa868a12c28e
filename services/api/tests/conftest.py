"""Shared fixtures: in-memory Redis, fake Airtable, settings."""

from typing import Any

import httpx
import pytest

from tableproxy.settings import Settings
from tableproxy.stores import redis as redis_store

ENV_VARS = (
    "AIRTABLE_BASE_ID",
    "AIRTABLE_TABLE_NAME",
    "AIRTABLE_PAT",
    "AIRTABLE_TOKEN",
    "AIRTABLE_API_URL",
    "CACHE_REFRESH_TOKEN",
)


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the store, recording writes."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.setex_calls: list[tuple[str, int, str]] = []
        self.get_calls: list[str] = []
        self.deleted: list[str] = []

    async def get(self, key: str) -> str | None:
        self.get_calls.append(key)
        return self.data.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.setex_calls.append((key, ttl, value))
        self.data[key] = value

    async def delete(self, key: str) -> int:
        self.deleted.append(key)
        return 1 if self.data.pop(key, None) is not None else 0

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


class FakeAirtable:
    """Serves `pages` through an httpx.MockTransport using itrN offsets."""

    def __init__(
        self,
        pages: list[list[dict[str, Any]]],
        fail_on_page: int | None = None,
        fail_status: int = 500,
    ) -> None:
        self.pages = pages
        self.fail_on_page = fail_on_page
        self.fail_status = fail_status
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        offset = request.url.params.get("offset")
        index = int(offset.removeprefix("itr")) if offset else 0

        if self.fail_on_page == index:
            return httpx.Response(self.fail_status, json={"error": {"type": "SERVER_ERROR"}})

        body: dict[str, Any] = {"records": self.pages[index]}
        if index + 1 < len(self.pages):
            body["offset"] = f"itr{index + 1}"
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_records(count: int, start: int = 0) -> list[dict[str, Any]]:
    return [
        {
            "id": f"rec{i:04d}",
            "createdTime": "2024-01-01T00:00:00.000Z",
            "fields": {"Name": f"Service {i}", "Status": "Operational"},
        }
        for i in range(start, start + count)
    ]


def build_settings(**overrides: str) -> Settings:
    values = {
        "AIRTABLE_BASE_ID": "appBase123",
        "AIRTABLE_TABLE_NAME": "Service Status",
        "AIRTABLE_PAT": "patSecret",
        "CACHE_REFRESH_TOKEN": "refresh-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(redis_store, "_redis", fake)
    return fake


@pytest.fixture
def settings() -> Settings:
    return build_settings()
