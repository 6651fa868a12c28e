"""Application settings via Pydantic Settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Table Proxy"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Redis (cache store)
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "KV_URL"),
    )

    # Airtable (upstream)
    airtable_base_id: str = Field(
        default="",
        validation_alias=AliasChoices("AIRTABLE_BASE_ID"),
    )
    airtable_table_name: str = Field(
        default="",
        validation_alias=AliasChoices("AIRTABLE_TABLE_NAME"),
    )
    airtable_pat: str = Field(
        default="",
        validation_alias=AliasChoices("AIRTABLE_PAT", "AIRTABLE_TOKEN"),
        repr=False,
    )
    airtable_api_url: str = Field(
        default="https://api.airtable.com/v0",
        validation_alias=AliasChoices("AIRTABLE_API_URL"),
    )

    # Manual cache refresh
    cache_refresh_token: str = Field(
        default="",
        validation_alias=AliasChoices("CACHE_REFRESH_TOKEN"),
        repr=False,
    )

    @field_validator("airtable_api_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    def missing_airtable_settings(self) -> list[str]:
        """Return env var names of upstream settings that are not set."""
        required = {
            "AIRTABLE_BASE_ID": self.airtable_base_id,
            "AIRTABLE_TABLE_NAME": self.airtable_table_name,
            "AIRTABLE_PAT": self.airtable_pat,
        }
        return [name for name, value in required.items() if not value.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
