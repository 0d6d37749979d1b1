"""Application configuration using pydantic-settings."""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PRICE_PAID_",
        extra="ignore",
    )

    # Search index
    search_service_url: str = Field(
        default="",
        description="Search service endpoint (e.g. https://my-search.search.windows.net)",
    )
    search_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Query key for the search service",
    )
    search_index: str = Field(default="properties")
    search_api_version: str = Field(default="2020-06-30")

    # Geocoding store
    geocode_backend: Literal["table", "sqlite"] = Field(
        default="table",
        description="Where postcode coordinates are read from",
    )
    table_account_url: str = Field(
        default="",
        description="Table service endpoint (e.g. https://acct.table.core.windows.net)",
    )
    table_name: str = Field(default="postcodes")
    table_sas_token: SecretStr = Field(
        default=SecretStr(""),
        description="Shared access signature for the postcode table",
    )
    geocode_database_path: str = Field(
        default="data/postcodes.db",
        description="SQLite database used when geocode_backend is 'sqlite'",
    )

    # Requests
    request_timeout_seconds: float = Field(
        default=10.0,
        ge=1,
        le=120,
        description="Timeout for each backend call and for a whole web request",
    )
    default_distance_km: int = Field(default=1, ge=0)

    # Web server
    web_port: int = Field(default=8000, description="Web server port")
    web_host: str = Field(default="0.0.0.0", description="Web server host")

    def check_backends(self) -> list[str]:
        """Return the names of settings required by the chosen backends that are unset."""
        missing = []
        if not self.search_service_url:
            missing.append("search_service_url")
        if self.geocode_backend == "table" and not self.table_account_url:
            missing.append("table_account_url")
        return missing
