"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./db/database.sqlite",
        description="SQLAlchemy async connection string; the store is recreated on every startup",
    )

    # Source data
    results_csv_path: str = Field(
        default="./data/DFWResult(1).csv",
        description="CSV of per-precinct election results",
    )
    precincts_geojson_path: str = Field(
        default="./data/GDF.geojson",
        description="GeoJSON FeatureCollection of precinct boundaries",
    )
    results_party_column: str = Field(
        default="party_simplified",
        description="Results CSV column holding the candidate party",
    )

    # Loading
    load_batch_size: int = Field(
        default=1000,
        description="Rows per insert batch during the startup load",
        gt=0,
    )
    load_on_startup: bool = Field(
        default=True,
        description="Drop, recreate and reload both tables when the server starts",
    )
    serve_before_load: bool = Field(
        default=False,
        description="Answer data requests before the startup load finishes (tables may be partially filled)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # HTTP
    api_prefix: str = Field(
        default="/api",
        description="Prefix for all JSON endpoints",
    )
    static_dir: str | None = Field(
        default="public",
        description="Directory with the browser map client, mounted at / when it exists",
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins",
    )

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            msg = "api_prefix must start with '/'"
            raise ValueError(msg)
        return v.rstrip("/")

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def database_location(self) -> str:
        """Human-readable store location (file path for SQLite, URL without password otherwise)."""
        url = make_url(self.database_url)
        if url.get_backend_name() == "sqlite":
            return url.database or ":memory:"
        return url.render_as_string(hide_password=True)

    @property
    def results_csv_file(self) -> Path:
        return Path(self.results_csv_path)

    @property
    def precincts_geojson_file(self) -> Path:
        return Path(self.precincts_geojson_path)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
