"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All credentials come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Backend and blob configs are frozen once loaded
    - Pool size and both timeouts are strictly positive (a zero pool size
      would mean an unbounded pool)
    - Missing or malformed values raise ConfigurationError at load time,
      naming the environment variables involved

Design Decisions:
    - One DatabaseConfig per backend, env prefix derived from the backend name
      (sql -> SQL_USER, analytics -> ANALYTICS_USER)
    - TLS certificate validation is strict unless <PREFIX>_SSL_INSECURE is set
"""

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ConfigurationError

DEFAULT_BACKEND = "sql"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Backends: "sql" reads SQL_*, any other name reads <NAME>_*
    sql_backends: list[str] = [DEFAULT_BACKEND]

    @field_validator("sql_backends")
    @classmethod
    def normalize_backend_names(cls, v: list[str]) -> list[str]:
        names = [name.strip().lower() for name in v if name.strip()]
        if not names:
            raise ValueError("at least one backend is required")
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate backend names: {names}")
        return names

    verify_connections_on_startup: bool = False
    connect_probe_ignore_timeouts: bool = True

    # Blob storage
    blob_url_enabled: bool = True

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


class DatabaseConfig(BaseSettings):
    """Connection settings for one backend database."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", frozen=True,
    )

    user: str
    host: str
    database: str
    password: str
    port: int
    pool_size: int = Field(5, gt=0)
    pool_timeout: float = Field(30.0, gt=0)
    connect_timeout: float = Field(10.0, gt=0)
    ssl_insecure: bool = False


class BlobStorageConfig(BaseSettings):
    """Azure Blob Storage account used for signed read URLs."""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_STORAGE_",
        env_file=".env", case_sensitive=False, extra="ignore", frozen=True,
    )

    account_name: str
    container_name: str
    account_key: str
    endpoint_suffix: str = "core.windows.net"


def env_prefix_for(backend: str) -> str:
    return f"{backend.upper()}_"


def load_database_config(backend: str) -> DatabaseConfig:
    """Load the config for *backend* or raise ConfigurationError."""
    prefix = env_prefix_for(backend)
    try:
        return DatabaseConfig(_env_prefix=prefix)
    except ValidationError as e:
        raise ConfigurationError(
            _offending_variables(e, prefix), section=backend,
        ) from e


def load_blob_config() -> BlobStorageConfig:
    try:
        return BlobStorageConfig()
    except ValidationError as e:
        raise ConfigurationError(
            _offending_variables(e, "AZURE_STORAGE_"), section="blob_storage",
        ) from e


def _offending_variables(exc: ValidationError, prefix: str) -> list[str]:
    return [
        f"{prefix}{str(err['loc'][0]).upper()}"
        for err in exc.errors()
        if err.get("loc")
    ]


@lru_cache
def get_settings() -> Settings:
    return Settings()
