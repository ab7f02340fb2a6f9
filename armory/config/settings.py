"""
Armory ledger settings.

Each group reads its own env prefix (``STORAGE_``, ``API_``, ``CLIENT_``,
``LEDGER_``); a local ``.env`` file is honoured.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Ledger storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "armory.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0, description="SQLite busy timeout, ms")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # Actor headers set by the upstream auth gateway
    user_header: str = "X-User-Name"
    role_header: str = "X-User-Role"
    base_header: str = "X-User-Base"

    @model_validator(mode="after")
    def check_page_sizes(self) -> "APISettings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self


class ClientSettings(BaseSettings):
    """Ledger API client configuration."""

    model_config = SettingsConfigDict(env_prefix="CLIENT_")

    base_url: str = "http://localhost:8000"
    timeout: float = 30.0
    search_debounce_seconds: float = 0.5
    page_size: int = 10


class LedgerSettings(BaseSettings):
    """Inventory ledger rules."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    low_stock_threshold: int = Field(default=10, ge=0, description="At or below is low stock")


class Settings(BaseSettings):
    """Root settings; sub-groups are built from their own env prefixes."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "armory-ledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    client: ClientSettings = Field(default_factory=ClientSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
