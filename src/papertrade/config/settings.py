"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory for the local cache."""
    return Path.home() / ".papertrade"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Paper Trading Ledger"

    # Ledger
    starting_balance: Decimal = Decimal("1000000")  # 10 lakh

    # Local durable cache (all local data lives here)
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None
    local_queue_key: str = "localTransactions"

    # Remote store
    remote_backend: Literal["memory", "firestore"] = "memory"
    firestore_project: Optional[str] = None
    firestore_database: Optional[str] = None
    portfolios_collection: str = "portfolios"
    transactions_collection: str = "transactions"
    remote_timeout_seconds: float = 10.0

    # Reconciliation; 0 disables the periodic timer
    sync_interval_seconds: float = 60.0

    log_level: str = "INFO"

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "local_cache.db"
        return f"sqlite:///{db_path}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
