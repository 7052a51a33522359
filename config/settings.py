import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

LOG_FORMAT: str = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


@dataclass(frozen=True)
class StorageConfig:
    """Location and key names of the persisted session entries."""

    path: str = field(
        default_factory=lambda: os.environ.get(
            "INSIGHTBOARD_STORAGE",
            os.path.join(os.path.expanduser("~"), ".insightboard", "session.json"),
        )
    )
    token_key: str = "auth_token"
    user_key: str = "auth_user"


@dataclass(frozen=True)
class AppConfig:
    """Top-level client configuration."""

    app_name: str = "InsightBoard"
    version: str = "0.1.0"
    debug: bool = field(
        default_factory=lambda: os.environ.get("DEBUG", "false").lower() == "true"
    )
    api_url: str = field(
        default_factory=lambda: os.environ.get(
            "INSIGHTBOARD_API_URL", "http://localhost:5000/api"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("INSIGHTBOARD_TIMEOUT", "30"))
    )
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_extensions: Tuple[str, ...] = (".csv", ".xlsx", ".xls")
    success_duration_ms: int = 3000
    error_duration_ms: int = 5000
    storage: StorageConfig = field(default_factory=StorageConfig)


_settings: Optional[AppConfig] = None


def get_settings() -> AppConfig:
    """Return a cached singleton of the client settings.

    Returns:
        AppConfig: The client configuration instance.
    """
    global _settings
    if _settings is None:
        _settings = AppConfig()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
