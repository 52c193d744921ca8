"""
Configuration Management.

Loads settings from config/settings/*.yaml and overrides from the
environment. No hardcoded daemon paths in the CLI or transport code: all
configuration comes from these sources.

Settings (YAML):
    application.yaml   - Daemon socket, reply timeout, frame sizes
    logging.yaml       - Logging configuration

Environment (PIMCTL_ prefix):
    PIMCTL_CONFIG_DIR        - Directory holding the YAML files
    PIMCTL_SOCKET_PATH       - Daemon control socket
    PIMCTL_REPLY_TIMEOUT_MS  - Wait for each reply frame, in milliseconds

The configuration directory is PIMCTL_CONFIG_DIR when set, otherwise
config/settings/ under the project root. When neither exists the schema
defaults apply.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pimctl.core.config_schema import ApplicationSchema, LoggingSchema


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


class Settings(BaseSettings):
    """Overrides read from PIMCTL_* environment variables."""

    config_dir: str | None = None
    socket_path: str | None = None
    reply_timeout_ms: int | None = Field(default=None, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="PIMCTL_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached environment overrides."""
    return Settings()


def find_config_dir() -> Path | None:
    """
    Locate the directory holding the YAML settings.

    Returns:
        The configured directory, or None when running without one.
    """
    configured = get_settings().config_dir
    if configured:
        return Path(configured)
    try:
        candidate = find_project_root() / "config" / "settings"
    except RuntimeError:
        return None
    return candidate if candidate.is_dir() else None


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from the configuration directory."""
    config_dir = find_config_dir()
    if config_dir is None:
        return {}

    config_path = config_dir / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_daemon_endpoint() -> tuple[str, float]:
    """
    Get the daemon control socket and per-frame reply timeout.

    Environment overrides win over application.yaml.

    Returns:
        Tuple of (socket_path, timeout_seconds).
    """
    app = get_app_config().application
    settings = get_settings()
    socket_path = settings.socket_path or app.daemon.socket_path
    timeout_ms = settings.reply_timeout_ms
    if timeout_ms is None:
        timeout_ms = app.ipc.reply_timeout_ms
    return socket_path, timeout_ms / 1000.0
