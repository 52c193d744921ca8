"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has unknown keys or wrong types, a clear ValidationError is raised at
startup instead of a confusing failure halfway through a daemon session.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml

Every field carries a default so the client still runs when no
configuration directory is present (e.g. a bare system install).
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class DaemonSchema(_StrictBase):
    name: str = "pimd"
    socket_path: str = "/var/run/pimd.sock"


class IpcSchema(_StrictBase):
    reply_timeout_ms: int = Field(default=2000, gt=0)
    text_size: int = Field(default=768, gt=1)
    argument_limit: int = Field(default=80, gt=1)


class ApplicationSchema(_StrictBase):
    name: str = "pimctl"
    daemon: DaemonSchema = Field(default_factory=DaemonSchema)
    ipc: IpcSchema = Field(default_factory=IpcSchema)


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool = True


class FileHandlerSchema(_StrictBase):
    enabled: bool = False
    path: str = "logs/pimctl.jsonl"
    max_bytes: int = 5242880
    backup_count: int = 3


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema = Field(default_factory=ConsoleHandlerSchema)
    file: FileHandlerSchema = Field(default_factory=FileHandlerSchema)


class LoggingSchema(_StrictBase):
    level: str = "WARNING"
    format: str = "console"
    handlers: HandlersSchema = Field(default_factory=HandlersSchema)
