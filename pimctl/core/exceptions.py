"""
Custom Exceptions.

Client-specific exception classes for consistent error handling.
The transport raises them; the CLI layer reports the message and exits
non-zero.
"""


class PimctlError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class CommandNotFoundError(PimctlError):
    """Raised when the command tokens match nothing in the command table."""

    def __init__(self, tokens: list[str] | tuple[str, ...] = ()) -> None:
        self.tokens = tuple(tokens)
        text = " ".join(self.tokens)
        message = f"Unknown command: {text}" if text else "Incomplete command"
        super().__init__(message, code="CMD_NOT_FOUND")


class DaemonNotRunningError(PimctlError):
    """Raised when the daemon's control socket does not exist."""

    def __init__(self, daemon: str = "pimd") -> None:
        super().__init__(
            f"Cannot connect to {daemon}, verify it has started.",
            code="IPC_DAEMON_NOT_RUNNING",
        )


class DaemonConnectionError(PimctlError):
    """Raised when connecting to the control socket fails for any other reason."""

    def __init__(self, daemon: str = "pimd", reason: str = "") -> None:
        message = f"Failed connecting to {daemon}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="IPC_CONNECT_FAILED")


class RequestWriteError(PimctlError):
    """Raised when the request frame cannot be written in full."""

    def __init__(self, message: str = "Failed sending request") -> None:
        super().__init__(message, code="IPC_WRITE_FAILED")


class FrameError(PimctlError):
    """Raised when a frame cannot be encoded."""

    def __init__(self, message: str = "Invalid frame") -> None:
        super().__init__(message, code="IPC_BAD_FRAME")
