"""
Control Socket Client.

Runs one request/reply session against the daemon over its Unix-domain
control socket: connect, send one request frame, then print reply frames
as they arrive until the daemon sends a terminal frame, closes the
connection, or stays silent for the reply timeout.
"""

import select
import socket
import time
from typing import IO

import click

from pimctl.cli.protocol import DEFAULT_TEXT_SIZE, Frame, FrameCodec
from pimctl.core.config import get_app_config, get_daemon_endpoint
from pimctl.core.exceptions import (
    DaemonConnectionError,
    DaemonNotRunningError,
    PimctlError,
    RequestWriteError,
)
from pimctl.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


def _get_client_config() -> tuple[str, float, str, int]:
    """Load socket path, timeout, daemon name and text size from configuration."""
    socket_path, timeout = get_daemon_endpoint()
    app = get_app_config().application
    return socket_path, timeout, app.daemon.name, app.ipc.text_size


class IpcClient:
    """
    Client for one session on the daemon control socket.

    Features:
    - Socket path and reply timeout from settings
    - Distinct errors for a missing daemon and other connect failures
    - Reply lines streamed to the output as they arrive
    - Connection closed on every exit path

    Usage:
        client = IpcClient()
        client.request(Operation.PIM_ROUTES, detail=True)

        with IpcClient(socket_path="/tmp/pimd.sock") as client:
            client.send(Frame(operation=Operation.STATUS))
            client.stream()
    """

    def __init__(
        self,
        socket_path: str | None = None,
        timeout: float | None = None,
        daemon_name: str | None = None,
        text_size: int | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            socket_path: Control socket. If None, reads from configuration.
            timeout: Seconds to wait for each reply frame. If None, reads from configuration.
            daemon_name: Name used in connection errors. If None, reads from configuration.
            text_size: Frame text capacity. If None, reads from configuration.
        """
        try:
            config_path, config_timeout, config_name, config_text_size = _get_client_config()
        except Exception as e:
            if socket_path is None:
                raise RuntimeError(
                    "Could not determine daemon socket from config/settings/application.yaml"
                ) from e
            config_path, config_timeout = socket_path, 2.0
            config_name, config_text_size = "pimd", DEFAULT_TEXT_SIZE

        self.socket_path = socket_path or config_path
        self.timeout = timeout if timeout is not None else config_timeout
        self.daemon_name = daemon_name or config_name
        self.codec = FrameCodec(text_size or config_text_size)
        self._sock: socket.socket | None = None

    def __enter__(self) -> "IpcClient":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        """
        Open the stream connection to the control socket.

        Raises:
            DaemonNotRunningError: If the socket path does not exist
            DaemonConnectionError: On any other connect failure
        """
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(self.socket_path)
        except FileNotFoundError as e:
            sock.close()
            log_with_source(
                logger, "ipc", "debug", "Control socket missing",
                socket_path=self.socket_path,
            )
            raise DaemonNotRunningError(self.daemon_name) from e
        except OSError as e:
            sock.close()
            log_with_source(
                logger, "ipc", "debug", "Connect failed",
                socket_path=self.socket_path, error=str(e),
            )
            raise DaemonConnectionError(self.daemon_name, e.strerror or str(e)) from e

        self._sock = sock
        log_with_source(logger, "ipc", "debug", "Connected", socket_path=self.socket_path)

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        try:
            sock.close()
        except OSError as e:
            raise PimctlError(f"Failed closing connection: {e}", code="IPC_CLOSE_FAILED") from e
        log_with_source(logger, "ipc", "debug", "Connection closed")

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise PimctlError("Not connected", code="IPC_NOT_CONNECTED")
        return self._sock

    def send(self, frame: Frame) -> None:
        """
        Write one frame in full.

        Raises:
            RequestWriteError: If the write fails
        """
        sock = self._require_socket()
        data = self.codec.pack(frame)
        try:
            sock.sendall(data)
        except OSError as e:
            log_with_source(logger, "ipc", "debug", "Request write failed", error=str(e))
            raise RequestWriteError(f"Failed sending request to {self.daemon_name}: {e}") from e

        log_with_source(
            logger, "ipc", "debug", "Request sent",
            operation=frame.operation, detail=frame.detail, size=len(data),
        )

    def _wait_readable(self, sock: socket.socket, timeout: float) -> bool:
        if timeout <= 0:
            return False
        readable, _, _ = select.select([sock], [], [], timeout)
        return bool(readable)

    def read_frame(self) -> Frame | None:
        """
        Read exactly one reply frame.

        The reply timeout bounds the whole frame, however many chunks it
        arrives in.

        Returns:
            The frame, or None when the reply timeout expires or the
            daemon closes or stalls before a full frame arrives.
        """
        sock = self._require_socket()
        deadline = time.monotonic() + self.timeout
        buf = bytearray()
        while len(buf) < self.codec.size:
            if not self._wait_readable(sock, deadline - time.monotonic()):
                log_with_source(
                    logger, "ipc", "debug", "Reply timeout",
                    timeout=self.timeout, received=len(buf),
                )
                return None
            try:
                chunk = sock.recv(self.codec.size - len(buf))
            except OSError as e:
                log_with_source(logger, "ipc", "debug", "Reply read failed", error=str(e))
                return None
            if not chunk:
                log_with_source(logger, "ipc", "debug", "Connection closed by daemon", received=len(buf))
                return None
            buf.extend(chunk)
        return self.codec.unpack(bytes(buf))

    def stream(self, out: IO[bytes] | None = None) -> int:
        """
        Write reply lines until the stream ends.

        Reply text is written as the daemon sent it, escape sequences and
        non-UTF-8 bytes included.

        Args:
            out: Binary stream for reply lines. Defaults to stdout.

        Returns:
            Number of lines written.
        """
        if out is None:
            out = click.get_binary_stream("stdout")
        lines = 0
        while True:
            frame = self.read_frame()
            if frame is None:
                break
            if frame.is_terminal:
                log_with_source(logger, "ipc", "debug", "Terminal reply", operation=frame.operation)
                break
            out.write(frame.text)
            out.flush()
            lines += 1
        return lines

    def request(self, operation: int, detail: bool = False, out: IO[bytes] | None = None) -> int:
        """
        Run one full session: connect, send, stream replies, close.

        Args:
            operation: Operation code for the daemon
            detail: Ask the daemon for verbose output
            out: Binary stream for reply lines. Defaults to stdout.

        Returns:
            Number of reply lines printed.

        Raises:
            PimctlError: On connect, write or close failure
        """
        self.connect()
        try:
            self.send(Frame(operation=operation, detail=detail))
            return self.stream(out)
        finally:
            self.close()


def perform_request(
    operation: int,
    detail: bool = False,
    client: IpcClient | None = None,
    out: IO[bytes] | None = None,
) -> int:
    """
    Send one operation to the daemon and print its reply.

    Transport failures are reported on stderr. Terminal reply codes are
    not interpreted.

    Returns:
        Exit status: 0 on success, 1 on transport failure.
    """
    try:
        client = client or IpcClient()
        client.request(operation, detail, out)
    except PimctlError as e:
        click.echo(click.style(e.message, fg="red"), err=True)
        return 1
    return 0
