"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Fake Daemon:
    The fake_daemon fixture listens on a Unix socket in a short temporary
    directory, accepts one connection, records the request frame, writes
    the scripted replies, and optionally holds the connection open to
    exercise the reply timeout.
"""

import contextlib
import shutil
import socket
import tempfile
import threading
from collections.abc import Generator
from pathlib import Path

import pytest

from pimctl.cli.protocol import Frame, FrameCodec
from pimctl.core import logging as logging_module
from pimctl.core.config import get_app_config, get_settings
from pimctl.core.logging import setup_logging


# =============================================================================
# Configuration and Logging
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop PIMCTL_* overrides and cached configuration around every test."""
    for name in ("PIMCTL_CONFIG_DIR", "PIMCTL_SOCKET_PATH", "PIMCTL_REPLY_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)
    setup_logging(level="WARNING", format_type="console", enable_file_logging=False)
    get_settings.cache_clear()
    get_app_config.cache_clear()
    logging_module._logging_config = None
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()
    logging_module._logging_config = None


# =============================================================================
# Fake Daemon
# =============================================================================


def _recv_exact(conn: socket.socket, size: int) -> bytes:
    buf = bytearray()
    while len(buf) < size:
        chunk = conn.recv(size - len(buf))
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


class FakeDaemon:
    """Scripted stand-in for the daemon's control socket."""

    def __init__(self, path: Path, codec: FrameCodec | None = None) -> None:
        self.path = path
        self.codec = codec or FrameCodec()
        self.requests: list[Frame] = []
        self.replies: list[bytes] = []
        self.hold = 0.0
        self.gap = 0.0
        self._release = threading.Event()
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(str(path))
        self._server.listen(1)
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def reply(self, *frames: Frame) -> None:
        """Queue reply frames."""
        self.replies.extend(self.codec.pack(frame) for frame in frames)

    def reply_raw(self, data: bytes) -> None:
        """Queue raw bytes, e.g. a truncated frame."""
        self.replies.append(data)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._release.set()
        self._server.close()
        if self._thread.ident is not None:
            self._thread.join(timeout=5)

    def _serve(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        with conn:
            data = _recv_exact(conn, self.codec.size)
            if len(data) == self.codec.size:
                self.requests.append(self.codec.unpack(data))
            # the client may hang up after a terminal frame
            with contextlib.suppress(BrokenPipeError, ConnectionResetError):
                for index, chunk in enumerate(self.replies):
                    if index and self.gap:
                        self._release.wait(self.gap)
                    conn.sendall(chunk)
            if self.hold:
                self._release.wait(self.hold)


@pytest.fixture
def socket_dir() -> Generator[Path, None, None]:
    """
    Short temporary directory for Unix sockets.

    pytest's tmp_path can exceed the 108 byte limit on socket paths.
    """
    path = Path(tempfile.mkdtemp(prefix="pimctl-"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def fake_daemon(socket_dir: Path) -> Generator[FakeDaemon, None, None]:
    """
    Fake daemon listening on socket_dir/pimd.sock.

    Queue replies first, then call start().

    Usage:
        def test_status(fake_daemon):
            fake_daemon.reply(Frame(operation=0, text=b"up\\n"), Frame(operation=1))
            fake_daemon.start()
    """
    daemon = FakeDaemon(socket_dir / "pimd.sock")
    yield daemon
    daemon.stop()
