"""
Control Socket Wire Protocol.

Request and reply share one fixed-size record with no length prefix, so
frame boundaries are positional:

    int32  operation   request selector, or 0 / terminal code in replies
    int32  detail      1 requests verbose output
    char   text[N]     one NUL-terminated line of output (replies only)

Fields use native byte order and standard sizes, matching the daemon's
in-memory struct on the same host. N defaults to 768.
"""

import struct
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field

from pimctl.core.exceptions import FrameError

DEFAULT_TEXT_SIZE = 768

_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


class Operation(IntEnum):
    """Operation codes understood by the daemon."""

    OK = 0
    HELP = 1
    VERSION = 2
    IGMP_GROUPS = 3
    IGMP_INTERFACE = 4
    PIM_INTERFACE = 5
    PIM_NEIGHBOR = 6
    PIM_ROUTES = 7
    PIM_RP = 8
    PIM_CRP = 9
    PIM_COMPAT = 10
    RESTART = 11
    DEBUG = 12
    LOGLEVEL = 13
    KILL = 14
    STATUS = 15


class Frame(BaseModel):
    """One request or reply record."""

    model_config = ConfigDict(frozen=True)

    operation: int = Field(ge=_INT32_MIN, le=_INT32_MAX)
    detail: bool = False
    text: bytes = b""

    @property
    def is_terminal(self) -> bool:
        """A reply with a non-zero operation ends the stream."""
        return self.operation != Operation.OK


class FrameCodec:
    """
    Packs and unpacks frames of one fixed size.

    Usage:
        codec = FrameCodec()
        data = codec.pack(Frame(operation=Operation.STATUS))
        frame = codec.unpack(data)
    """

    def __init__(self, text_size: int = DEFAULT_TEXT_SIZE) -> None:
        if text_size < 2:
            raise ValueError(f"text_size must be at least 2, got {text_size}")
        self.text_size = text_size
        self._struct = struct.Struct(f"=ii{text_size}s")

    @property
    def size(self) -> int:
        """On-wire size of every frame, request or reply."""
        return self._struct.size

    def pack(self, frame: Frame) -> bytes:
        """
        Encode a frame.

        Raises:
            FrameError: If the text does not fit with its terminating NUL
        """
        text = frame.text
        if len(text) >= self.text_size:
            raise FrameError(
                f"Frame text is {len(text)} bytes, capacity is {self.text_size - 1}"
            )
        return self._struct.pack(frame.operation, int(frame.detail), text)

    def unpack(self, data: bytes) -> Frame:
        """
        Decode exactly one frame.

        Text stops at the first NUL and is kept as raw bytes.

        Raises:
            FrameError: If data is not exactly one frame long
        """
        if len(data) != self.size:
            raise FrameError(f"Expected {self.size} bytes, got {len(data)}")
        operation, detail, raw = self._struct.unpack(data)
        text = raw.split(b"\0", 1)[0]
        return Frame(operation=operation, detail=bool(detail), text=text)
