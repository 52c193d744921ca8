"""Unit tests for the control socket wire format."""

import struct

import pytest
from pydantic import ValidationError

from pimctl.cli.protocol import DEFAULT_TEXT_SIZE, Frame, FrameCodec, Operation
from pimctl.core.exceptions import FrameError


class TestFrame:
    """Tests for the Frame model."""

    def test_defaults_to_empty_request(self) -> None:
        frame = Frame(operation=Operation.STATUS)
        assert frame.detail is False
        assert frame.text == b""

    def test_zero_operation_is_continuation(self) -> None:
        assert Frame(operation=0, text=b"line\n").is_terminal is False

    @pytest.mark.parametrize("operation", [1, 255, -1])
    def test_non_zero_operation_is_terminal(self, operation: int) -> None:
        assert Frame(operation=operation).is_terminal is True

    def test_rejects_operation_outside_int32(self) -> None:
        with pytest.raises(ValidationError):
            Frame(operation=2 ** 31)

    def test_is_immutable(self) -> None:
        frame = Frame(operation=1)
        with pytest.raises(ValidationError):
            frame.operation = 2


class TestFrameCodec:
    """Tests for FrameCodec packing and unpacking."""

    @pytest.fixture
    def codec(self) -> FrameCodec:
        return FrameCodec()

    def test_default_size_is_two_ints_and_text(self, codec: FrameCodec) -> None:
        assert codec.size == 4 + 4 + DEFAULT_TEXT_SIZE == 776

    def test_request_and_reply_have_same_size(self, codec: FrameCodec) -> None:
        request = codec.pack(Frame(operation=Operation.PIM_ROUTES, detail=True))
        reply = codec.pack(Frame(operation=0, text=b"192.168.1.0/24 via eth0\n"))
        assert len(request) == len(reply) == codec.size

    def test_pack_field_order(self, codec: FrameCodec) -> None:
        data = codec.pack(Frame(operation=7, detail=True, text=b"abc"))
        operation, detail = struct.unpack("=ii", data[:8])
        assert operation == 7
        assert detail == 1
        assert data[8:12] == b"abc\0"
        assert data[11:] == b"\0" * (DEFAULT_TEXT_SIZE - 3)

    def test_unpack_stops_text_at_nul(self, codec: FrameCodec) -> None:
        raw = struct.pack("=ii768s", 0, 0, b"first\0garbage")
        frame = codec.unpack(raw)
        assert frame.text == b"first"
        assert frame.operation == 0

    def test_unpack_keeps_raw_bytes(self, codec: FrameCodec) -> None:
        raw = struct.pack("=ii768s", 0, 0, b"\x1b[1mbad \xff byte\x1b[0m\n")
        assert codec.unpack(raw).text == b"\x1b[1mbad \xff byte\x1b[0m\n"

    def test_unpack_reads_terminal_code(self, codec: FrameCodec) -> None:
        raw = struct.pack("=ii768s", 255, 0, b"ignored")
        frame = codec.unpack(raw)
        assert frame.operation == 255
        assert frame.is_terminal

    def test_unpack_rejects_short_data(self, codec: FrameCodec) -> None:
        with pytest.raises(FrameError, match="Expected 776 bytes"):
            codec.unpack(b"\0" * 100)

    def test_pack_rejects_text_without_room_for_nul(self, codec: FrameCodec) -> None:
        with pytest.raises(FrameError):
            codec.pack(Frame(operation=0, text=b"x" * DEFAULT_TEXT_SIZE))

    def test_pack_accepts_text_at_capacity(self, codec: FrameCodec) -> None:
        text = b"x" * (DEFAULT_TEXT_SIZE - 1)
        assert codec.unpack(codec.pack(Frame(operation=0, text=text))).text == text

    def test_custom_text_size(self) -> None:
        codec = FrameCodec(text_size=256)
        assert codec.size == 264
        assert len(codec.pack(Frame(operation=1))) == 264

    def test_rejects_tiny_text_size(self) -> None:
        with pytest.raises(ValueError):
            FrameCodec(text_size=1)


class TestOperation:
    """Tests for operation codes."""

    def test_continuation_code_is_zero(self) -> None:
        assert Operation.OK == 0

    def test_codes_are_unique(self) -> None:
        values = [op.value for op in Operation]
        assert len(values) == len(set(values))
