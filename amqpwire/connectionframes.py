"""Method frames of the connection class: close and tune."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .buffers import FrameReader, OutBuffer
from .fields import ShortString
from .frame import ConnectionFrame


def _check_range(name: str, value: int, bits: int) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} unsigned bits")


@dataclass
class ConnectionCloseFrame(ConnectionFrame):
    """Close the connection, with a reply code, reply text and the failing method.

    The failing class and method are 0 when no error occurred.
    """

    code: int
    text: str
    failing_class: int = 0
    failing_method: int = 0

    method_id: ClassVar[int] = 50
    part_of_shutdown: ClassVar[bool] = True

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_range("code", self.code, 16)
        _check_range("failing class", self.failing_class, 16)
        _check_range("failing method", self.failing_method, 16)
        ShortString(self.text)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        buffer.add_uint16(self.code)
        ShortString(self.text).fill(buffer)
        buffer.add_uint16(self.failing_class)
        buffer.add_uint16(self.failing_method)

    @classmethod
    def decode(cls, reader: FrameReader) -> ConnectionCloseFrame:
        code = reader.next_uint16()
        text = ShortString.decode(reader).value
        failing_class = reader.next_uint16()
        failing_method = reader.next_uint16()
        return cls(code, text, failing_class, failing_method)


@dataclass
class ConnectionTuneFrame(ConnectionFrame):
    """Proposed channel maximum, frame size maximum and heartbeat interval."""

    channel_max: int
    frame_max: int
    heartbeat: int

    method_id: ClassVar[int] = 30

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_range("channel max", self.channel_max, 16)
        _check_range("frame max", self.frame_max, 32)
        _check_range("heartbeat", self.heartbeat, 16)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        buffer.add_uint16(self.channel_max)
        buffer.add_uint32(self.frame_max)
        buffer.add_uint16(self.heartbeat)

    @classmethod
    def decode(cls, reader: FrameReader) -> ConnectionTuneFrame:
        channel_max = reader.next_uint16()
        frame_max = reader.next_uint32()
        heartbeat = reader.next_uint16()
        return cls(channel_max, frame_max, heartbeat)