"""Frame classes: the protocol header and the method frames of each AMQP class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from .buffers import FrameError, FrameReader, OutBuffer, copied_buffer

FRAME_TYPE_METHOD = 1
PROTOCOL_NAME = b"AMQP\x00"

# type octet + channel + payload size before the payload, end octet after it
_HEADER_SIZE = 7
_TRAILER_SIZE = 1


class Frame(ABC):
    """Anything that can be written to the wire as a single unit."""

    needs_separator: ClassVar[bool] = True
    part_of_handshake: ClassVar[bool] = False
    part_of_shutdown: ClassVar[bool] = False
    synchronous: ClassVar[bool] = True

    @abstractmethod
    def total_size(self) -> int:
        """Number of bytes the encoded frame occupies, end octet included."""

    @abstractmethod
    def fill(self, buffer: OutBuffer) -> None:
        """Write the frame, without the end octet, to ``buffer``."""

    def encode(self) -> bytes:
        """The complete frame as it goes over the wire."""
        return copied_buffer(self)


@dataclass
class ProtocolHeaderFrame(Frame):
    """The header a client sends first to announce the protocol version."""

    protocol_id_major: int = 0
    protocol_id_minor: int = 9
    revision: int = 1
    protocol: bytes = PROTOCOL_NAME

    needs_separator: ClassVar[bool] = False
    part_of_handshake: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if len(self.protocol) != 5:
            raise ValueError("protocol name must be exactly 5 bytes")
        for value in (self.protocol_id_major, self.protocol_id_minor, self.revision):
            if not 0 <= value <= 0xFF:
                raise ValueError("protocol version parts must fit in an octet")

    def total_size(self) -> int:
        return 8

    def fill(self, buffer: OutBuffer) -> None:
        buffer.add_bytes(self.protocol)
        buffer.add_uint8(self.protocol_id_major)
        buffer.add_uint8(self.protocol_id_minor)
        buffer.add_uint8(self.revision)

    @classmethod
    def decode(cls, reader: FrameReader) -> ProtocolHeaderFrame:
        protocol = reader.next_data(5)
        major = reader.next_uint8()
        minor = reader.next_uint8()
        revision = reader.next_uint8()
        return cls(major, minor, revision, protocol)


@dataclass
class MethodFrame(Frame):
    """Frame that carries a method: class id, method id and its arguments."""

    channel: int

    class_id: ClassVar[int]
    method_id: ClassVar[int]

    def __post_init__(self) -> None:
        if not 0 <= self.channel <= 0xFFFF:
            raise ValueError("channel must fit in 16 unsigned bits")

    def payload_size(self) -> int:
        """Size of the payload: class and method ids plus the arguments."""
        arguments = OutBuffer()
        self.fill_arguments(arguments)
        return 4 + len(arguments)

    def total_size(self) -> int:
        return _HEADER_SIZE + self.payload_size() + _TRAILER_SIZE

    def fill(self, buffer: OutBuffer) -> None:
        buffer.add_uint8(FRAME_TYPE_METHOD)
        buffer.add_uint16(self.channel)
        buffer.add_uint32(self.payload_size())
        buffer.add_uint16(self.class_id)
        buffer.add_uint16(self.method_id)
        self.fill_arguments(buffer)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        """Write the method arguments; methods without arguments write nothing."""


@dataclass
class ConnectionFrame(MethodFrame):
    """Method of the connection class, always sent on channel 0."""

    channel: int = field(default=0, init=False)

    class_id: ClassVar[int] = 10


@dataclass
class ChannelFrame(MethodFrame):
    """Method of the channel class."""

    class_id: ClassVar[int] = 20


@dataclass
class ExchangeFrame(MethodFrame):
    """Method of the exchange class."""

    class_id: ClassVar[int] = 40


@dataclass
class QueueFrame(MethodFrame):
    """Method of the queue class."""

    class_id: ClassVar[int] = 50


@dataclass
class BasicFrame(MethodFrame):
    """Method of the basic class."""

    class_id: ClassVar[int] = 60


@dataclass
class ConfirmFrame(MethodFrame):
    """Method of the confirm class."""

    class_id: ClassVar[int] = 85


@dataclass
class TransactionFrame(MethodFrame):
    """Method of the transaction class."""

    class_id: ClassVar[int] = 90


__all__ = [
    "FrameError",
    "Frame",
    "ProtocolHeaderFrame",
    "MethodFrame",
    "ConnectionFrame",
    "ChannelFrame",
    "ExchangeFrame",
    "QueueFrame",
    "BasicFrame",
    "ConfirmFrame",
    "TransactionFrame",
]