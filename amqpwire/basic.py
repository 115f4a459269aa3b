"""Method frames of the basic class."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .buffers import FrameReader, OutBuffer
from .fields import ShortString
from .frame import BasicFrame


def _pack_bits(*flags: bool) -> int:
    octet = 0
    for bit, flag in enumerate(flags):
        if flag:
            octet |= 1 << bit
    return octet


def _bit(octet: int, bit: int) -> bool:
    return bool(octet & (1 << bit))


def _check_delivery_tag(tag: int) -> None:
    if not 0 <= tag <= 0xFFFFFFFFFFFFFFFF:
        raise ValueError("delivery tag must fit in 64 unsigned bits")


@dataclass
class BasicAckFrame(BasicFrame):
    """Acknowledge one message, or all up to the tag when ``multiple`` is set."""

    delivery_tag: int = 0
    multiple: bool = False

    method_id: ClassVar[int] = 80
    synchronous: ClassVar[bool] = False

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_delivery_tag(self.delivery_tag)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        buffer.add_uint64(self.delivery_tag)
        buffer.add_uint8(_pack_bits(self.multiple))

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> BasicAckFrame:
        tag = reader.next_uint64()
        bits = reader.next_uint8()
        return cls(channel, tag, _bit(bits, 0))


@dataclass
class BasicConsumeOKFrame(BasicFrame):
    """Server confirmation that a consumer started, with its tag."""

    consumer_tag: str = ""

    method_id: ClassVar[int] = 21

    def __post_init__(self) -> None:
        super().__post_init__()
        ShortString(self.consumer_tag)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        ShortString(self.consumer_tag).fill(buffer)

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> BasicConsumeOKFrame:
        return cls(channel, ShortString.decode(reader).value)


@dataclass
class BasicGetFrame(BasicFrame):
    """Request a single message from a queue."""

    queue: str = ""
    no_ack: bool = False

    method_id: ClassVar[int] = 70

    def __post_init__(self) -> None:
        super().__post_init__()
        ShortString(self.queue)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        buffer.add_uint16(0)
        ShortString(self.queue).fill(buffer)
        buffer.add_uint8(_pack_bits(self.no_ack))

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> BasicGetFrame:
        reader.next_uint16()
        queue = ShortString.decode(reader).value
        bits = reader.next_uint8()
        return cls(channel, queue, _bit(bits, 0))


@dataclass
class BasicNackFrame(BasicFrame):
    """Reject one or more messages, optionally putting them back in the queue."""

    delivery_tag: int = 0
    multiple: bool = False
    requeue: bool = False

    method_id: ClassVar[int] = 120

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_delivery_tag(self.delivery_tag)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        buffer.add_uint64(self.delivery_tag)
        buffer.add_uint8(_pack_bits(self.multiple, self.requeue))

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> BasicNackFrame:
        tag = reader.next_uint64()
        bits = reader.next_uint8()
        return cls(channel, tag, _bit(bits, 0), _bit(bits, 1))


@dataclass
class BasicQosOKFrame(BasicFrame):
    """Server confirmation of a quality-of-service request."""

    method_id: ClassVar[int] = 11

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> BasicQosOKFrame:
        return cls(channel)


@dataclass
class BasicRecoverOKFrame(BasicFrame):
    """Server confirmation of a recover request."""

    method_id: ClassVar[int] = 111

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> BasicRecoverOKFrame:
        return cls(channel)