"""Method frames of the channel, exchange, queue and transaction classes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from .buffers import FrameReader, OutBuffer
from .fields import ShortString, Table
from .frame import ChannelFrame, ExchangeFrame, QueueFrame, TransactionFrame


def _check_range(name: str, value: int, bits: int) -> None:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} unsigned bits")


@dataclass
class ChannelCloseFrame(ChannelFrame):
    """Close a channel, with a reply code, reply text and the failing method."""

    code: int = 0
    text: str = ""
    failing_class: int = 0
    failing_method: int = 0

    method_id: ClassVar[int] = 40

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
    def decode(cls, channel: int, reader: FrameReader) -> ChannelCloseFrame:
        code = reader.next_uint16()
        text = ShortString.decode(reader).value
        failing_class = reader.next_uint16()
        failing_method = reader.next_uint16()
        return cls(channel, code, text, failing_class, failing_method)


@dataclass
class _ExchangeBindingFrame(ExchangeFrame):
    """Shared layout of the exchange bind and unbind methods."""

    destination: str = ""
    source: str = ""
    routing_key: str = ""
    no_wait: bool = False
    arguments: Table = field(default_factory=Table)

    def __post_init__(self) -> None:
        super().__post_init__()
        for value in (self.destination, self.source, self.routing_key):
            ShortString(value)
        if isinstance(self.arguments, Table):
            self.arguments = self.arguments.clone()
        elif isinstance(self.arguments, Mapping):
            self.arguments = Table(self.arguments)
        else:
            raise TypeError("arguments must be a Table or a mapping of fields")

    @property
    def synchronous(self) -> bool:  # type: ignore[override]
        """Without no-wait the server answers, so the frame is synchronous."""
        return not self.no_wait

    def fill_arguments(self, buffer: OutBuffer) -> None:
        buffer.add_uint16(0)
        ShortString(self.destination).fill(buffer)
        ShortString(self.source).fill(buffer)
        ShortString(self.routing_key).fill(buffer)
        buffer.add_uint8(1 if self.no_wait else 0)
        self.arguments.fill(buffer)

    @classmethod
    def decode(cls, channel: int, reader: FrameReader):
        reader.next_uint16()
        destination = ShortString.decode(reader).value
        source = ShortString.decode(reader).value
        routing_key = ShortString.decode(reader).value
        no_wait = bool(reader.next_uint8() & 1)
        arguments = Table.decode(reader)
        return cls(channel, destination, source, routing_key, no_wait, arguments)


@dataclass
class ExchangeBindFrame(_ExchangeBindingFrame):
    """Bind a destination exchange to a source exchange."""

    method_id: ClassVar[int] = 30

    def fill_arguments(self, buffer: OutBuffer) -> None:
        super().fill_arguments(buffer)

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> ExchangeBindFrame:
        return super().decode(channel, reader)


@dataclass
class ExchangeUnbindFrame(_ExchangeBindingFrame):
    """Remove the binding between two exchanges."""

    method_id: ClassVar[int] = 40

    def fill_arguments(self, buffer: OutBuffer) -> None:
        super().fill_arguments(buffer)

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> ExchangeUnbindFrame:
        return super().decode(channel, reader)


@dataclass
class QueueDeclareOKFrame(QueueFrame):
    """Server confirmation of a declared queue, with its name and counts."""

    name: str = ""
    message_count: int = 0
    consumer_count: int = 0

    method_id: ClassVar[int] = 11

    def __post_init__(self) -> None:
        super().__post_init__()
        ShortString(self.name)
        _check_range("message count", self.message_count, 32)
        _check_range("consumer count", self.consumer_count, 32)

    def fill_arguments(self, buffer: OutBuffer) -> None:
        ShortString(self.name).fill(buffer)
        buffer.add_uint32(self.message_count)
        buffer.add_uint32(self.consumer_count)

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> QueueDeclareOKFrame:
        name = ShortString.decode(reader).value
        message_count = reader.next_uint32()
        consumer_count = reader.next_uint32()
        return cls(channel, name, message_count, consumer_count)


@dataclass
class QueueUnbindOKFrame(QueueFrame):
    """Server confirmation that a queue was unbound."""

    method_id: ClassVar[int] = 51

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> QueueUnbindOKFrame:
        return cls(channel)


@dataclass
class TransactionRollbackOKFrame(TransactionFrame):
    """Server confirmation that a transaction was rolled back."""

    method_id: ClassVar[int] = 31

    @classmethod
    def decode(cls, channel: int, reader: FrameReader) -> TransactionRollbackOKFrame:
        return cls(channel)