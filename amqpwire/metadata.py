"""Message properties sent with every published message, and the envelope."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

from .buffers import FrameReader, OutBuffer
from .fields import ShortString, Table

# (attribute, flag byte, bit) in the order the properties appear on the wire
_PROPERTIES = (
    ("content_type", 0, 7),
    ("content_encoding", 0, 6),
    ("headers", 0, 5),
    ("delivery_mode", 0, 4),
    ("priority", 0, 3),
    ("correlation_id", 0, 2),
    ("reply_to", 0, 1),
    ("expiration", 0, 0),
    ("message_id", 1, 7),
    ("timestamp", 1, 6),
    ("type_name", 1, 5),
    ("user_id", 1, 4),
    ("app_id", 1, 3),
    ("cluster_id", 1, 2),
)

_OCTETS = {"delivery_mode", "priority"}


@dataclass(kw_only=True)
class MetaData:
    """Message properties; a property that is ``None`` is not sent."""

    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    headers: Optional[Table] = None
    delivery_mode: Optional[int] = None
    priority: Optional[int] = None
    correlation_id: Optional[str] = None
    reply_to: Optional[str] = None
    expiration: Optional[str] = None
    message_id: Optional[str] = None
    timestamp: Optional[int] = None
    type_name: Optional[str] = None
    user_id: Optional[str] = None
    app_id: Optional[str] = None
    cluster_id: Optional[str] = None

    @classmethod
    def decode(cls, reader: FrameReader) -> MetaData:
        """Read the two flag octets and the properties they announce."""
        flags = (reader.next_uint8(), reader.next_uint8())
        values = {}
        for name, byte, bit in _PROPERTIES:
            if not flags[byte] & (1 << bit):
                continue
            if name == "headers":
                values[name] = Table.decode(reader)
            elif name in _OCTETS:
                values[name] = reader.next_uint8()
            elif name == "timestamp":
                values[name] = reader.next_uint64()
            else:
                values[name] = ShortString.decode(reader).value
        return cls(**values)

    def update(self, other: MetaData) -> None:
        """Copy every property from ``other``."""
        for name, _, _ in _PROPERTIES:
            value = getattr(other, name)
            if isinstance(value, Table):
                value = value.clone()
            setattr(self, name, value)

    def persistent(self) -> bool:
        """True when the delivery mode is set to 2."""
        return self.delivery_mode == 2

    def set_persistent(self, value: bool = True) -> None:
        """Mark the message persistent, or remove the delivery mode."""
        self.delivery_mode = 2 if value else None

    def _present(self):
        for name, byte, bit in _PROPERTIES:
            value = getattr(self, name)
            if value is not None:
                yield name, byte, bit, value

    def size(self) -> int:
        """Encoded size in bytes, including the two flag octets."""
        total = 2
        for name, _, _, value in self._present():
            if name == "headers":
                total += value.size()
            elif name in _OCTETS:
                total += 1
            elif name == "timestamp":
                total += 8
            else:
                total += ShortString(value).size()
        return total

    def fill(self, buffer: OutBuffer) -> None:
        """Write the flag octets followed by the properties that are set."""
        flags = [0, 0]
        present = list(self._present())
        for _, byte, bit, _ in present:
            flags[byte] |= 1 << bit
        buffer.add_uint8(flags[0]).add_uint8(flags[1])
        for name, _, _, value in present:
            if name == "headers":
                value.fill(buffer)
            elif name in _OCTETS:
                buffer.add_uint8(value)
            elif name == "timestamp":
                buffer.add_uint64(value)
            else:
                ShortString(value).fill(buffer)


@dataclass
class Envelope(MetaData):
    """A message body together with its properties."""

    body: bytes

    def body_size(self) -> int:
        return len(self.body)


# names of all properties, for callers that iterate over them
PROPERTY_NAMES = tuple(f.name for f in fields(MetaData))