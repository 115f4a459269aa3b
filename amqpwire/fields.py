"""Typed AMQP field values, arrays and tables, with their wire encoding."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, ClassVar, Optional, Union

from .buffers import FrameError, FrameReader, OutBuffer


def _encode_text(value: str) -> bytes:
    return value.encode("utf-8", "surrogateescape")


def _decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", "surrogateescape")


class Field(ABC):
    """Base class of every value that can be stored in a table or array."""

    type_id: ClassVar[str] = ""

    @abstractmethod
    def size(self) -> int:
        """Encoded size in bytes, without the type octet."""

    @abstractmethod
    def fill(self, buffer: OutBuffer) -> None:
        """Write the encoded payload, without the type octet."""

    def clone(self) -> Field:
        """Return an independent copy."""
        return deepcopy(self)


@dataclass(frozen=True)
class ShortString(Field):
    """String of at most 255 bytes with a one-byte length prefix."""

    value: str = ""
    type_id: ClassVar[str] = "s"

    def __post_init__(self) -> None:
        if len(_encode_text(self.value)) > 255:
            raise ValueError("short string longer than 255 bytes")

    def size(self) -> int:
        return 1 + len(_encode_text(self.value))

    def fill(self, buffer: OutBuffer) -> None:
        raw = _encode_text(self.value)
        buffer.add_uint8(len(raw)).add_bytes(raw)

    @classmethod
    def decode(cls, reader: FrameReader) -> ShortString:
        return cls(_decode_text(reader.next_data(reader.next_uint8())))

    def __str__(self) -> str:
        return f"string({self.value})"


@dataclass(frozen=True)
class LongString(Field):
    """String with a four-byte length prefix."""

    value: str = ""
    type_id: ClassVar[str] = "S"

    def __post_init__(self) -> None:
        if len(_encode_text(self.value)) > 0xFFFFFFFF:
            raise ValueError("long string too long")

    def size(self) -> int:
        return 4 + len(_encode_text(self.value))

    def fill(self, buffer: OutBuffer) -> None:
        raw = _encode_text(self.value)
        buffer.add_uint32(len(raw)).add_bytes(raw)

    @classmethod
    def decode(cls, reader: FrameReader) -> LongString:
        return cls(_decode_text(reader.next_data(reader.next_uint32())))

    def __str__(self) -> str:
        return f"string({self.value})"


@dataclass(frozen=True)
class Boolean(Field):
    """Single boolean stored in one octet."""

    value: bool = False
    type_id: ClassVar[str] = "t"

    def size(self) -> int:
        return 1

    def fill(self, buffer: OutBuffer) -> None:
        buffer.add_uint8(1 if self.value else 0)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return f"boolean({'true' if self.value else 'false'})"


class NumericKind(Enum):
    """Numeric field types: type octet, buffer method suffix, struct code."""

    OCTET = ("b", "int8", "b")
    UOCTET = ("B", "uint8", "B")
    SHORT = ("U", "int16", "h")
    USHORT = ("u", "uint16", "H")
    LONG = ("I", "int32", "i")
    ULONG = ("i", "uint32", "I")
    LONGLONG = ("L", "int64", "q")
    ULONGLONG = ("l", "uint64", "Q")
    FLOAT = ("f", "float", "f")
    DOUBLE = ("d", "double", "d")

    @property
    def type_id(self) -> str:
        return self.value[0]

    @property
    def suffix(self) -> str:
        return self.value[1]

    @property
    def struct_format(self) -> str:
        return ">" + self.value[2]


@dataclass(frozen=True)
class NumericField(Field):
    """Integer or floating point value of a fixed width."""

    kind: NumericKind
    value: Union[int, float] = 0

    def __post_init__(self) -> None:
        try:
            struct.pack(self.kind.struct_format, self.value)
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"{self.value!r} does not fit {self.kind.name}") from exc

    @property
    def type_id(self) -> str:  # type: ignore[override]
        return self.kind.type_id

    def size(self) -> int:
        return struct.calcsize(self.kind.struct_format)

    def fill(self, buffer: OutBuffer) -> None:
        getattr(buffer, "add_" + self.kind.suffix)(self.value)

    def __int__(self) -> int:
        return int(self.value)

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return f"numeric({self.value})"


@dataclass(frozen=True)
class Timestamp(Field):
    """Unsigned 64-bit timestamp."""

    value: int = 0
    type_id: ClassVar[str] = "T"

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFFFFFFFFFFFFFF:
            raise ValueError("timestamp out of range")

    def size(self) -> int:
        return 8

    def fill(self, buffer: OutBuffer) -> None:
        buffer.add_uint64(self.value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"timestamp({self.value})"


class DecimalField(Field):
    """Exact decimal: an unsigned number and the count of decimal places.

    Precision counts for equality: 1.0 (10, 1) differs from 1.00 (100, 2).
    """

    type_id: ClassVar[str] = "D"
    __slots__ = ("places", "number")

    def __init__(self, places: int = 0, number: int = 0) -> None:
        if not 0 <= places <= 0xFF:
            raise ValueError("places must fit in an octet")
        if not 0 <= number <= 0xFFFFFFFF:
            raise ValueError("number must fit in 32 unsigned bits")
        self.places = places
        self.number = number

    def size(self) -> int:
        return 5

    def fill(self, buffer: OutBuffer) -> None:
        buffer.add_uint8(self.places).add_uint32(self.number)

    @classmethod
    def decode(cls, reader: FrameReader) -> DecimalField:
        places = reader.next_uint8()
        return cls(places, reader.next_uint32())

    def __float__(self) -> float:
        return self.number / 10.0**self.places

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecimalField):
            return NotImplemented
        return self.number == other.number and self.places == other.places

    def __hash__(self) -> int:
        return hash((self.places, self.number))

    def __repr__(self) -> str:
        return f"DecimalField(places={self.places}, number={self.number})"

    def __str__(self) -> str:
        return f"decimal({float(self):g})"


def _require_field(value: object) -> Field:
    if not isinstance(value, Field):
        raise TypeError(f"expected a Field, got {type(value).__name__}")
    return value


class Array(Field):
    """Ordered list of fields."""

    type_id: ClassVar[str] = "A"

    def __init__(self, fields: Iterable[Field] = ()) -> None:
        self._fields: list[Field] = [_require_field(f).clone() for f in fields]

    @classmethod
    def decode(cls, reader: FrameReader) -> Array:
        array = cls()
        remaining = reader.next_uint32()
        while remaining > 0:
            remaining -= 1
            field = decode_field(reader)
            if field is not None:
                remaining -= field.size()
                array._fields.append(field)
            if remaining < 0:
                raise FrameError("array contents exceed declared size")
        return array

    def size(self) -> int:
        return 4 + sum(1 + field.size() for field in self._fields)

    def fill(self, buffer: OutBuffer) -> None:
        buffer.add_uint32(self.size() - 4)
        for field in self._fields:
            buffer.add_uint8(ord(field.type_id))
            field.fill(buffer)

    def get(self, index: int) -> Field:
        """Field at ``index``, or an empty short string if there is none."""
        if 0 <= index < len(self._fields):
            return self._fields[index]
        return ShortString()

    def set(self, index: int, value: Field) -> Array:
        """Overwrite the field at ``index``, or append if the index is past the end."""
        copy = _require_field(value).clone()
        if 0 <= index < len(self._fields):
            self._fields[index] = copy
        else:
            self._fields.append(copy)
        return self

    def append(self, value: Field) -> None:
        self._fields.append(_require_field(value).clone())

    def pop(self) -> Field:
        return self._fields.pop()

    def __len__(self) -> int:
        return len(self._fields)

    def __getitem__(self, index: int) -> Field:
        return self.get(index)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Array({self._fields!r})"

    def __str__(self) -> str:
        return "array(" + ",".join(str(field) for field in self._fields) + ")"


class Table(Field, MutableMapping):
    """Field table keyed by short-string names, encoded in key order."""

    type_id: ClassVar[str] = "F"

    def __init__(
        self, items: Union[Mapping[str, Field], Iterable[tuple[str, Field]]] = ()
    ) -> None:
        self._fields: dict[str, Field] = {}
        pairs = items.items() if isinstance(items, Mapping) else items
        for key, value in pairs:
            self[key] = value

    @classmethod
    def decode(cls, reader: FrameReader) -> Table:
        table = cls()
        remaining = reader.next_uint32()
        while remaining > 0:
            name = ShortString.decode(reader)
            remaining -= name.size() + 1
            field = decode_field(reader)
            if field is not None:
                remaining -= field.size()
                table._fields[name.value] = field
            if remaining < 0:
                raise FrameError("table contents exceed declared size")
        return table

    def size(self) -> int:
        return 4 + sum(
            ShortString(key).size() + 1 + field.size()
            for key, field in self._fields.items()
        )

    def fill(self, buffer: OutBuffer) -> None:
        buffer.add_uint32(self.size() - 4)
        for key in self:
            field = self._fields[key]
            ShortString(key).fill(buffer)
            buffer.add_uint8(ord(field.type_id))
            field.fill(buffer)

    def __getitem__(self, key: str) -> Field:
        return self._fields[key]

    def __setitem__(self, key: str, value: Field) -> None:
        ShortString(key)
        self._fields[key] = _require_field(value).clone()

    def __delitem__(self, key: str) -> None:
        if key not in self._fields:
            raise KeyError(key)
        self._fields.pop(key)

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._fields))

    def __repr__(self) -> str:
        return f"Table({dict(self.items())!r})"

    def __str__(self) -> str:
        return "table(" + ",".join(f"{k}:{self._fields[k]}" for k in self) + ")"


def _decode_numeric(kind: NumericKind, reader: FrameReader) -> NumericField:
    return NumericField(kind, getattr(reader, "next_" + kind.suffix)())


_DECODERS: dict[str, Callable[[FrameReader], Field]] = {
    "t": lambda reader: Boolean(bool(reader.next_uint8())),
    "T": lambda reader: Timestamp(reader.next_uint64()),
    "D": DecimalField.decode,
    "s": ShortString.decode,
    "S": LongString.decode,
    "A": Array.decode,
    "F": Table.decode,
}
_DECODERS.update({kind.type_id: partial(_decode_numeric, kind) for kind in NumericKind})


def decode_field(reader: FrameReader) -> Optional[Field]:
    """Read a type octet and the field that follows; ``None`` for a void field."""
    code = chr(reader.next_uint8())
    if code == "V":
        return None
    try:
        decoder = _DECODERS[code]
    except KeyError:
        raise FrameError(f"unknown field type {code!r}") from None
    return decoder(reader)