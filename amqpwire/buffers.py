"""Byte buffers for writing and reading AMQP wire data."""

from __future__ import annotations

import struct
from typing import Any, Union

FRAME_END = 206

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I8 = struct.Struct(">b")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


class FrameError(ValueError):
    """Raised when frame data is truncated or malformed."""


class OutBuffer:
    """Growable buffer that encodes values in network byte order."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data = bytearray()

    def _pack(self, packer: struct.Struct, value: Any) -> OutBuffer:
        try:
            self._data += packer.pack(value)
        except (struct.error, OverflowError) as exc:
            raise ValueError(
                f"{value!r} does not fit in format {packer.format!r}"
            ) from exc
        return self

    def add_bytes(self, data: bytes) -> OutBuffer:
        """Append raw bytes."""
        self._data += data
        return self

    def add_uint8(self, value: int) -> OutBuffer:
        return self._pack(_U8, value)

    def add_uint16(self, value: int) -> OutBuffer:
        return self._pack(_U16, value)

    def add_uint32(self, value: int) -> OutBuffer:
        return self._pack(_U32, value)

    def add_uint64(self, value: int) -> OutBuffer:
        return self._pack(_U64, value)

    def add_int8(self, value: int) -> OutBuffer:
        return self._pack(_I8, value)

    def add_int16(self, value: int) -> OutBuffer:
        return self._pack(_I16, value)

    def add_int32(self, value: int) -> OutBuffer:
        return self._pack(_I32, value)

    def add_int64(self, value: int) -> OutBuffer:
        return self._pack(_I64, value)

    def add_float(self, value: float) -> OutBuffer:
        return self._pack(_F32, value)

    def add_double(self, value: float) -> OutBuffer:
        return self._pack(_F64, value)

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)


class FrameReader:
    """Sequential reader over received frame data."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def next_data(self, size: int) -> bytes:
        """Consume and return the next ``size`` bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        end = self._pos + size
        if end > len(self._data):
            raise FrameError(
                f"frame truncated: need {size} bytes, {self.remaining()} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def _unpack(self, packer: struct.Struct) -> Any:
        return packer.unpack(self.next_data(packer.size))[0]

    def next_uint8(self) -> int:
        return self._unpack(_U8)

    def next_uint16(self) -> int:
        return self._unpack(_U16)

    def next_uint32(self) -> int:
        return self._unpack(_U32)

    def next_uint64(self) -> int:
        return self._unpack(_U64)

    def next_int8(self) -> int:
        return self._unpack(_I8)

    def next_int16(self) -> int:
        return self._unpack(_I16)

    def next_int32(self) -> int:
        return self._unpack(_I32)

    def next_int64(self) -> int:
        return self._unpack(_I64)

    def next_float(self) -> float:
        return self._unpack(_F32)

    def next_double(self) -> float:
        return self._unpack(_F64)

    def remaining(self) -> int:
        """Number of bytes not yet consumed."""
        return len(self._data) - self._pos


BufferLike = Union[bytes, bytearray, "ReducedBuffer"]


class ReducedBuffer:
    """View of another buffer with a number of leading bytes skipped."""

    __slots__ = ("_buffer", "_skip")

    def __init__(self, buffer: BufferLike, skip: int) -> None:
        if skip < 0 or skip > len(buffer):
            raise ValueError("skip must lie within the buffer")
        self._buffer = buffer
        self._skip = skip

    def __len__(self) -> int:
        return len(self._buffer) - self._skip

    def __getitem__(self, key: int | slice) -> int | bytes:
        size = len(self)
        if isinstance(key, slice):
            start, stop, step = key.indices(size)
            if step == 1:
                return bytes(self._buffer[start + self._skip:stop + self._skip])
            return bytes(self._buffer[i + self._skip] for i in range(start, stop, step))
        if key < 0:
            key += size
        if not 0 <= key < size:
            raise IndexError("buffer index out of range")
        return self._buffer[key + self._skip]

    def __bytes__(self) -> bytes:
        return bytes(self._buffer[self._skip:])


def copied_buffer(frame: Any) -> bytes:
    """Encode a frame into bytes, followed by the frame-end octet if it needs one.

    The frame supplies ``fill(buffer)`` and may set ``needs_separator`` to false.
    """
    buffer = OutBuffer()
    frame.fill(buffer)
    if getattr(frame, "needs_separator", True):
        buffer.add_uint8(FRAME_END)
    return buffer.getvalue()