"""Socket helpers: waiting for readiness and resolving host names."""

from __future__ import annotations

import select
import socket
from typing import Any, Union

FileLike = Union[int, Any]


def _fileno(fd: FileLike) -> int:
    number = fd if isinstance(fd, int) else fd.fileno()
    if number < 0:
        raise ValueError("file descriptor must not be negative")
    return number


class Poll:
    """Check, or wait, whether one file descriptor is readable or writable."""

    __slots__ = ("_fd",)

    def __init__(self, fd: FileLike) -> None:
        self._fd = _fileno(fd)

    def readable(self, block: bool) -> bool:
        """True once the descriptor is readable; without blocking, check only."""
        ready, _, _ = select.select([self._fd], [], [], None if block else 0.0)
        return bool(ready)

    def writable(self, block: bool) -> bool:
        """True once the descriptor is writable; without blocking, check only."""
        _, ready, _ = select.select([], [self._fd], [], None if block else 0.0)
        return bool(ready)

    def active(self, block: bool) -> bool:
        """True once the descriptor is readable or writable."""
        readable, writable, _ = select.select(
            [self._fd], [self._fd], [], None if block else 0.0
        )
        return bool(readable or writable)


def resolve(hostname: str, port: int = 5672) -> list[tuple]:
    """Stream-socket addresses for ``hostname`` and ``port``, IPv4 or IPv6.

    Each entry is ``(family, type, proto, canonname, sockaddr)``; a failed
    lookup raises :class:`socket.gaierror`.
    """
    if not 0 <= port <= 0xFFFF:
        raise ValueError("port must fit in 16 unsigned bits")
    return socket.getaddrinfo(
        hostname, str(port), socket.AF_UNSPEC, socket.SOCK_STREAM
    )