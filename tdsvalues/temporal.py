"""Wire representations of the server's date and time types."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO


class ProtocolError(Exception):
    """Raised when received data does not follow the wire protocol."""


_MAX_DATE_DAYS = (1 << 24) - 1


def _read_exact(src: BinaryIO, size: int) -> bytes:
    data = src.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} out of range [{low}, {high}]: {value}")


@dataclass(frozen=True)
class DateTime:
    """The server's ``datetime``: days since 1900-01-01 and 1/300 s since midnight."""

    days: int
    seconds_fragments: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, -(1 << 31), (1 << 31) - 1)
        _check_range("seconds_fragments", self.seconds_fragments, 0, (1 << 32) - 1)

    def encode(self) -> bytes:
        """Return the wire bytes of this value."""
        return struct.pack("<iI", self.days, self.seconds_fragments)

    @classmethod
    def decode(cls, src: BinaryIO) -> DateTime:
        """Read a value from a binary stream."""
        days, fragments = struct.unpack("<iI", _read_exact(src, 8))
        return cls(days, fragments)


@dataclass(frozen=True)
class SmallDateTime:
    """The server's ``smalldatetime``: days since 1900-01-01 and a time fraction."""

    days: int
    seconds_fragments: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, 0, 0xFFFF)
        _check_range("seconds_fragments", self.seconds_fragments, 0, 0xFFFF)

    def encode(self) -> bytes:
        """Return the wire bytes of this value."""
        return struct.pack("<HH", self.days, self.seconds_fragments)

    @classmethod
    def decode(cls, src: BinaryIO) -> SmallDateTime:
        """Read a value from a binary stream."""
        days, fragments = struct.unpack("<HH", _read_exact(src, 4))
        return cls(days, fragments)


@dataclass(frozen=True)
class Date:
    """The server's ``date``: days since 0001-01-01, stored in three bytes."""

    days: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, 0, _MAX_DATE_DAYS)

    def encode(self) -> bytes:
        """Return the three wire bytes of this value."""
        return self.days.to_bytes(3, "little")

    @classmethod
    def decode(cls, src: BinaryIO) -> Date:
        """Read a value from a binary stream."""
        return cls(int.from_bytes(_read_exact(src, 3), "little"))


@dataclass(frozen=True, eq=False)
class Time:
    """The server's ``time``: 10^-scale second increments since midnight."""

    increments: int
    scale: int

    def __post_init__(self) -> None:
        _check_range("increments", self.increments, 0, (1 << 64) - 1)
        _check_range("scale", self.scale, 0, 0xFF)

    def _seconds(self) -> float:
        return self.increments / 10**self.scale

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._seconds() == other._seconds()

    def __hash__(self) -> int:
        return hash(self._seconds())

    def length(self) -> int:
        """Number of bytes the value takes on the wire."""
        if 0 <= self.scale <= 2:
            return 3
        if 3 <= self.scale <= 4:
            return 4
        if 5 <= self.scale <= 7:
            return 5
        raise ProtocolError(f"timen: invalid scale {self.scale}")

    def encode(self) -> bytes:
        """Return the wire bytes of this value."""
        size = self.length()
        if self.increments >> (8 * size):
            raise ValueError(
                f"increments {self.increments} do not fit in {size} bytes"
            )
        return self.increments.to_bytes(size, "little")

    @classmethod
    def decode(cls, src: BinaryIO, n: int, rlen: int) -> Time:
        """Read a value of scale ``n`` and wire length ``rlen``."""
        valid = (
            (0 <= n <= 2 and rlen == 3)
            or (3 <= n <= 4 and rlen == 4)
            or (5 <= n <= 7 and rlen == 5)
        )
        if not valid:
            raise ProtocolError(f"timen: invalid length {n}")
        return cls(int.from_bytes(_read_exact(src, rlen), "little"), n)


@dataclass(frozen=True)
class DateTime2:
    """The server's ``datetime2``: a date and a time component."""

    date: Date
    time: Time

    def encode(self) -> bytes:
        """Return the wire bytes: the time first, then the date."""
        return self.time.encode() + self.date.encode()

    @classmethod
    def decode(cls, src: BinaryIO, n: int, rlen: int) -> DateTime2:
        """Read a value whose time part has scale ``n`` and length ``rlen``."""
        time = Time.decode(src, n, rlen)
        date = Date.decode(src)
        return cls(date, time)


@dataclass(frozen=True)
class DateTimeOffset:
    """The server's ``datetimeoffset``: a UTC ``datetime2`` and an offset in minutes."""

    datetime2: DateTime2
    offset: int

    def __post_init__(self) -> None:
        _check_range("offset", self.offset, -(1 << 15), (1 << 15) - 1)

    def encode(self) -> bytes:
        """Return the wire bytes of this value."""
        return self.datetime2.encode() + struct.pack("<h", self.offset)

    @classmethod
    def decode(cls, src: BinaryIO, n: int, rlen: int) -> DateTimeOffset:
        """Read a value whose time part has scale ``n`` and length ``rlen``."""
        datetime2 = DateTime2.decode(src, n, rlen)
        (offset,) = struct.unpack("<h", _read_exact(src, 2))
        return cls(datetime2, offset)