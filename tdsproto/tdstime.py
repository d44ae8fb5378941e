"""Wire representations of the server's date and time types."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from fractions import Fraction
from typing import BinaryIO

from tdsproto.errors import ProtocolError

_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_U16 = struct.Struct("<H")
_I16 = struct.Struct("<h")


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} {value} out of range {low}..{high}")


@dataclass(frozen=True)
class DateTime:
    """The ``datetime`` type.

    ``days`` counts from 1900-01-01 (negative back to 1753-01-01);
    ``seconds_fragments`` are 1/300 s units since midnight.
    """

    days: int
    seconds_fragments: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, -(2**31), 2**31 - 1)
        _check_range("seconds_fragments", self.seconds_fragments, 0, 2**32 - 1)

    def encode(self) -> bytes:
        return _I32.pack(self.days) + _U32.pack(self.seconds_fragments)

    @classmethod
    def decode(cls, stream: BinaryIO) -> DateTime:
        (days,) = _I32.unpack(_read_exact(stream, 4))
        (fragments,) = _U32.unpack(_read_exact(stream, 4))
        return cls(days, fragments)


@dataclass(frozen=True)
class SmallDateTime:
    """The ``smalldatetime`` type: days since 1900-01-01 and a time part."""

    days: int
    seconds_fragments: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, 0, 2**16 - 1)
        _check_range("seconds_fragments", self.seconds_fragments, 0, 2**16 - 1)

    def encode(self) -> bytes:
        return _U16.pack(self.days) + _U16.pack(self.seconds_fragments)

    @classmethod
    def decode(cls, stream: BinaryIO) -> SmallDateTime:
        (days,) = _U16.unpack(_read_exact(stream, 2))
        (fragments,) = _U16.unpack(_read_exact(stream, 2))
        return cls(days, fragments)


@dataclass(frozen=True)
class Date:
    """The ``date`` type: days since 0001-01-01, stored in three bytes."""

    days: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, 0, 2**24 - 1)

    def encode(self) -> bytes:
        return self.days.to_bytes(3, "little")

    @classmethod
    def decode(cls, stream: BinaryIO) -> Date:
        return cls(int.from_bytes(_read_exact(stream, 3), "little"))


@dataclass(frozen=True, eq=False)
class Time:
    """The ``time`` type: 10**-scale second increments since midnight.

    Two values are equal when they denote the same moment, whatever
    their scales.
    """

    increments: int
    scale: int

    def _seconds(self) -> Fraction:
        return Fraction(self.increments, 10**self.scale)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._seconds() == other._seconds()

    def __hash__(self) -> int:
        return hash(self._seconds())

    def byte_length(self) -> int:
        """Number of bytes the value takes on the wire."""
        if 0 <= self.scale <= 2:
            return 3
        if 3 <= self.scale <= 4:
            return 4
        if 5 <= self.scale <= 7:
            return 5
        raise ProtocolError(f"timen: invalid scale {self.scale}")

    def encode(self) -> bytes:
        length = self.byte_length()
        if self.increments >> (8 * length) != 0:
            raise ValueError(
                f"increments {self.increments} do not fit in {length} bytes"
            )
        return self.increments.to_bytes(length, "little")

    @classmethod
    def decode(cls, stream: BinaryIO, scale: int, length: int) -> Time:
        expected = {0: 3, 1: 3, 2: 3, 3: 4, 4: 4, 5: 5, 6: 5, 7: 5}.get(scale)
        if expected is None or expected != length:
            raise ProtocolError(f"timen: invalid length {scale}")
        increments = int.from_bytes(_read_exact(stream, length), "little")
        return cls(increments, scale)


@dataclass(frozen=True)
class DateTime2:
    """The ``datetime2`` type: a time followed by a date on the wire."""

    date: Date
    time: Time

    def encode(self) -> bytes:
        return self.time.encode() + self.date.encode()

    @classmethod
    def decode(cls, stream: BinaryIO, scale: int, length: int) -> DateTime2:
        time = Time.decode(stream, scale, length)
        date = Date.decode(stream)
        return cls(date, time)


@dataclass(frozen=True)
class DateTimeOffset:
    """The ``datetimeoffset`` type: a ``datetime2`` plus minutes from UTC."""

    datetime2: DateTime2
    offset: int

    def __post_init__(self) -> None:
        _check_range("offset", self.offset, -(2**15), 2**15 - 1)

    def encode(self) -> bytes:
        return self.datetime2.encode() + _I16.pack(self.offset)

    @classmethod
    def decode(cls, stream: BinaryIO, scale: int, length: int) -> DateTimeOffset:
        datetime2 = DateTime2.decode(stream, scale, length)
        (offset,) = _I16.unpack(_read_exact(stream, 2))
        return cls(datetime2, offset)