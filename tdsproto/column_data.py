"""Values sent to and received from the server, tagged with their type."""

from __future__ import annotations

import datetime as _dt
import enum
import struct
import uuid
from dataclasses import dataclass
from typing import Any

from tdsproto import tdstime
from tdsproto.xml import XmlData

_F32 = struct.Struct("<f")
_MAX_SHORT_STRING = 4000
_MAX_SHORT_BINARY = 8000


class ColumnKind(enum.Enum):
    """The server type a value is carried as."""

    U8 = enum.auto()
    I16 = enum.auto()
    I32 = enum.auto()
    I64 = enum.auto()
    F32 = enum.auto()
    F64 = enum.auto()
    BIT = enum.auto()
    STRING = enum.auto()
    BINARY = enum.auto()
    GUID = enum.auto()
    XML = enum.auto()
    DATE = enum.auto()
    TIME = enum.auto()
    DATETIME = enum.auto()
    SMALLDATETIME = enum.auto()
    DATETIME2 = enum.auto()
    DATETIMEOFFSET = enum.auto()


_INT_RANGES = {
    ColumnKind.U8: (0, 2**8 - 1),
    ColumnKind.I16: (-(2**15), 2**15 - 1),
    ColumnKind.I32: (-(2**31), 2**31 - 1),
    ColumnKind.I64: (-(2**63), 2**63 - 1),
}

_VALUE_TYPES: dict[ColumnKind, type] = {
    ColumnKind.BIT: bool,
    ColumnKind.STRING: str,
    ColumnKind.GUID: uuid.UUID,
    ColumnKind.XML: XmlData,
    ColumnKind.DATE: tdstime.Date,
    ColumnKind.TIME: tdstime.Time,
    ColumnKind.DATETIME: tdstime.DateTime,
    ColumnKind.SMALLDATETIME: tdstime.SmallDateTime,
    ColumnKind.DATETIME2: tdstime.DateTime2,
    ColumnKind.DATETIMEOFFSET: tdstime.DateTimeOffset,
}

_FIXED_SQL_TYPES = {
    ColumnKind.U8: "tinyint",
    ColumnKind.I16: "smallint",
    ColumnKind.I32: "int",
    ColumnKind.I64: "bigint",
    ColumnKind.F32: "float(24)",
    ColumnKind.F64: "float(53)",
    ColumnKind.BIT: "bit",
    ColumnKind.GUID: "uniqueidentifier",
    ColumnKind.XML: "xml",
    ColumnKind.DATE: "date",
    ColumnKind.TIME: "time",
    ColumnKind.DATETIME: "datetime",
    ColumnKind.SMALLDATETIME: "smalldatetime",
    ColumnKind.DATETIME2: "datetime2",
    ColumnKind.DATETIMEOFFSET: "datetimeoffset",
}

_RAW_TIME_KINDS = (
    (tdstime.Date, ColumnKind.DATE),
    (tdstime.Time, ColumnKind.TIME),
    (tdstime.DateTime, ColumnKind.DATETIME),
    (tdstime.SmallDateTime, ColumnKind.SMALLDATETIME),
    (tdstime.DateTime2, ColumnKind.DATETIME2),
    (tdstime.DateTimeOffset, ColumnKind.DATETIMEOFFSET),
)


@dataclass(frozen=True)
class ColumnData:
    """A single value of a given kind; ``None`` stands for SQL NULL."""

    kind: ColumnKind
    value: Any = None

    def __post_init__(self) -> None:
        value = self.value
        if value is None:
            return
        kind = self.kind
        if kind in _INT_RANGES:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{kind.name} needs an int, got {type(value).__name__}")
            low, high = _INT_RANGES[kind]
            if not low <= value <= high:
                raise ValueError(f"{value} out of range for {kind.name}")
        elif kind in (ColumnKind.F32, ColumnKind.F64):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{kind.name} needs a float, got {type(value).__name__}")
            value = float(value)
            if kind is ColumnKind.F32:
                (value,) = _F32.unpack(_F32.pack(value))
            object.__setattr__(self, "value", value)
        elif kind is ColumnKind.BINARY:
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise TypeError(f"BINARY needs bytes, got {type(value).__name__}")
            object.__setattr__(self, "value", bytes(value))
        else:
            expected = _VALUE_TYPES[kind]
            if not isinstance(value, expected):
                raise TypeError(
                    f"{kind.name} needs {expected.__name__}, got {type(value).__name__}"
                )

    @property
    def is_null(self) -> bool:
        return self.value is None

    @property
    def sql_type(self) -> str:
        """The server type the value is declared as when sent as a parameter."""
        if self.kind is ColumnKind.STRING:
            if self.value is None or len(self.value) < _MAX_SHORT_STRING:
                return "nvarchar(4000)"
            return "nvarchar(max)"
        if self.kind is ColumnKind.BINARY:
            if self.value is None or len(self.value) < _MAX_SHORT_BINARY:
                return "varbinary(8000)"
            return "varbinary(max)"
        return _FIXED_SQL_TYPES[self.kind]


def null(kind: ColumnKind) -> ColumnData:
    """A NULL value of the given kind."""
    return ColumnData(kind, None)


def to_sql(value: Any) -> ColumnData:
    """Convert a Python value into a typed value understood by the server."""
    if isinstance(value, ColumnData):
        return value
    if value is None:
        raise TypeError("a NULL value has no kind; use null(kind)")
    if isinstance(value, bool):
        return ColumnData(ColumnKind.BIT, value)
    if isinstance(value, int):
        for kind in (ColumnKind.I32, ColumnKind.I64):
            low, high = _INT_RANGES[kind]
            if low <= value <= high:
                return ColumnData(kind, value)
        raise OverflowError(f"{value} does not fit in a bigint")
    if isinstance(value, float):
        return ColumnData(ColumnKind.F64, value)
    if isinstance(value, str):
        return ColumnData(ColumnKind.STRING, value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ColumnData(ColumnKind.BINARY, value)
    if isinstance(value, uuid.UUID):
        return ColumnData(ColumnKind.GUID, value)
    if isinstance(value, XmlData):
        return ColumnData(ColumnKind.XML, value)
    if isinstance(value, (_dt.date, _dt.time)):
        # datetimes builds on this module, so it is imported on use
        from tdsproto import datetimes

        if isinstance(value, _dt.datetime):
            return datetimes.datetime_to_sql(value)
        if isinstance(value, _dt.date):
            return datetimes.date_to_sql(value)
        return datetimes.time_to_sql(value)
    for raw_type, kind in _RAW_TIME_KINDS:
        if isinstance(value, raw_type):
            return ColumnData(kind, value)
    raise TypeError(f"cannot convert {type(value).__name__} to a server value")