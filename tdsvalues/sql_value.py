"""Typed parameter values and conversion of Python values into them."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .temporal import Date, DateTime, DateTime2, DateTimeOffset, SmallDateTime, Time
from .xml import XmlData


class ColumnKind(enum.Enum):
    """The server type a value is sent as."""

    BIT = "bit"
    U8 = "tinyint"
    I16 = "smallint"
    I32 = "int"
    I64 = "bigint"
    F32 = "float(24)"
    F64 = "float(53)"
    STRING = "nvarchar"
    BINARY = "varbinary"
    NUMERIC = "numeric"
    XML = "xml"
    GUID = "uniqueidentifier"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    SMALLDATETIME = "smalldatetime"
    DATETIME2 = "datetime2"
    DATETIMEOFFSET = "datetimeoffset"


_INT_RANGES = {
    ColumnKind.U8: (0, 0xFF),
    ColumnKind.I16: (-(1 << 15), (1 << 15) - 1),
    ColumnKind.I32: (-(1 << 31), (1 << 31) - 1),
    ColumnKind.I64: (-(1 << 63), (1 << 63) - 1),
}

_FLOAT_KINDS = (ColumnKind.F32, ColumnKind.F64)

_VALUE_TYPES: dict[ColumnKind, type] = {
    ColumnKind.BIT: bool,
    ColumnKind.STRING: str,
    ColumnKind.BINARY: bytes,
    ColumnKind.NUMERIC: Decimal,
    ColumnKind.XML: XmlData,
    ColumnKind.GUID: uuid.UUID,
    ColumnKind.DATE: Date,
    ColumnKind.TIME: Time,
    ColumnKind.DATETIME: DateTime,
    ColumnKind.SMALLDATETIME: SmallDateTime,
    ColumnKind.DATETIME2: DateTime2,
    ColumnKind.DATETIMEOFFSET: DateTimeOffset,
}

_WIRE_KINDS: dict[type, ColumnKind] = {
    Date: ColumnKind.DATE,
    Time: ColumnKind.TIME,
    DateTime: ColumnKind.DATETIME,
    SmallDateTime: ColumnKind.SMALLDATETIME,
    DateTime2: ColumnKind.DATETIME2,
    DateTimeOffset: ColumnKind.DATETIMEOFFSET,
}


@dataclass(frozen=True)
class ColumnData:
    """A value of a given server type; ``value`` is ``None`` for NULL."""

    kind: ColumnKind
    value: Any = None

    def __post_init__(self) -> None:
        value = self.value
        if value is None:
            return
        if self.kind in _INT_RANGES:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{self.kind.name} expects an int, got {value!r}")
            low, high = _INT_RANGES[self.kind]
            if not low <= value <= high:
                raise ValueError(f"{value} out of range for {self.kind.name}")
        elif self.kind in _FLOAT_KINDS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{self.kind.name} expects a float, got {value!r}")
            object.__setattr__(self, "value", float(value))
        else:
            expected = _VALUE_TYPES[self.kind]
            if not isinstance(value, expected):
                raise TypeError(
                    f"{self.kind.name} expects {expected.__name__}, got {value!r}"
                )

    @classmethod
    def null(cls, kind: ColumnKind) -> ColumnData:
        """A NULL of the given type."""
        return cls(kind, None)

    def is_null(self) -> bool:
        """Whether the value is NULL."""
        return self.value is None


def to_sql(value: Any) -> ColumnData:
    """Convert a Python value to the server type it maps to.

    Integers become ``int`` when they fit in 32 bits and ``bigint`` otherwise;
    a NULL has no type of its own, so use ``ColumnData.null`` for it.
    """
    if isinstance(value, ColumnData):
        return value
    if value is None:
        raise TypeError("a NULL has no type; use ColumnData.null(kind)")
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
        return ColumnData(ColumnKind.BINARY, bytes(value))
    if isinstance(value, uuid.UUID):
        return ColumnData(ColumnKind.GUID, value)
    if isinstance(value, Decimal):
        return ColumnData(ColumnKind.NUMERIC, value)
    if isinstance(value, XmlData):
        return ColumnData(ColumnKind.XML, value)
    for wire_type, kind in _WIRE_KINDS.items():
        if isinstance(value, wire_type):
            return ColumnData(kind, value)
    raise TypeError(f"cannot convert {type(value).__name__} to a server value")