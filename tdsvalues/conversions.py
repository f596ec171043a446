"""Conversions between Python's date and time types and the server's wire values."""

from __future__ import annotations

import datetime as _dt
from typing import Any

from .sql_value import ColumnData, ColumnKind, to_sql
from .temporal import Date, DateTime, DateTime2, DateTimeOffset, Time

_NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_DAY = 86_400 * _NANOS_PER_SECOND
_WIRE_SCALE = 7
_EPOCH_1900 = _dt.date(1900, 1, 1)
_EPOCH_0001 = _dt.date(1, 1, 1)


def _day_micros(value: _dt.time | _dt.datetime) -> int:
    return (
        (value.hour * 3600 + value.minute * 60 + value.second) * 1_000_000
        + value.microsecond
    )


def _wire_time(value: _dt.time | _dt.datetime) -> Time:
    # 100 ns increments: one microsecond is ten of them.
    return Time(_day_micros(value) * 10, _WIRE_SCALE)


def _wire_date(value: _dt.date) -> Date:
    return Date(value.toordinal() - _EPOCH_0001.toordinal())


def _time_nanos(time: Time) -> int:
    if time.scale <= 9:
        return time.increments * 10 ** (9 - time.scale)
    return time.increments // 10 ** (time.scale - 9)


def _wrapping_time(nanos: int) -> _dt.time:
    """Midnight plus a duration, wrapping around at the end of the day."""
    micros = (nanos % _NANOS_PER_DAY) // 1000
    seconds, microsecond = divmod(micros, 1_000_000)
    minutes, second = divmod(seconds, 60)
    hour, minute = divmod(minutes, 60)
    return _dt.time(hour, minute, second, microsecond)


def _from_days(days: int, start: _dt.date) -> _dt.date:
    return start + _dt.timedelta(days=days)


def _require(data: ColumnData, *kinds: ColumnKind) -> None:
    if data.kind not in kinds:
        names = ", ".join(kind.name for kind in kinds)
        raise TypeError(f"cannot convert a {data.kind.name} value; expected {names}")


def _naive_utc(value: _dt.datetime) -> _dt.datetime:
    return value.astimezone(_dt.timezone.utc).replace(tzinfo=None)


def _is_aware(value: _dt.datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def date_to_sql(value: _dt.date) -> ColumnData:
    """Convert a date to a ``date`` value."""
    if isinstance(value, _dt.datetime):
        raise TypeError("expected a date, got a datetime")
    return ColumnData(ColumnKind.DATE, _wire_date(value))


def time_to_sql(value: _dt.time) -> ColumnData:
    """Convert a time of day to a ``time`` value of scale 7."""
    return ColumnData(ColumnKind.TIME, _wire_time(value))


def datetime_to_sql(value: _dt.datetime, tds73: bool = True) -> ColumnData:
    """Convert a datetime to the server type it maps to.

    With ``tds73`` a naive value becomes ``datetime2`` and an aware one
    ``datetimeoffset``; without it only naive values are accepted and
    become ``datetime``.
    """
    if _is_aware(value):
        if not tds73:
            raise TypeError("aware datetimes need TDS 7.3 or later")
        offset = value.utcoffset()
        assert offset is not None
        minutes = int(offset.total_seconds() / 60)
        naive = _naive_utc(value)
        datetime2 = DateTime2(_wire_date(naive.date()), _wire_time(naive))
        return ColumnData(ColumnKind.DATETIMEOFFSET, DateTimeOffset(datetime2, minutes))
    if tds73:
        return ColumnData(
            ColumnKind.DATETIME2, DateTime2(_wire_date(value.date()), _wire_time(value))
        )
    days = (value.date() - _EPOCH_1900).days
    fragments = _day_micros(value) * 1000 * 300 // _NANOS_PER_SECOND
    return ColumnData(ColumnKind.DATETIME, DateTime(days, fragments))


def to_column_data(value: Any, tds73: bool = True) -> ColumnData:
    """Convert any supported Python value, date and time types included."""
    if isinstance(value, _dt.datetime):
        return datetime_to_sql(value, tds73)
    if isinstance(value, (_dt.date, _dt.time)) and not tds73:
        raise TypeError(f"{type(value).__name__} needs TDS 7.3 or later")
    if isinstance(value, _dt.date):
        return date_to_sql(value)
    if isinstance(value, _dt.time):
        return time_to_sql(value)
    return to_sql(value)


def naive_datetime_from_sql(data: ColumnData) -> _dt.datetime | None:
    """Read a ``smalldatetime``, ``datetime2`` or ``datetime`` value."""
    _require(
        data, ColumnKind.SMALLDATETIME, ColumnKind.DATETIME2, ColumnKind.DATETIME
    )
    value = data.value
    if value is None:
        return None
    if data.kind is ColumnKind.SMALLDATETIME:
        seconds = value.seconds_fragments * 60
        if seconds >= 86_400:
            raise ValueError(f"invalid smalldatetime minutes: {value.seconds_fragments}")
        return _dt.datetime.combine(
            _from_days(value.days, _EPOCH_1900),
            _wrapping_time(seconds * _NANOS_PER_SECOND),
        )
    if data.kind is ColumnKind.DATETIME2:
        return _dt.datetime.combine(
            _from_days(value.date.days, _EPOCH_0001),
            _wrapping_time(_time_nanos(value.time)),
        )
    nanos = value.seconds_fragments * _NANOS_PER_SECOND // 300
    return _dt.datetime.combine(
        _from_days(value.days, _EPOCH_1900), _wrapping_time(nanos)
    )


def time_from_sql(data: ColumnData) -> _dt.time | None:
    """Read a ``time`` value."""
    _require(data, ColumnKind.TIME)
    if data.value is None:
        return None
    return _wrapping_time(_time_nanos(data.value))


def date_from_sql(data: ColumnData) -> _dt.date | None:
    """Read a ``date`` value."""
    _require(data, ColumnKind.DATE)
    if data.value is None:
        return None
    return _from_days(data.value.days, _EPOCH_0001)


def aware_datetime_from_sql(data: ColumnData) -> _dt.datetime | None:
    """Read a ``datetimeoffset`` value as an aware datetime in its own offset."""
    _require(data, ColumnKind.DATETIMEOFFSET)
    value = data.value
    if value is None:
        return None
    datetime2 = value.datetime2
    naive = _dt.datetime.combine(
        _from_days(datetime2.date.days, _EPOCH_0001),
        _wrapping_time(_time_nanos(datetime2.time)),
    )
    zone = _dt.timezone(_dt.timedelta(minutes=value.offset))
    return naive.replace(tzinfo=_dt.timezone.utc).astimezone(zone)