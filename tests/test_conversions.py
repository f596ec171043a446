import datetime as dt
import uuid

import pytest

from tdsvalues.conversions import (
    aware_datetime_from_sql,
    date_from_sql,
    date_to_sql,
    datetime_to_sql,
    naive_datetime_from_sql,
    time_from_sql,
    time_to_sql,
    to_column_data,
)
from tdsvalues.sql_value import ColumnData, ColumnKind
from tdsvalues.temporal import (
    Date,
    DateTime,
    DateTime2,
    DateTimeOffset,
    SmallDateTime,
    Time,
)

NAIVE = dt.datetime(2020, 4, 20, 16, 20, 0)


def test_naive_date_time_tds72_round_trip():
    data = datetime_to_sql(NAIVE, tds73=False)
    assert data.kind is ColumnKind.DATETIME
    assert naive_datetime_from_sql(data) == NAIVE


def test_naive_date_time_tds72_fragments():
    data = datetime_to_sql(dt.datetime(1900, 1, 1, 0, 0, 1), tds73=False)
    assert data.value == DateTime(0, 300)


def test_naive_date_time_tds72_before_epoch():
    data = datetime_to_sql(dt.datetime(1899, 12, 31), tds73=False)
    assert data.value == DateTime(-1, 0)


def test_naive_small_date_time_tds73():
    days = (dt.date(2020, 4, 20) - dt.date(1900, 1, 1)).days
    data = ColumnData(ColumnKind.SMALLDATETIME, SmallDateTime(days, 16 * 60 + 20))
    assert naive_datetime_from_sql(data) == NAIVE


def test_small_date_time_with_too_many_minutes():
    data = ColumnData(ColumnKind.SMALLDATETIME, SmallDateTime(0, 1440))
    with pytest.raises(ValueError):
        naive_datetime_from_sql(data)


def test_naive_date_time2_tds73_round_trip():
    data = datetime_to_sql(NAIVE)
    assert data.kind is ColumnKind.DATETIME2
    assert naive_datetime_from_sql(data) == NAIVE


def test_datetime2_keeps_microseconds():
    value = dt.datetime(2022, 7, 22, 21, 9, 54, 123456)
    assert naive_datetime_from_sql(datetime_to_sql(value)) == value


def test_datetime2_lower_scale():
    data = ColumnData(ColumnKind.DATETIME2, DateTime2(Date(0), Time(123, 3)))
    assert naive_datetime_from_sql(data) == dt.datetime(1, 1, 1, 0, 0, 0, 123000)


def test_date_pinned_values():
    assert date_to_sql(dt.date(1, 1, 1)).value == Date(0)
    assert date_to_sql(dt.date(1, 1, 2)).value == Date(1)


def test_naive_date_round_trip():
    date = dt.date(2020, 4, 20)
    assert date_from_sql(date_to_sql(date)) == date


def test_date_to_sql_rejects_datetime():
    with pytest.raises(TypeError):
        date_to_sql(NAIVE)


def test_naive_time_round_trip():
    time = dt.time(16, 20, 0)
    data = time_to_sql(time)
    assert data.kind is ColumnKind.TIME
    assert time_from_sql(data) == time


def test_time_pinned_increments():
    data = time_to_sql(dt.time(0, 0, 1))
    assert data.value.increments == 10_000_000
    assert data.value.scale == 7


def test_time_wraps_past_midnight():
    increments = (86_400 + 1) * 10**7
    data = ColumnData(ColumnKind.TIME, Time(increments, 7))
    assert time_from_sql(data) == dt.time(0, 0, 1)


def test_date_time_utc_round_trip():
    value = NAIVE.replace(tzinfo=dt.timezone.utc)
    data = datetime_to_sql(value)
    assert data.kind is ColumnKind.DATETIMEOFFSET
    assert data.value.offset == 0
    assert aware_datetime_from_sql(data) == value


def test_date_time_fixed_round_trip():
    zone = dt.timezone(dt.timedelta(hours=3))
    value = NAIVE.replace(tzinfo=dt.timezone.utc).astimezone(zone)
    data = datetime_to_sql(value)
    assert data.value.offset == 180
    result = aware_datetime_from_sql(data)
    assert result == value
    assert result.utcoffset() == dt.timedelta(hours=3)


def test_date_time_fixed_stores_utc():
    zone = dt.timezone(dt.timedelta(hours=3))
    value = dt.datetime(2020, 4, 20, 16, 20, tzinfo=zone)
    data = datetime_to_sql(value)
    expected = datetime_to_sql(dt.datetime(2020, 4, 20, 13, 20)).value
    assert data.value.datetime2 == expected


def test_aware_datetime_needs_tds73():
    with pytest.raises(TypeError):
        datetime_to_sql(NAIVE.replace(tzinfo=dt.timezone.utc), tds73=False)


def test_offset_from_wire_value():
    datetime2 = datetime_to_sql(dt.datetime(2020, 4, 20, 13, 20)).value
    data = ColumnData(ColumnKind.DATETIMEOFFSET, DateTimeOffset(datetime2, 180))
    result = aware_datetime_from_sql(data)
    assert result.replace(tzinfo=None) == NAIVE


@pytest.mark.parametrize(
    "reader, kind",
    [
        (naive_datetime_from_sql, ColumnKind.DATETIME2),
        (time_from_sql, ColumnKind.TIME),
        (date_from_sql, ColumnKind.DATE),
        (aware_datetime_from_sql, ColumnKind.DATETIMEOFFSET),
    ],
)
def test_nulls_read_as_none(reader, kind):
    assert reader(ColumnData.null(kind)) is None


@pytest.mark.parametrize(
    "reader",
    [naive_datetime_from_sql, time_from_sql, date_from_sql, aware_datetime_from_sql],
)
def test_wrong_kind_is_rejected(reader):
    with pytest.raises(TypeError):
        reader(ColumnData(ColumnKind.I32, 1))


def test_to_column_data_dispatch():
    assert to_column_data(NAIVE).kind is ColumnKind.DATETIME2
    assert to_column_data(NAIVE, tds73=False).kind is ColumnKind.DATETIME
    assert to_column_data(dt.date(2020, 4, 20)).kind is ColumnKind.DATE
    assert to_column_data(dt.time(16, 20)).kind is ColumnKind.TIME
    assert to_column_data(-4) == ColumnData(ColumnKind.I32, -4)
    guid = uuid.UUID("c97dbc01-fb45-4384-a194-e39a4560cf4a")
    assert to_column_data(guid) == ColumnData(ColumnKind.GUID, guid)


def test_to_column_data_date_needs_tds73():
    with pytest.raises(TypeError):
        to_column_data(dt.date(2020, 4, 20), tds73=False)