# tdsvalues

Value types, binary encodings and result-stream handling for the Tabular
Data Stream (TDS) protocol that SQL Server speaks.

The package uses only the standard library.

## Modules

### `tdsvalues.temporal`

This module holds the wire forms of the server's date and time types. Each
one is a frozen dataclass:

- `DateTime` holds days since 1900-01-01 and 1/300-second fragments since
  midnight.
- `SmallDateTime` holds days since 1900-01-01 and a time fraction, each
  16 bits wide.
- `Date` holds days since 0001-01-01, stored in three bytes.
- `Time` holds increments of 10^-scale seconds since midnight.
  - Two `Time` values are equal when they denote the same number of seconds.
  - `length()` gives the wire size: 3, 4 or 5 bytes.
- `DateTime2` holds a `Date` and a `Time`. On the wire the time comes first.
- `DateTimeOffset` holds a UTC `DateTime2` and an offset in minutes.

Every type has `encode()`, which returns little-endian bytes. Every type also
has a `decode(...)` class method that reads from a binary stream such as
`io.BytesIO`. For `Time`, `DateTime2` and `DateTimeOffset` you pass the scale
`n` and the time length `rlen`.

Errors:

- A field out of range raises `ValueError` when the value is constructed.
- A stream that runs short raises `EOFError`.
- An invalid time scale or length raises `ProtocolError`.

### `tdsvalues.xml`

- `XmlSchema` holds `db_name`, `owner` and `collection`.
- `XmlData` holds the XML text and an optional schema.
  - `with_schema(schema)` returns a copy bound to that schema.
  - `str()` gives the text back.
  - `encode()` writes the text as a PLP (partially length-prefixed) UTF-16
    blob. The header marks the total length as unknown, then one chunk
    follows, then a terminator.

### `tdsvalues.sql_value`

`ColumnData(kind, value)` is a typed column value, and `ColumnKind` names its
server type. A `value` of `None` means NULL.

- `ColumnData.null(kind)` builds a NULL of the given type.
- `is_null()` tests for NULL.
- The constructor checks the value's type, and the range of integer kinds.

`to_sql(value)` converts a plain Python value:

| Python value | Server type |
|---|---|
| `bool` | `bit` |
| `int` that fits in 32 bits | `int` |
| other `int` | `bigint` |
| `float` | `float(53)` |
| `str` | `nvarchar` |
| `bytes`, `bytearray`, `memoryview` | `varbinary` |
| `uuid.UUID` | `uniqueidentifier` |
| `decimal.Decimal` | `numeric` |
| `XmlData` | `xml` |
| the types in `temporal` | their matching kinds |

- An integer that does not fit in a `bigint` raises `OverflowError`.
- `None` raises `TypeError`. Use `ColumnData.null` for a NULL instead.

### `tdsvalues.conversions`

This module maps the standard `datetime` types to and from the wire types.

- `date_to_sql` and `time_to_sql` produce `date` and `time` values. The time
  has scale 7, which means 100 ns increments.
- `datetime_to_sql(value, tds73=True)` converts a `datetime`:
  - with `tds73`, a naive value becomes `datetime2` and an aware value
    becomes `datetimeoffset`;
  - with `tds73=False`, a naive value becomes `datetime` and an aware value
    raises `TypeError`.
- `to_column_data(value, tds73=True)` accepts any supported value, the date
  and time types included. It falls back to `to_sql` for everything else.
- The readers take a `ColumnData` of a matching kind and return `None` for
  NULL. A value of any other kind raises `TypeError`.
  - `naive_datetime_from_sql` reads `smalldatetime`, `datetime2` and
    `datetime` values.
  - `time_from_sql` and `date_from_sql` read `time` and `date` values.
  - `aware_datetime_from_sql` reads a `datetimeoffset` value as an aware
    `datetime` in its own offset.

### `tdsvalues.stream`

`QueryStream(tokens)` takes any iterable of `ReceivedToken`. Each token is a
`TokenKind` plus a payload:

- a `NEW_RESULTSET` token carries `Column` objects;
- a `ROW` token carries `ColumnData` objects.

Iterating the stream yields `QueryItem` objects. Each item holds either a
`Row` or a `ResultMetadata`, and `ResultMetadata` carries the columns and a
`result_index` that starts at 0.

The stream also offers:

- `columns()` peeks at the columns of the current or the next result set.
- `forward_to_metadata()` skips ahead to the next metadata.
- `into_results()`, `into_first_result()` and `into_row()` collect rows into
  memory.
- `into_row_stream()` yields rows only.

If the tokens contained an `ERROR` token, the stream raises `ServerError`
with the first error once the tokens run out.

`Row.get(key)` takes a column index or a column name. It returns the value,
or `None` for NULL or for a missing column.

`flush_done(tokens)` consumes tokens up to a `DONE` token and returns that
token's payload. Before returning it can instead raise:

- `ServerError`, for an error seen before the `DONE` token;
- `RoutingError`, if an `ENV_CHANGE` token carried one;
- `ProtocolError`, if no `DONE` token arrived.

## Examples

```python
import datetime
from tdsvalues.conversions import datetime_to_sql

data = datetime_to_sql(datetime.datetime(2020, 4, 20, 16, 20))
payload = data.value.encode()   # datetime2 bytes: time, then date
```

```python
from tdsvalues.sql_value import ColumnKind, to_sql

param = to_sql("Hallo")
assert param.kind is ColumnKind.STRING
```

```python
from tdsvalues.stream import Column, QueryStream, ReceivedToken, TokenKind
from tdsvalues.sql_value import to_sql

tokens = [
    ReceivedToken(TokenKind.NEW_RESULTSET, [Column("first")]),
    ReceivedToken(TokenKind.ROW, [to_sql(1)]),
]
row = QueryStream(tokens).into_row()
assert row.get("first") == 1
```

## What it does not do

The package does not open connections, log in or send queries. It also does
not decode tokens from raw server bytes. The caller supplies the
`ReceivedToken` objects that `QueryStream` and `flush_done` work on.

## Running the tests

```
pip install ".[test]"
pytest
```