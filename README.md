# tdsproto

Building blocks for working with the TDS database protocol. It covers typed
parameter and column values, the wire encodings of the server's date, time
and XML values, conversions to and from the standard library's `datetime`
types, and the handling of the token sequence that a query returns.

## Installing

```
pip install tdsproto
```

The package has no runtime dependencies.

## What is in it

### `tdsproto.column_data`

- `ColumnKind` is an enum of the server types a value can be carried as:
  `U8`, `I16`, `I32`, `I64`, `F32`, `F64`, `BIT`, `STRING`, `BINARY`,
  `GUID`, `XML`, `DATE`, `TIME`, `DATETIME`, `SMALLDATETIME`, `DATETIME2`
  and `DATETIMEOFFSET`.
- `ColumnData(kind, value)` is one typed value. A `value` of `None` stands
  for SQL NULL. The constructor checks the value:
  - integers must fit the kind's range;
  - `F32` values are rounded to single precision;
  - binary values are stored as `bytes`;
  - other kinds must be of the matching Python type.

  `is_null` tells whether the value is NULL. `sql_type` gives the declared
  server type. Strings under 4000 characters are `nvarchar(4000)` and longer
  ones `nvarchar(max)`. Binary values under 8000 bytes are `varbinary(8000)`
  and longer ones `varbinary(max)`.
- `to_sql(value)` picks the kind for a Python value:

  | Python value | Kind |
  |---|---|
  | `bool` | `BIT` |
  | `int` that fits 32 bits | `I32` |
  | any other `int` that fits 64 bits | `I64`; larger values raise `OverflowError` |
  | `float` | `F64` |
  | `str` | `STRING` |
  | `bytes`, `bytearray` or `memoryview` | `BINARY` |
  | `uuid.UUID` | `GUID` |
  | `XmlData` | `XML` |
  | `datetime.date`, `datetime.time` or `datetime.datetime` | the conversions in `tdsproto.datetimes` |
  | the raw types of `tdsproto.tdstime` | their own kinds |

  Passing `None` raises `TypeError`. `null(kind)` gives a typed NULL.

### `tdsproto.tdstime`

The server's own date and time representations are frozen dataclasses:

- `DateTime(days, seconds_fragments)`: days since 1900-01-01, and time of
  day in 1/300 s units.
- `SmallDateTime(days, seconds_fragments)`.
- `Date(days)`: days since 0001-01-01, stored in three bytes.
- `Time(increments, scale)`: 10^-scale second increments since midnight.
  Two `Time` values are equal when they denote the same moment, whatever
  their scales. `byte_length()` gives 3, 4 or 5 bytes, depending on the scale.
- `DateTime2(date, time)`.
- `DateTimeOffset(datetime2, offset)`: the offset is in minutes from UTC.

Each class has two methods:

- `encode()` returns the little-endian wire bytes.
- `decode(...)` is a classmethod that reads from a binary stream. The time
  types take the `scale` and the byte `length` as arguments.

Errors are raised as follows:

- An invalid scale or length raises `ProtocolError`.
- A stream that ends early raises `EOFError`.
- Out-of-range fields raise `ValueError`.

### `tdsproto.datetimes`

These functions convert between the standard library's date and time types
and the server's types.

Going to the server:

- `date_to_sql(value)` gives `DATE`.
- `time_to_sql(value)` gives `TIME` at scale 7, in 100 ns steps. It accepts
  naive times only.
- `datetime_to_sql(value, tds73=True)`: with TDS 7.3, a naive datetime gives
  `DATETIME2` and an aware one gives `DATETIMEOFFSET`, which is stored as UTC
  plus the offset in minutes. With `tds73=False`, only naive datetimes are
  accepted, and they give `DATETIME`.

Coming from the server:

- `date_from_sql(data)` returns a `date`.
- `time_from_sql(data)` returns a `time`, truncated to microseconds.
- `datetime_from_sql(data)` returns a naive `datetime` from `SMALLDATETIME`,
  `DATETIME2` or `DATETIME`.
- `aware_datetime_from_sql(data)` returns an aware `datetime`. A
  `DATETIMEOFFSET` is given in its own offset. A `DATETIME2` is taken as UTC.

All the reading functions return `None` for NULL. A value of any other kind
raises `TypeError`.

### `tdsproto.xml`

- `XmlSchema(db_name, owner, collection)` records where an XML schema
  collection lives.
- `XmlData(data, schema=None)` holds an XML document as text. The package
  does not validate it.
  - `str()` returns the text.
  - `with_schema(schema)` returns a copy bound to the schema.
  - `encode()` produces the payload: an unknown-length PLP header, one
    UTF-16-LE chunk, and the terminator.

### `tdsproto.tokens`

- `TokenKind` enumerates the token kinds of a server response.
- `ReceivedToken(kind, value)` is a token with its payload.
- `flush_done(tokens)` consumes tokens up to the first `DONE` and returns its
  payload. It raises in these cases:
  - `ServerError` for the first `ERROR` token seen before `DONE`.
  - `RoutingError`, when there was no error, for an `ENV_CHANGE` whose
    payload has `host` and `port`.
  - `ProtocolError` if the tokens run out before `DONE`.

### `tdsproto.query`

- `Column(name, column_type)` describes one column.
- `Row` holds `columns`, `data` and `result_index`. `get(key)` takes a
  position or a column name. It returns the value, or `None` for NULL or a
  missing column. Iterating over a row yields its `ColumnData` values.
- `ResultMetadata` holds `columns` and `result_index`.
- `QueryItem` wraps either a row or metadata. Use `as_row()` or
  `as_metadata()` to get at the content.
- `QueryStream(tokens)` is an iterator of `QueryItem`s.
  - A `NEW_RESULTSET` token starts a result set. Result sets are numbered
    from zero.
  - `ROW` tokens become rows. Other tokens are skipped.
  - `columns()` looks ahead without consuming rows.
  - `into_results()`, `into_first_result()`, `into_row()` and
    `into_row_stream()` collect or filter the items.

### `tdsproto.errors`

`TdsError` is the base class of `ProtocolError`, `ServerError` and
`RoutingError`.
- `ServerError` exposes `error`, `message` and `code`.
- `RoutingError` exposes `host` and `port`.

## Examples

```python
import datetime
import io

from tdsproto.column_data import ColumnKind, to_sql
from tdsproto.datetimes import date_from_sql, date_to_sql
from tdsproto.tdstime import Date

value = to_sql(42)
assert value.kind is ColumnKind.I32 and value.sql_type == "int"

sql_date = date_to_sql(datetime.date(2020, 4, 20))
raw = sql_date.value.encode()
assert Date.decode(io.BytesIO(raw)) == sql_date.value
assert date_from_sql(sql_date) == datetime.date(2020, 4, 20)
```

Reading results from a token sequence:

```python
from tdsproto.column_data import to_sql
from tdsproto.query import Column, QueryStream
from tdsproto.tokens import ReceivedToken, TokenKind

tokens = [
    ReceivedToken(TokenKind.NEW_RESULTSET, [Column("first", "int")]),
    ReceivedToken(TokenKind.ROW, [to_sql(1)]),
    ReceivedToken(TokenKind.NEW_RESULTSET, [Column("second", "int")]),
    ReceivedToken(TokenKind.ROW, [to_sql(2)]),
]

results = QueryStream(tokens).into_results()
assert [[row.get(0) for row in rows] for rows in results] == [[1], [2]]
```

## What it does not do

This package opens no connections and has no client. It does not log in,
negotiate encryption or send queries. It also does not decode token bytes
from a socket. `QueryStream` and `flush_done` work on `ReceivedToken` objects
that you supply from elsewhere. Numeric/decimal values are not among the
supported kinds.

## Running the tests

```
pip install -e ".[test]"
pytest
```