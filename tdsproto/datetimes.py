"""Conversions between the standard library's date and time values and the
server's date and time types."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from tdsproto import tdstime
from tdsproto.column_data import ColumnData, ColumnKind
from tdsproto.errors import ProtocolError

_YEAR_1 = date(1, 1, 1)
_YEAR_1900 = date(1900, 1, 1)
_NANOS_PER_SECOND = 10**9
_MAX_SCALE = 7


def _from_days(days: int, start: date) -> date:
    return start + timedelta(days=days)


def _days_since(value: date, start: date) -> int:
    return (value - start).days


def _nanos_since_midnight(value: time) -> int:
    seconds = (value.hour * 60 + value.minute) * 60 + value.second
    return seconds * _NANOS_PER_SECOND + value.microsecond * 1000


def _time_from_nanos(nanos: int) -> time:
    seconds, micros = divmod(nanos // 1000, 10**6)
    minutes, second = divmod(seconds, 60)
    hour, minute = divmod(minutes, 60)
    return time(hour, minute, second, micros)


def _increments_to_nanos(value: tdstime.Time) -> int:
    if not 0 <= value.scale <= _MAX_SCALE:
        raise ProtocolError(f"timen: invalid scale {value.scale}")
    return value.increments * 10 ** (9 - value.scale)


def _datetime2_from(value: tdstime.DateTime2) -> datetime:
    return datetime.combine(
        _from_days(value.date.days, _YEAR_1),
        _time_from_nanos(_increments_to_nanos(value.time)),
    )


def _datetime2_of(naive: datetime) -> tdstime.DateTime2:
    increments = _nanos_since_midnight(naive.time()) // 100
    return tdstime.DateTime2(
        tdstime.Date(_days_since(naive.date(), _YEAR_1)),
        tdstime.Time(increments, _MAX_SCALE),
    )


def _expect(data: ColumnData, target: str, *kinds: ColumnKind):
    if data.kind not in kinds:
        raise TypeError(f"cannot convert {data.kind.name} to {target}")
    return data.value


def date_to_sql(value: date) -> ColumnData:
    """A ``date`` value: days since 0001-01-01."""
    return ColumnData(ColumnKind.DATE, tdstime.Date(value.toordinal() - 1))


def time_to_sql(value: time) -> ColumnData:
    """A ``time`` value with 100 ns increments (scale 7)."""
    if value.tzinfo is not None:
        raise ValueError("the server time type carries no offset")
    increments = _nanos_since_midnight(value) // 100
    return ColumnData(ColumnKind.TIME, tdstime.Time(increments, _MAX_SCALE))


def datetime_to_sql(value: datetime, tds73: bool = True) -> ColumnData:
    """Convert a datetime.

    With TDS 7.3 a naive value becomes ``datetime2`` and an aware one
    ``datetimeoffset``; with TDS 7.2 only naive values are accepted and
    become ``datetime``.
    """
    offset = value.utcoffset()
    if offset is None:
        naive = value.replace(tzinfo=None)
        if tds73:
            return ColumnData(ColumnKind.DATETIME2, _datetime2_of(naive))
        days = _days_since(naive.date(), _YEAR_1900)
        fragments = _nanos_since_midnight(naive.time()) * 300 // _NANOS_PER_SECOND
        return ColumnData(ColumnKind.DATETIME, tdstime.DateTime(days, fragments))
    if not tds73:
        raise ValueError("datetimes with an offset need TDS 7.3 or later")
    seconds = offset.days * 86400 + offset.seconds
    minutes = abs(seconds) // 60 * (1 if seconds >= 0 else -1)
    utc = value.astimezone(timezone.utc).replace(tzinfo=None)
    return ColumnData(
        ColumnKind.DATETIMEOFFSET,
        tdstime.DateTimeOffset(_datetime2_of(utc), minutes),
    )


def date_from_sql(data: ColumnData) -> date | None:
    """Read a ``date`` value; NULL gives ``None``."""
    value = _expect(data, "date", ColumnKind.DATE)
    if value is None:
        return None
    return _from_days(value.days, _YEAR_1)


def time_from_sql(data: ColumnData) -> time | None:
    """Read a ``time`` value, truncated to microseconds; NULL gives ``None``."""
    value = _expect(data, "time", ColumnKind.TIME)
    if value is None:
        return None
    return _time_from_nanos(_increments_to_nanos(value))


def datetime_from_sql(data: ColumnData) -> datetime | None:
    """Read a naive datetime from ``smalldatetime``, ``datetime2`` or ``datetime``."""
    value = _expect(
        data,
        "datetime",
        ColumnKind.SMALLDATETIME,
        ColumnKind.DATETIME2,
        ColumnKind.DATETIME,
    )
    if value is None:
        return None
    if data.kind is ColumnKind.SMALLDATETIME:
        minutes_nanos = value.seconds_fragments * 60 * _NANOS_PER_SECOND
        return datetime.combine(
            _from_days(value.days, _YEAR_1900), _time_from_nanos(minutes_nanos)
        )
    if data.kind is ColumnKind.DATETIME:
        nanos = value.seconds_fragments * _NANOS_PER_SECOND // 300
        return datetime.combine(
            _from_days(value.days, _YEAR_1900), _time_from_nanos(nanos)
        )
    return _datetime2_from(value)


def aware_datetime_from_sql(data: ColumnData) -> datetime | None:
    """Read an aware datetime from ``datetimeoffset`` or a UTC ``datetime2``."""
    value = _expect(
        data, "aware datetime", ColumnKind.DATETIMEOFFSET, ColumnKind.DATETIME2
    )
    if value is None:
        return None
    if data.kind is ColumnKind.DATETIME2:
        return _datetime2_from(value).replace(tzinfo=timezone.utc)
    utc = _datetime2_from(value.datetime2).replace(tzinfo=timezone.utc)
    return utc.astimezone(timezone(timedelta(minutes=value.offset)))