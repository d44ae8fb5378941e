"""Result streams of queries: metadata items and rows."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from tdsproto.column_data import ColumnData
from tdsproto.errors import ProtocolError
from tdsproto.tokens import ReceivedToken, TokenKind


@dataclass(frozen=True)
class Column:
    """A column of a result set: its name and type."""

    name: str
    column_type: Any


@dataclass(frozen=True)
class Row:
    """A single row of data from a result set."""

    columns: tuple[Column, ...]
    data: tuple[ColumnData, ...]
    result_index: int

    def get(self, key: int | str) -> Any:
        """The value of a column by position or name; ``None`` for NULL or
        a column that does not exist."""
        if isinstance(key, str):
            for column, data in zip(self.columns, self.data):
                if column.name == key:
                    return data.value
            return None
        if 0 <= key < len(self.data):
            return self.data[key].value
        return None

    def __iter__(self) -> Iterator[ColumnData]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ResultMetadata:
    """Information about the rows that follow.

    ``result_index`` counts result sets from zero.
    """

    columns: tuple[Column, ...]
    result_index: int


@dataclass(frozen=True)
class QueryItem:
    """An item of a query stream: either a row or result metadata."""

    value: Row | ResultMetadata

    def as_metadata(self) -> ResultMetadata | None:
        return self.value if isinstance(self.value, ResultMetadata) else None

    def as_row(self) -> Row | None:
        return self.value if isinstance(self.value, Row) else None


_EMPTY = object()
_END = object()


class _Failure:
    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


class QueryStream:
    """A stream of :class:`QueryItem` values built from received tokens.

    Every result set starts with a metadata item, followed by its rows.
    """

    def __init__(self, tokens: Iterable[ReceivedToken]) -> None:
        self._tokens = iter(tokens)
        self._peeked: Any = _EMPTY
        self._columns: tuple[Column, ...] | None = None
        self._result_index: int | None = None

    def __repr__(self) -> str:
        return f"QueryStream(result_index={self._result_index!r})"

    def _peek(self) -> ReceivedToken | None:
        if self._peeked is _EMPTY:
            try:
                self._peeked = next(self._tokens)
            except StopIteration:
                self._peeked = _END
            except Exception as exc:
                self._peeked = _Failure(exc)
        if isinstance(self._peeked, _Failure):
            raise self._peeked.exc
        return None if self._peeked is _END else self._peeked

    def _advance(self) -> Any:
        if self._peeked is not _EMPTY:
            item, self._peeked = self._peeked, _EMPTY
            if isinstance(item, _Failure):
                raise item.exc
            return item
        try:
            return next(self._tokens)
        except StopIteration:
            return _END

    def columns(self) -> tuple[Column, ...] | None:
        """Columns of the current result set, or of the next one when the
        next item in the stream is metadata."""
        while True:
            token = self._peek()
            if token is None or token.kind is TokenKind.ROW:
                break
            if token.kind is TokenKind.NEW_RESULTSET:
                self._columns = tuple(token.value)
                break
            self._advance()
        return self._columns

    def __iter__(self) -> QueryStream:
        return self

    def __next__(self) -> QueryItem:
        while True:
            token = self._advance()
            if token is _END:
                raise StopIteration
            if token.kind is TokenKind.NEW_RESULTSET:
                self._columns = tuple(token.value)
                self._result_index = (
                    0 if self._result_index is None else self._result_index + 1
                )
                return QueryItem(ResultMetadata(self._columns, self._result_index))
            if token.kind is TokenKind.ROW:
                if self._columns is None or self._result_index is None:
                    raise ProtocolError("row received before column metadata")
                return QueryItem(
                    Row(self._columns, tuple(token.value), self._result_index)
                )

    def into_results(self) -> list[list[Row]]:
        """Collect the rows of every result set, in order."""
        results: list[list[Row]] = []
        result: list[Row] | None = None
        for item in self:
            row = item.as_row()
            if row is not None:
                if result is None:
                    result = [row]
                else:
                    result.append(row)
            elif result is None:
                result = []
            else:
                results.append(result)
                result = None
        if result is not None:
            results.append(result)
        return results

    def into_first_result(self) -> list[Row]:
        """The rows of the first result set; further results are dropped."""
        results = self.into_results()
        return results[0] if results else []

    def into_row(self) -> Row | None:
        """The first row of the first result set, if any."""
        rows = self.into_first_result()
        return rows[0] if rows else None

    def into_row_stream(self) -> Iterator[Row]:
        """Iterate over rows only, skipping metadata."""
        for item in self:
            row = item.as_row()
            if row is not None:
                yield row