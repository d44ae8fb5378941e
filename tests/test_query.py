from types import SimpleNamespace

import pytest

from tdsproto.column_data import ColumnData, ColumnKind, null, to_sql
from tdsproto.errors import ProtocolError, ServerError
from tdsproto.query import Column, QueryItem, QueryStream, ResultMetadata, Row
from tdsproto.tokens import ReceivedToken, TokenKind


def meta(*names, kind=ColumnKind.I32):
    return ReceivedToken(TokenKind.NEW_RESULTSET, [Column(n, kind) for n in names])


def row(*values):
    return ReceivedToken(
        TokenKind.ROW, [v if isinstance(v, ColumnData) else to_sql(v) for v in values]
    )


def done():
    return ReceivedToken(TokenKind.DONE, None)


def two_selects():
    return [meta("first"), row(1), done(), meta("second"), row(2), done()]


def _failing_tokens():
    yield meta("a")
    yield row(1)
    raise ServerError(SimpleNamespace(message="deadlock", code=1205))


def test_multiple_queries():
    tokens = [
        meta("first", kind=ColumnKind.STRING),
        row("a"),
        done(),
        meta("second", kind=ColumnKind.STRING),
        row("b"),
        done(),
    ]
    seen = []
    for item in QueryStream(tokens):
        m = item.as_metadata()
        r = item.as_row()
        if m is not None and m.result_index == 0:
            assert m.columns[0].name == "first"
        elif r is not None and r.result_index == 0:
            assert r.get(0) == "a"
        elif m is not None:
            assert m.columns[0].name == "second"
        else:
            assert r.get(0) == "b"
        seen.append(item)
    assert len(seen) == 4


def test_columns_fetch_should_work():
    stream = QueryStream(two_selects())
    cols = stream.columns()
    assert cols[0].name == "first"
    next(stream)
    cols = stream.columns()
    assert cols[0].name == "first"
    next(stream)
    cols = stream.columns()
    assert cols[0].name == "second"


def test_columns_on_empty_stream():
    assert QueryStream([done()]).columns() is None


def test_into_row_stream_should_work():
    rows = QueryStream(two_selects()).into_row_stream()
    assert next(rows).get(0) == 1
    assert next(rows).get(0) == 2
    with pytest.raises(StopIteration):
        next(rows)


def test_stored_procedures():
    tokens = [meta(""), row(1), row(2), row(3), ReceivedToken(TokenKind.DONE_PROC)]
    rows = QueryStream(tokens).into_first_result()
    assert [r.get(0) for r in rows] == [1, 2, 3]


def test_multiple_stored_procedure_functions():
    tokens = [
        meta(""),
        row(1),
        row(1),
        row(1),
        ReceivedToken(TokenKind.DONE_IN_PROC),
        ReceivedToken(TokenKind.RETURN_STATUS, 0),
        meta(""),
        row(2),
        row(2),
        ReceivedToken(TokenKind.DONE_PROC),
    ]
    values = [r.get(0) for r in QueryStream(tokens).into_row_stream()]
    assert values == [1, 1, 1, 2, 2]


def test_nbc_rows():
    values = [None, None, None, None, 1, None, None, None, 2, None, None, 3, None, 4]
    cells = [null(ColumnKind.I32) if v is None else to_sql(v) for v in values]
    names = [""] * len(values)
    tokens = [meta(*names), ReceivedToken(TokenKind.ROW, cells), done()]
    result = QueryStream(tokens).into_row()
    assert [result.get(i) for i in range(len(values))] == values


def test_read_nullable_u8():
    tokens = [meta("a", kind=ColumnKind.U8), row(null(ColumnKind.U8))]
    result = QueryStream(tokens).into_row()
    assert list(result) == [ColumnData(ColumnKind.U8, None)]
    assert result.get(0) is None


def test_warnings_should_not_affect_column_fetch():
    tokens = [
        ReceivedToken(TokenKind.INFO, SimpleNamespace(message="Null value is eliminated")),
        ReceivedToken(TokenKind.DONE_IN_PROC),
        meta("col", kind=ColumnKind.I32),
        row(1),
        ReceivedToken(TokenKind.DONE_PROC),
    ]
    metas = [i.as_metadata() for i in QueryStream(tokens) if i.as_metadata()]
    assert [(m.columns[0].name, m.columns[0].column_type) for m in metas] == [
        ("col", ColumnKind.I32)
    ]


def test_get_by_name():
    result = QueryStream([meta("foo", "bar"), row(5, 6)]).into_row()
    assert result.get("foo") == 5
    assert result.get("bar") == 6
    assert result.get("missing") is None
    assert result.get(7) is None


def test_into_results_collects_each_set():
    tokens = [meta("a"), row(1), row(2), meta("b"), row(3)]
    results = QueryStream(tokens).into_results()
    assert [[r.get(0) for r in rs] for rs in results] == [[1, 2], [3]]


def test_into_row_none_for_empty_result():
    assert QueryStream([meta("a"), done()]).into_row() is None
    assert QueryStream([]).into_first_result() == []


def test_result_index_increments():
    indices = [
        (type(i.value).__name__, i.value.result_index) for i in QueryStream(two_selects())
    ]
    assert indices == [
        ("ResultMetadata", 0),
        ("Row", 0),
        ("ResultMetadata", 1),
        ("Row", 1),
    ]


def test_query_item_accessors():
    m = ResultMetadata((Column("x", ColumnKind.I32),), 0)
    r = Row((Column("x", ColumnKind.I32),), (to_sql(1),), 0)
    assert QueryItem(m).as_metadata() is m
    assert QueryItem(m).as_row() is None
    assert QueryItem(r).as_row() is r
    assert QueryItem(r).as_metadata() is None


def test_row_before_metadata_is_protocol_error():
    with pytest.raises(ProtocolError):
        next(QueryStream([row(1)]))


def test_errors_from_tokens_propagate():
    stream = QueryStream(_failing_tokens())
    next(stream)
    next(stream)
    with pytest.raises(ServerError) as peeked:
        stream.columns()
    with pytest.raises(ServerError) as consumed:
        next(stream)
    assert peeked.value is consumed.value
    assert consumed.value.code == 1205