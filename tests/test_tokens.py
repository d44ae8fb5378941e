from types import SimpleNamespace

import pytest

from tdsproto.errors import ProtocolError, RoutingError, ServerError
from tdsproto.tokens import ReceivedToken, TokenKind, flush_done


def _done(value="done"):
    return ReceivedToken(TokenKind.DONE, value)


def test_returns_done_payload():
    tokens = [
        ReceivedToken(TokenKind.INFO, "hello"),
        ReceivedToken(TokenKind.ENV_CHANGE, "database"),
        _done({"rows": 3}),
    ]
    assert flush_done(tokens) == {"rows": 3}


def test_stops_at_first_done():
    tokens = iter([_done("first"), _done("second")])
    assert flush_done(tokens) == "first"
    assert next(tokens) == _done("second")


def test_missing_done_is_protocol_error():
    with pytest.raises(ProtocolError, match="Never got DONE token."):
        flush_done([ReceivedToken(TokenKind.INFO, "x")])


def test_empty_stream_is_protocol_error():
    with pytest.raises(ProtocolError):
        flush_done([])


def test_first_error_is_raised():
    first = SimpleNamespace(message="first failure", code=1205)
    second = SimpleNamespace(message="second failure", code=50000)
    tokens = [
        ReceivedToken(TokenKind.ERROR, first),
        ReceivedToken(TokenKind.ERROR, second),
        _done(),
    ]
    with pytest.raises(ServerError) as info:
        flush_done(tokens)
    assert info.value.error is first
    assert info.value.code == 1205
    assert info.value.message == "first failure"


def test_routing_is_raised():
    target = SimpleNamespace(host="db.example.com", port=1433)
    tokens = [ReceivedToken(TokenKind.ENV_CHANGE, target), _done()]
    with pytest.raises(RoutingError) as info:
        flush_done(tokens)
    assert info.value.host == "db.example.com"
    assert info.value.port == 1433


def test_error_takes_precedence_over_routing():
    target = SimpleNamespace(host="db.example.com", port=1433)
    error = SimpleNamespace(message="boom", code=7)
    tokens = [
        ReceivedToken(TokenKind.ENV_CHANGE, target),
        ReceivedToken(TokenKind.ERROR, error),
        _done(),
    ]
    with pytest.raises(ServerError) as info:
        flush_done(tokens)
    assert info.value.error is error


def test_error_after_done_is_not_seen():
    error = SimpleNamespace(message="late", code=1)
    tokens = [_done("ok"), ReceivedToken(TokenKind.ERROR, error)]
    assert flush_done(tokens) == "ok"


def test_missing_done_with_error_is_protocol_error():
    error = SimpleNamespace(message="boom", code=7)
    with pytest.raises(ProtocolError):
        flush_done([ReceivedToken(TokenKind.ERROR, error)])