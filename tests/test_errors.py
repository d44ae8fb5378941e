from types import SimpleNamespace

import pytest

from tdsproto.errors import ProtocolError, RoutingError, ServerError, TdsError


def test_protocol_error_keeps_message():
    err = ProtocolError("Never got DONE token.")
    assert str(err) == "Never got DONE token."
    assert isinstance(err, TdsError)


def test_routing_error_carries_address():
    err = RoutingError("localhost", 1433)
    assert err.host == "localhost"
    assert err.port == 1433
    assert "localhost" in str(err)
    assert isinstance(err, TdsError)


def test_server_error_exposes_payload_fields():
    payload = SimpleNamespace(message="boom", code=1205)
    err = ServerError(payload)
    assert err.error is payload
    assert err.message == "boom"
    assert err.code == 1205
    assert str(err) == "boom"


def test_server_error_with_plain_payload():
    err = ServerError("something failed")
    assert err.message == "something failed"
    assert err.code is None


def test_server_error_is_catchable_as_base():
    err = ServerError(SimpleNamespace(message="bad", code=1))
    with pytest.raises(TdsError) as info:
        raise err
    assert info.value is err
    assert info.value.code == 1
    assert info.value.message == "bad"