"""Tokens received from the server and helpers that consume them."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from tdsproto.errors import ProtocolError, RoutingError, ServerError

_log = logging.getLogger(__name__)


class TokenKind(enum.Enum):
    """The kinds of token a response from the server is made of."""

    NEW_RESULTSET = enum.auto()
    ROW = enum.auto()
    DONE = enum.auto()
    DONE_IN_PROC = enum.auto()
    DONE_PROC = enum.auto()
    RETURN_STATUS = enum.auto()
    RETURN_VALUE = enum.auto()
    ORDER = enum.auto()
    ENV_CHANGE = enum.auto()
    INFO = enum.auto()
    LOGIN_ACK = enum.auto()
    SSPI = enum.auto()
    FEATURE_EXT_ACK = enum.auto()
    FED_AUTH_INFO = enum.auto()
    ERROR = enum.auto()


@dataclass(frozen=True)
class ReceivedToken:
    """A decoded token of the given kind and its payload.

    A ``NEW_RESULTSET`` token carries the columns of the following rows,
    a ``ROW`` token carries the row's values. An ``ENV_CHANGE`` whose
    payload has ``host`` and ``port`` attributes is a routing request.
    """

    kind: TokenKind
    value: Any = None


def _routing_target(value: Any) -> tuple[str, int] | None:
    host = getattr(value, "host", None)
    port = getattr(value, "port", None)
    if host is None or port is None:
        return None
    return host, port


def flush_done(tokens: Iterable[ReceivedToken]) -> Any:
    """Consume tokens up to the first ``DONE`` and return its payload.

    The first server error seen before ``DONE`` is raised as a
    :class:`ServerError`; failing that, a routing request is raised as a
    :class:`RoutingError`. Running out of tokens is a protocol error.
    """
    first_error: Any = None
    routing: RoutingError | None = None

    for token in tokens:
        if token.kind is TokenKind.ERROR:
            _log.error("server error: %s", getattr(token.value, "message", token.value))
            if first_error is None:
                first_error = token.value
        elif token.kind is TokenKind.DONE:
            if first_error is not None:
                raise ServerError(first_error)
            if routing is not None:
                raise routing
            return token.value
        elif token.kind is TokenKind.ENV_CHANGE:
            target = _routing_target(token.value)
            if target is not None:
                routing = RoutingError(*target)

    raise ProtocolError("Never got DONE token.")