"""Exceptions raised while talking to the server or decoding its data."""

from __future__ import annotations

from typing import Any


class TdsError(Exception):
    """Base class of every error raised by this package."""


class ProtocolError(TdsError):
    """The data received did not follow the protocol."""


class ServerError(TdsError):
    """The server reported an error.

    ``error`` is the error payload received from the server. Its ``message``
    and ``code`` attributes are exposed when present.
    """

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return str(getattr(self.error, "message", self.error))

    @property
    def code(self) -> int | None:
        return getattr(self.error, "code", None)


class RoutingError(TdsError):
    """The server asked the client to reconnect to another address."""

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        super().__init__(f"server requested routing to {host}:{port}")