"""XML values and the schema information attached to them."""

from __future__ import annotations

import dataclasses
import struct
from dataclasses import dataclass
from typing import Any

_UNKNOWN_PLP_LENGTH = 0xFFFFFFFFFFFFFFFE
_PLP_TERMINATOR = 0


@dataclass(frozen=True)
class XmlSchema:
    """Location of the XML schema collection a value is bound to."""

    db_name: str
    owner: str
    collection: str

    def __post_init__(self) -> None:
        for field in ("db_name", "owner", "collection"):
            object.__setattr__(self, field, str(getattr(self, field)))


@dataclass(frozen=True)
class XmlData:
    """An XML document as text, optionally with its schema.

    Validation of the document happens in the database.
    """

    data: str
    schema: XmlSchema | None = None

    def __init__(self, data: Any, schema: XmlSchema | None = None) -> None:
        object.__setattr__(self, "data", str(data))
        object.__setattr__(self, "schema", schema)

    def __str__(self) -> str:
        return self.data

    def with_schema(self, schema: XmlSchema) -> XmlData:
        """Return a copy bound to ``schema``."""
        return dataclasses.replace(self, schema=schema)

    def encode(self) -> bytes:
        """Encode as a partially length-prefixed UTF-16 value of unknown size."""
        chunk = self.data.encode("utf-16-le")
        return b"".join(
            (
                struct.pack("<Q", _UNKNOWN_PLP_LENGTH),
                struct.pack("<I", len(chunk)),
                chunk,
                struct.pack("<I", _PLP_TERMINATOR),
            )
        )