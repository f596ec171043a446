"""XML values and their schema information."""

from __future__ import annotations

import dataclasses
import struct
from dataclasses import dataclass

_UNKNOWN_LENGTH = 0xFFFFFFFFFFFFFFFE
_PLP_TERMINATOR = b"\x00\x00\x00\x00"


@dataclass(frozen=True)
class XmlSchema:
    """Where the schema collection bound to an XML value is defined."""

    db_name: str
    owner: str
    collection: str


@dataclass(frozen=True)
class XmlData:
    """XML text with optional schema information; validation is the server's job."""

    data: str
    schema: XmlSchema | None = None

    def with_schema(self, schema: XmlSchema) -> XmlData:
        """Return a copy bound to the given schema."""
        return dataclasses.replace(self, schema=schema)

    def __str__(self) -> str:
        return self.data

    def encode(self) -> bytes:
        """Return the value as a partially length-prefixed UTF-16 stream."""
        payload = self.data.encode("utf-16-le")
        return b"".join(
            (
                struct.pack("<Q", _UNKNOWN_LENGTH),
                struct.pack("<I", len(payload)),
                payload,
                _PLP_TERMINATOR,
            )
        )