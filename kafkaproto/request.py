"""Request framing and response header parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from kafkaproto import packet
from kafkaproto.packet import DecodingError, LengthField


class RequestBody(Protocol):
    """A request payload with its API key and version."""

    api_key: int
    api_version: int

    def encode(self, pe) -> None: ...


@dataclass
class Request:
    """A full request: length prefix, header and body."""

    correlation_id: int
    client_id: str
    body: RequestBody

    def encode(self, pe) -> None:
        pe.push(LengthField())
        pe.put_int16(self.body.api_key)
        pe.put_int16(self.body.api_version)
        pe.put_int32(self.correlation_id)
        pe.put_string(self.client_id)
        self.body.encode(pe)
        pe.pop()


@dataclass
class ResponseHeader:
    """The length and correlation ID that start every response."""

    length: int = 0
    correlation_id: int = 0

    def decode(self, pd) -> None:
        self.length = pd.get_int32()
        if self.length <= 4 or self.length > packet.MAX_RESPONSE_SIZE:
            raise DecodingError(f"Message too large or too small. Got {self.length}")
        self.correlation_id = pd.get_int32()