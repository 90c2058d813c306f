"""Low-level reading and writing of Kafka wire-format packets.

Encoding happens in two passes: a :class:`PrepEncoder` measures how many
bytes an object needs, then a :class:`RealEncoder` of exactly that size
writes them. Decoding reads from a :class:`RealDecoder`. Fields whose value
depends on later bytes (lengths, checksums) are handled with ``push`` and
``pop``.
"""

from __future__ import annotations

import logging
import struct
from typing import Protocol

logger = logging.getLogger("kafkaproto")
logger.addHandler(logging.NullHandler())

MAX_REQUEST_SIZE = 100 * 1024 * 1024
"""Largest request, in bytes, that will be encoded."""

MAX_RESPONSE_SIZE = 100 * 1024 * 1024
"""Largest response, in bytes, that will be parsed."""

_MAX_INT16 = 0x7FFF
_MAX_INT32 = 0x7FFFFFFF
_MAX_ARRAY_LENGTH = 2 * 0xFFFF


class EncodingError(Exception):
    """A value could not be encoded under the protocol's rules."""

    def __init__(self, message: str = "kafka: Error while encoding packet.") -> None:
        super().__init__(message)


class DecodingError(Exception):
    """The input could not be decoded as a valid packet."""

    def __init__(self, info: str = "") -> None:
        self.info = info
        super().__init__(f"kafka: Error while decoding packet: {info}")


class InsufficientData(DecodingError):
    """The input ended before the value being read was complete."""

    def __init__(self) -> None:
        super().__init__("insufficient data to decode packet, more bytes expected")


class PushEncoder(Protocol):
    """A field written once the bytes it covers are known."""

    def save_offset(self, offset: int) -> None: ...

    def reserve_length(self) -> int: ...

    def run(self, cur_offset: int, buf: bytearray) -> None: ...


class PushDecoder(Protocol):
    """A field checked once the bytes it covers have been read."""

    def save_offset(self, offset: int) -> None: ...

    def reserve_length(self) -> int: ...

    def check(self, cur_offset: int, buf: bytes) -> None: ...


class Encodable(Protocol):
    def encode(self, pe) -> None: ...


class Decodable(Protocol):
    def decode(self, pd) -> None: ...


class LengthField:
    """A big-endian int32 holding the number of bytes that follow it."""

    def __init__(self) -> None:
        self.start_offset = 0

    def save_offset(self, offset: int) -> None:
        self.start_offset = offset

    def reserve_length(self) -> int:
        return 4

    def run(self, cur_offset: int, buf: bytearray) -> None:
        struct.pack_into(">i", buf, self.start_offset, cur_offset - self.start_offset - 4)

    def check(self, cur_offset: int, buf: bytes) -> None:
        (stored,) = struct.unpack_from(">i", buf, self.start_offset)
        if stored != cur_offset - self.start_offset - 4:
            raise DecodingError("length field invalid")


def _encode_text(text: str) -> bytes:
    return text.encode("utf-8")


class PrepEncoder:
    """Computes the encoded size of a packet without writing it."""

    def __init__(self) -> None:
        self.length = 0
        self._depth = 0

    def put_int8(self, value: int) -> None:
        self.length += 1

    def put_int16(self, value: int) -> None:
        self.length += 2

    def put_int32(self, value: int) -> None:
        self.length += 4

    def put_int64(self, value: int) -> None:
        self.length += 8

    def put_array_length(self, n: int) -> None:
        if n > _MAX_INT32:
            raise EncodingError()
        self.length += 4

    def put_bytes(self, data: bytes | None) -> None:
        self.length += 4
        if data is None:
            return
        if len(data) > _MAX_INT32:
            raise EncodingError()
        self.length += len(data)

    def put_raw_bytes(self, data: bytes) -> None:
        if len(data) > _MAX_INT32:
            raise EncodingError()
        self.length += len(data)

    def put_string(self, text: str) -> None:
        self.length += 2
        size = len(_encode_text(text))
        if size > _MAX_INT16:
            raise EncodingError()
        self.length += size

    def put_int32_array(self, values) -> None:
        values = list(values)
        self.put_array_length(len(values))
        self.length += 4 * len(values)

    def put_int64_array(self, values) -> None:
        values = list(values)
        self.put_array_length(len(values))
        self.length += 8 * len(values)

    def push(self, field: PushEncoder) -> None:
        self.length += field.reserve_length()
        self._depth += 1

    def pop(self) -> None:
        """Close the most recent ``push``; the reserved space was already counted."""
        if self._depth == 0:
            raise EncodingError("kafka: pop without a matching push")
        self._depth -= 1


class RealEncoder:
    """Writes a packet into a buffer of a size fixed in advance."""

    def __init__(self, size: int) -> None:
        self.raw = bytearray(size)
        self.offset = 0
        self._stack: list[PushEncoder] = []

    def _pack(self, fmt: str, value: int) -> None:
        try:
            struct.pack_into(fmt, self.raw, self.offset, value)
        except struct.error as exc:
            raise EncodingError(f"kafka: cannot encode {value!r}: {exc}") from exc
        self.offset += struct.calcsize(fmt)

    def _write(self, data: bytes) -> None:
        end = self.offset + len(data)
        if end > len(self.raw):
            raise EncodingError("kafka: encoded data overflows the packet buffer")
        self.raw[self.offset:end] = data
        self.offset = end

    def put_int8(self, value: int) -> None:
        self._pack(">b", value)

    def put_int16(self, value: int) -> None:
        self._pack(">h", value)

    def put_int32(self, value: int) -> None:
        self._pack(">i", value)

    def put_int64(self, value: int) -> None:
        self._pack(">q", value)

    def put_array_length(self, n: int) -> None:
        self.put_int32(n)

    def put_raw_bytes(self, data: bytes) -> None:
        self._write(bytes(data))

    def put_bytes(self, data: bytes | None) -> None:
        if data is None:
            self.put_int32(-1)
            return
        self.put_int32(len(data))
        self._write(bytes(data))

    def put_string(self, text: str) -> None:
        encoded = _encode_text(text)
        self.put_int16(len(encoded))
        self._write(encoded)

    def put_int32_array(self, values) -> None:
        values = list(values)
        self.put_array_length(len(values))
        for value in values:
            self.put_int32(value)

    def put_int64_array(self, values) -> None:
        values = list(values)
        self.put_array_length(len(values))
        for value in values:
            self.put_int64(value)

    def push(self, field: PushEncoder) -> None:
        field.save_offset(self.offset)
        self.offset += field.reserve_length()
        self._stack.append(field)

    def pop(self) -> None:
        field = self._stack.pop()
        field.run(self.offset, self.raw)


class RealDecoder:
    """Reads Kafka primitives from a byte string."""

    def __init__(self, raw: bytes) -> None:
        self.raw = bytes(raw)
        self.offset = 0
        self._stack: list[PushDecoder] = []

    def _exhaust(self) -> InsufficientData:
        self.offset = len(self.raw)
        return InsufficientData()

    def _unpack(self, fmt: str) -> int:
        size = struct.calcsize(fmt)
        if self.remaining() < size:
            raise self._exhaust()
        (value,) = struct.unpack_from(fmt, self.raw, self.offset)
        self.offset += size
        return value

    def get_int8(self) -> int:
        return self._unpack(">b")

    def get_int16(self) -> int:
        return self._unpack(">h")

    def get_int32(self) -> int:
        return self._unpack(">i")

    def get_int64(self) -> int:
        return self._unpack(">q")

    def get_array_length(self) -> int:
        n = self._unpack(">I")
        if n > self.remaining():
            raise self._exhaust()
        if n > _MAX_ARRAY_LENGTH:
            raise DecodingError("getArrayLength failed: Invalid array length")
        return n

    def _take(self, n: int) -> bytes:
        if n > self.remaining():
            raise self._exhaust()
        data = self.raw[self.offset:self.offset + n]
        self.offset += n
        return data

    def get_bytes(self) -> bytes | None:
        n = self.get_int32()
        if n < -1:
            raise DecodingError("getBytes failed")
        if n == -1:
            return None
        return self._take(n)

    def get_string(self) -> str:
        n = self.get_int16()
        if n < -1:
            raise DecodingError("getString failed")
        if n <= 0:
            return ""
        return self._take(n).decode("utf-8", errors="replace")

    def _get_array(self, item_fmt: str) -> list[int]:
        n = self._unpack(">I")
        size = struct.calcsize(item_fmt)
        if self.remaining() < size * n:
            raise self._exhaust()
        values = list(struct.unpack_from(f">{n}{item_fmt}", self.raw, self.offset))
        self.offset += size * n
        return values

    def get_int32_array(self) -> list[int]:
        return self._get_array("i")

    def get_int64_array(self) -> list[int]:
        return self._get_array("q")

    def remaining(self) -> int:
        return len(self.raw) - self.offset

    def get_subset(self, length: int) -> RealDecoder:
        if length > self.remaining():
            raise self._exhaust()
        start = self.offset
        self.offset += length
        return RealDecoder(self.raw[start:self.offset])

    def push(self, field: PushDecoder) -> None:
        field.save_offset(self.offset)
        reserve = field.reserve_length()
        if self.remaining() < reserve:
            raise self._exhaust()
        self._stack.append(field)
        self.offset += reserve

    def pop(self) -> None:
        field = self._stack.pop()
        field.check(self.offset, self.raw)


def encode(obj: Encodable) -> bytes:
    """Encode ``obj`` into its wire bytes."""
    prep = PrepEncoder()
    obj.encode(prep)
    if prep.length > MAX_REQUEST_SIZE:
        raise EncodingError(
            f"kafka: encoded packet of {prep.length} bytes exceeds the maximum request size"
        )
    real = RealEncoder(prep.length)
    obj.encode(real)
    return bytes(real.raw)


def decode(data: bytes | None, obj: Decodable) -> None:
    """Decode ``data`` into ``obj``, requiring every byte to be consumed."""
    if data is None:
        return
    decoder = RealDecoder(data)
    obj.decode(decoder)
    if decoder.remaining() != 0:
        raise DecodingError(
            f"invalid length: {decoder.remaining()} bytes left over after decoding"
        )