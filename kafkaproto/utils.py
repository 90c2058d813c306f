"""Message key/value encoders and small helpers shared by the protocol types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, TypeVar

T = TypeVar("T")


class Encoder(Protocol):
    """Anything that can be turned into the bytes of a message key or value.

    ``length()`` must equal ``len(encode())``.
    """

    def encode(self) -> bytes: ...

    def length(self) -> int: ...


@dataclass(frozen=True)
class StringEncoder:
    """Encodes a text string as its UTF-8 bytes."""

    value: str

    def encode(self) -> bytes:
        return self.value.encode("utf-8")

    def length(self) -> int:
        """Number of bytes ``encode()`` returns."""
        return len(self.encode())


@dataclass(frozen=True)
class ByteEncoder:
    """Passes a byte string through unchanged."""

    value: bytes

    def encode(self) -> bytes:
        return bytes(self.value)

    def length(self) -> int:
        """Number of bytes ``encode()`` returns."""
        return len(self.value)


def dupe_and_sort(values: Iterable[int]) -> list[int]:
    """Return a sorted copy of ``values``, leaving the input untouched."""
    return sorted(values)


def encode_topic_blocks(pe, blocks: dict) -> None:
    """Write a topic -> partition -> block map, each block encoding itself."""
    pe.put_array_length(len(blocks))
    for topic, partitions in blocks.items():
        pe.put_string(topic)
        pe.put_array_length(len(partitions))
        for partition, block in partitions.items():
            pe.put_int32(partition)
            block.encode(pe)


def decode_topic_blocks(pd, make_block: Callable[[], T]) -> dict[str, dict[int, T]]:
    """Read a topic -> partition -> block map, building blocks with ``make_block``."""
    blocks: dict[str, dict[int, T]] = {}
    for _ in range(pd.get_array_length()):
        topic_blocks: dict[int, T] = {}
        blocks[pd.get_string()] = topic_blocks
        for _ in range(pd.get_array_length()):
            partition = pd.get_int32()
            block = make_block()
            block.decode(pd)
            topic_blocks[partition] = block
    return blocks