"""Offset and offset-fetch requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, field

from .utils import decode_topic_blocks, encode_topic_blocks

LATEST_OFFSETS = -1
"""Ask for the latest offsets."""

EARLIEST_OFFSET = -2
"""Ask for the earliest available offset (always a single element)."""


@dataclass
class OffsetFetchRequest:
    """Asks a broker for the committed offsets of a consumer group."""

    api_key = 9
    api_version = 0

    consumer_group: str = ""
    partitions: dict[str, list[int]] = field(default_factory=dict)

    def encode(self, pe) -> None:
        pe.put_string(self.consumer_group)
        pe.put_array_length(len(self.partitions))
        for topic, partition_ids in self.partitions.items():
            pe.put_string(topic)
            pe.put_int32_array(partition_ids)

    def add_partition(self, topic: str, partition_id: int) -> None:
        self.partitions.setdefault(topic, []).append(partition_id)


@dataclass
class OffsetFetchResponseBlock:
    offset: int = 0
    metadata: str = ""
    err: int = 0

    def decode(self, pd) -> None:
        self.offset = pd.get_int64()
        self.metadata = pd.get_string()
        self.err = pd.get_int16()

    def encode(self, pe) -> None:
        pe.put_int64(self.offset)
        pe.put_string(self.metadata)
        pe.put_int16(self.err)


@dataclass
class OffsetFetchResponse:
    blocks: dict[str, dict[int, OffsetFetchResponseBlock]] = field(default_factory=dict)

    def decode(self, pd) -> None:
        self.blocks = decode_topic_blocks(pd, OffsetFetchResponseBlock)


@dataclass
class _OffsetRequestBlock:
    time: int
    max_offsets: int

    def encode(self, pe) -> None:
        pe.put_int64(self.time)
        pe.put_int32(self.max_offsets)


@dataclass
class OffsetRequest:
    """Asks for offsets before a given time (ms) or one of the special times."""

    api_key = 2
    api_version = 0

    blocks: dict[str, dict[int, _OffsetRequestBlock]] = field(default_factory=dict)

    def encode(self, pe) -> None:
        pe.put_int32(-1)  # replica ID is always -1 for clients
        encode_topic_blocks(pe, self.blocks)

    def add_block(self, topic: str, partition_id: int, time: int, max_offsets: int) -> None:
        self.blocks.setdefault(topic, {})[partition_id] = _OffsetRequestBlock(time, max_offsets)


@dataclass
class OffsetResponseBlock:
    err: int = 0
    offsets: list[int] = field(default_factory=list)

    def decode(self, pd) -> None:
        self.err = pd.get_int16()
        self.offsets = pd.get_int64_array()

    def encode(self, pe) -> None:
        pe.put_int16(self.err)
        pe.put_int64_array(self.offsets)


@dataclass
class OffsetResponse:
    blocks: dict[str, dict[int, OffsetResponseBlock]] = field(default_factory=dict)

    def decode(self, pd) -> None:
        self.blocks = decode_topic_blocks(pd, OffsetResponseBlock)

    def encode(self, pe) -> None:
        encode_topic_blocks(pe, self.blocks)

    def get_block(self, topic: str, partition: int) -> OffsetResponseBlock | None:
        return self.blocks.get(topic, {}).get(partition)

    def add_topic_partition(self, topic: str, partition: int, offset: int) -> None:
        self.blocks.setdefault(topic, {})[partition] = OffsetResponseBlock(offsets=[offset])