"""Produce responses: the per-partition results of a produce request."""

from __future__ import annotations

from dataclasses import dataclass, field

from .utils import decode_topic_blocks, encode_topic_blocks


@dataclass
class ProduceResponseBlock:
    """The outcome for one partition: an error code and the base offset."""

    err: int = 0
    offset: int = 0

    def decode(self, pd) -> None:
        self.err = pd.get_int16()
        self.offset = pd.get_int64()

    def encode(self, pe) -> None:
        pe.put_int16(self.err)
        pe.put_int64(self.offset)


@dataclass
class ProduceResponse:
    """Results of a produce request, keyed by topic and then partition."""

    blocks: dict[str, dict[int, ProduceResponseBlock]] = field(default_factory=dict)

    def decode(self, pd) -> None:
        self.blocks = decode_topic_blocks(pd, ProduceResponseBlock)

    def encode(self, pe) -> None:
        encode_topic_blocks(pe, self.blocks)

    def get_block(self, topic: str, partition: int) -> ProduceResponseBlock | None:
        """Return the block for ``topic``/``partition``, or None if absent."""
        return self.blocks.get(topic, {}).get(partition)

    def add_topic_partition(self, topic: str, partition: int, err: int) -> None:
        """Record a result for ``topic``/``partition`` with the given error code."""
        self.blocks.setdefault(topic, {})[partition] = ProduceResponseBlock(err=err)