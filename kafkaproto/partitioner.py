"""Strategies for choosing which partition a message goes to."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

from kafkaproto.utils import Encoder

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193
_INT32_MIN = -0x80000000


def _fnv1a_32(data: bytes) -> int:
    h = _FNV32_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


class Partitioner(ABC):
    """Chooses a partition in ``[0, num_partitions)`` for a message key."""

    @abstractmethod
    def partition(self, key: Encoder | None, num_partitions: int) -> int:
        """Return the chosen partition index."""

    @abstractmethod
    def requires_consistency(self) -> bool:
        """Whether the same key must always map to the same partition."""


class RandomPartitioner(Partitioner):
    """Picks a random partition each time."""

    def __init__(self) -> None:
        self._generator = random.Random(time.time_ns())

    def partition(self, key: Encoder | None, num_partitions: int) -> int:
        return self._generator.randrange(num_partitions)

    def requires_consistency(self) -> bool:
        return False


class RoundRobinPartitioner(Partitioner):
    """Walks through the partitions one at a time."""

    def __init__(self) -> None:
        self._next = 0

    def partition(self, key: Encoder | None, num_partitions: int) -> int:
        if self._next >= num_partitions:
            self._next = 0
        choice = self._next
        self._next += 1
        return choice

    def requires_consistency(self) -> bool:
        return False


class HashPartitioner(Partitioner):
    """Uses the FNV-1a hash of the encoded key; a missing key goes to a random partition."""

    def __init__(self) -> None:
        self._random = RandomPartitioner()

    def partition(self, key: Encoder | None, num_partitions: int) -> int:
        if key is None:
            return self._random.partition(key, num_partitions)
        h = _fnv1a_32(bytes(key.encode()))
        if h >= 0x80000000:
            h -= 1 << 32
        # Negating the smallest int32 wraps back to itself.
        if h < 0 and h != _INT32_MIN:
            h = -h
        remainder = abs(h) % num_partitions
        return -remainder if h < 0 else remainder

    def requires_consistency(self) -> bool:
        return True


@dataclass
class ConstantPartitioner(Partitioner):
    """Always returns the same partition."""

    constant: int = 0

    def partition(self, key: Encoder | None, num_partitions: int) -> int:
        return self.constant

    def requires_consistency(self) -> bool:
        return True