import os

import pytest

from kafkaproto.partitioner import (
    ConstantPartitioner,
    HashPartitioner,
    RandomPartitioner,
    RoundRobinPartitioner,
)
from kafkaproto.utils import ByteEncoder, StringEncoder


def assert_partitioning_consistent(partitioner, key, num_partitions):
    choice = partitioner.partition(key, num_partitions)
    assert 0 <= choice < num_partitions
    for _ in range(1, 50):
        assert partitioner.partition(key, num_partitions) == choice


def test_random_partitioner():
    partitioner = RandomPartitioner()
    assert partitioner.partition(None, 1) == 0
    for _ in range(1, 50):
        choice = partitioner.partition(None, 50)
        assert 0 <= choice < 50
    assert partitioner.requires_consistency() is False


def test_round_robin_partitioner():
    partitioner = RoundRobinPartitioner()
    assert partitioner.partition(None, 1) == 0
    for i in range(1, 50):
        assert partitioner.partition(None, 7) == i % 7
    assert partitioner.requires_consistency() is False


def test_hash_partitioner():
    partitioner = HashPartitioner()
    assert partitioner.partition(None, 1) == 0
    for _ in range(1, 50):
        choice = partitioner.partition(None, 50)
        assert 0 <= choice < 50
    for _ in range(1, 50):
        assert_partitioning_consistent(partitioner, ByteEncoder(os.urandom(256)), 50)
    assert partitioner.requires_consistency() is True


def test_hash_partitioner_same_key_across_instances():
    key = StringEncoder("some key")
    choice = HashPartitioner().partition(key, 13)
    assert 0 <= choice < 13
    for _ in range(5):
        assert HashPartitioner().partition(key, 13) == choice


def test_hash_partitioner_single_partition():
    assert HashPartitioner().partition(StringEncoder("abc"), 1) == 0


def test_hash_partitioner_propagates_key_errors():
    class BrokenKey:
        def encode(self):
            raise ValueError("cannot encode")

        def length(self):
            return 0

    with pytest.raises(ValueError, match="cannot encode"):
        HashPartitioner().partition(BrokenKey(), 10)


def test_constant_partitioner():
    partitioner = ConstantPartitioner(constant=0)
    for _ in range(1, 50):
        assert partitioner.partition(None, 50) == 0
    assert partitioner.requires_consistency() is True