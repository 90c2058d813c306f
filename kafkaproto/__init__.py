"""Kafka 0.8 wire-protocol packets, message partitioning and producer configuration."""

__version__ = "0.1.0"

__all__ = [
    "message",
    "offsets",
    "packet",
    "partitioner",
    "produce",
    "producer_config",
    "request",
    "utils",
]