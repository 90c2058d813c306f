"""Producer settings and their validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import IntEnum
from typing import Callable, Optional

from kafkaproto import packet
from kafkaproto.packet import logger
from kafkaproto.partitioner import HashPartitioner, Partitioner


class RequiredAcks(IntEnum):
    """How many replica acknowledgements a broker waits for before responding.

    Brokers older than 0.8.2.0 also accept any other positive int16, meaning
    "wait for that many acknowledgements"; newer brokers reject such values.
    """

    NO_RESPONSE = 0
    WAIT_FOR_LOCAL = 1
    WAIT_FOR_ALL = -1


class ConfigurationError(ValueError):
    """A configuration value does not make sense."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"kafka: Invalid Configuration ({reason})")


def force_flush_threshold() -> int:
    """Byte count at which an accumulated batch must be flushed.

    Leaves 10 KiB of room below the maximum request size for overhead.
    """
    return packet.MAX_REQUEST_SIZE - 10 * 1024


_ZERO = timedelta(0)
_MILLISECOND = timedelta(milliseconds=1)


@dataclass
class ProducerConfig:
    """Options controlling how a producer batches and delivers messages.

    ``compression`` is a codec number; 0 means no compression.
    ``max_messages_per_req`` of 0 means unlimited.
    """

    partitioner: Optional[Callable[[], Partitioner]] = HashPartitioner
    required_acks: int = RequiredAcks.WAIT_FOR_LOCAL
    timeout: timedelta = field(default_factory=timedelta)
    compression: int = 0
    flush_msg_count: int = 0
    flush_frequency: timedelta = field(default_factory=timedelta)
    flush_byte_count: int = 0
    ack_successes: bool = False
    max_message_bytes: int = 1_000_000
    max_messages_per_req: int = 0
    channel_buffer_size: int = 0
    retry_backoff: timedelta = field(default_factory=lambda: timedelta(milliseconds=250))

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if any setting is invalid.

        Settings that are accepted but questionable are reported as warnings
        on the package logger.
        """
        if self.required_acks < -1:
            raise ConfigurationError("Invalid RequiredAcks")
        if self.required_acks > 1:
            logger.warning(
                "ProducerConfig.RequiredAcks > 1 is deprecated and will raise an "
                "exception with kafka >= 0.8.2.0."
            )

        if self.timeout < _ZERO:
            raise ConfigurationError("Invalid Timeout")
        if self.timeout % _MILLISECOND != _ZERO:
            logger.warning(
                "ProducerConfig.Timeout only supports millisecond resolution; "
                "finer precision will be truncated."
            )

        if self.flush_msg_count < 0:
            raise ConfigurationError("Invalid FlushMsgCount")

        if self.flush_byte_count < 0:
            raise ConfigurationError("Invalid FlushByteCount")
        if self.flush_byte_count >= force_flush_threshold():
            logger.warning(
                "ProducerConfig.FlushByteCount too close to MaxRequestSize; it will be ignored."
            )

        if self.flush_frequency < _ZERO:
            raise ConfigurationError("Invalid FlushFrequency")

        if self.partitioner is None:
            raise ConfigurationError("No partitioner set")

        if self.max_message_bytes <= 0:
            raise ConfigurationError("Invalid MaxMessageBytes")
        if self.max_message_bytes >= force_flush_threshold():
            logger.warning(
                "ProducerConfig.MaxMessageBytes too close to MaxRequestSize; it will be ignored."
            )

        if self.max_messages_per_req < 0 or (
            0 < self.max_messages_per_req < self.flush_msg_count
        ):
            raise ConfigurationError(
                "Invalid MaxMessagesPerReq, must be non-negative and >= FlushMsgCount if set"
            )

        if self.retry_backoff < _ZERO:
            raise ConfigurationError("Invalid RetryBackoff")

    @property
    def timeout_ms(self) -> int:
        """The timeout in whole milliseconds, as sent on the wire."""
        return self.timeout // _MILLISECOND