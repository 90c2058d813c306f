"""Messages handed to a producer and the errors reported for them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Iterable, Iterator, Optional

from kafkaproto.utils import Encoder

_MESSAGE_OVERHEAD = 26  # CRC, flags and other per-message metadata


class MessageFlags(IntFlag):
    """Internal markers a producer sets on messages in flight."""

    RETRIED = 1  # message has been retried
    CHASER = 2  # message is last in a group that failed
    REF = 4  # add a reference to a singleton worker
    UNREF = 8  # remove a reference from a singleton worker
    SHUTDOWN = 16  # start the shutdown process


@dataclass(eq=False)
class MessageToSend:
    """A message for a producer to deliver.

    ``offset`` and ``partition`` are filled in by the producer; ``offset`` is
    only meaningful after successful delivery with acknowledgements.
    """

    topic: str = ""
    key: Optional[Encoder] = None
    value: Optional[Encoder] = None
    offset: int = 0
    partition: int = 0
    flags: MessageFlags = MessageFlags(0)

    def byte_size(self) -> int:
        """Approximate encoded size, including fixed metadata overhead."""
        size = _MESSAGE_OVERHEAD
        if self.key is not None:
            size += self.key.length()
        if self.value is not None:
            size += self.value.length()
        return size


@dataclass
class ProduceError:
    """A message that could not be delivered, with the reason."""

    msg: MessageToSend
    err: BaseException


class ProduceErrors(Exception):
    """A batch of delivery failures, raised when a producer is closed."""

    def __init__(self, errors: Iterable[ProduceError]) -> None:
        self.errors = list(errors)
        super().__init__(f"kafka: Failed to deliver {len(self.errors)} messages.")

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[ProduceError]:
        return iter(self.errors)