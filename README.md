# kafkaproto

Building blocks for the Kafka 0.8 wire protocol in plain Python, with no
third-party dependencies.

## What it provides

- `kafkaproto.packet`: big-endian packet encoding and decoding.
  `PrepEncoder` measures how many bytes an object needs, `RealEncoder` writes
  them into a buffer of that size, and `RealDecoder` reads primitives, strings,
  byte strings and int32/int64 arrays back. `encode(obj)` runs both encoding
  passes and returns the bytes; `decode(data, obj)` decodes into `obj` and
  raises `DecodingError` if any bytes are left over. Errors are reported as
  `EncodingError`, `DecodingError` or `InsufficientData` (a subclass of
  `DecodingError`). `LengthField` is a length prefix filled in with
  `push`/`pop`. `MAX_REQUEST_SIZE` and `MAX_RESPONSE_SIZE` (100 MiB each) bound
  what `encode` and `ResponseHeader` accept.
- `kafkaproto.utils`: `StringEncoder` (UTF-8) and `ByteEncoder` wrap message
  keys and values; both have `encode()` and `length()`. `dupe_and_sort`
  returns a sorted copy of a list of partition ids.
- `kafkaproto.partitioner`: `RandomPartitioner`, `RoundRobinPartitioner`,
  `HashPartitioner` (FNV-1a of the encoded key, random when the key is
  `None`) and `ConstantPartitioner`, all implementing `Partitioner.partition`
  and `Partitioner.requires_consistency`.
- `kafkaproto.offsets`: `OffsetRequest`, `OffsetResponse`,
  `OffsetFetchRequest` and `OffsetFetchResponse` with their blocks, and the
  special times `LATEST_OFFSETS` and `EARLIEST_OFFSET`.
- `kafkaproto.produce`: `ProduceResponse` and `ProduceResponseBlock`.
- `kafkaproto.request`: `Request`, which frames a body with its length,
  API key, version, correlation id and client id, and `ResponseHeader`, which
  decodes and checks the length and correlation id at the start of a response.
- `kafkaproto.producer_config`: `ProducerConfig` with `validate()`,
  `RequiredAcks`, `ConfigurationError` and `force_flush_threshold()`.
- `kafkaproto.message`: `MessageToSend` (with `byte_size()`),
  `MessageFlags`, `ProduceError` and `ProduceErrors`.

Questionable but accepted settings found by `ProducerConfig.validate()` are
logged as warnings on the `kafkaproto` logger, which has a `NullHandler` by
default.

## What it does not do

This package only builds and parses packets and holds producer settings. It
opens no network connections: there is no broker connection, client,
producer or consumer that sends messages. It has no produce request or
message-set encoding and no compression codecs.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Examples

Encode an offset request and frame it:

```python
from kafkaproto.packet import encode
from kafkaproto.offsets import OffsetRequest
from kafkaproto.request import Request

body = OffsetRequest()
body.add_block("foo", 4, 1, 2)
payload = encode(Request(correlation_id=1, client_id="my-client", body=body))
```

Decode a produce response:

```python
from kafkaproto.packet import decode
from kafkaproto.produce import ProduceResponse

response = ProduceResponse()
decode(raw_bytes, response)
block = response.get_block("bar", 1)
```

Choose a partition from a message key:

```python
from kafkaproto.partitioner import HashPartitioner
from kafkaproto.utils import StringEncoder

partitioner = HashPartitioner()
partition = partitioner.partition(StringEncoder("user-42"), 8)
```

Check a producer configuration:

```python
from kafkaproto.producer_config import ProducerConfig

config = ProducerConfig(flush_msg_count=10)
config.validate()
```

`validate()` raises `ConfigurationError` if a setting is invalid.

## Running the tests

```
pytest
```