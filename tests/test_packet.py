import pytest

from kafkaproto.packet import (
    MAX_REQUEST_SIZE,
    DecodingError,
    EncodingError,
    InsufficientData,
    LengthField,
    PrepEncoder,
    RealDecoder,
    RealEncoder,
    decode,
    encode,
)


class _Codec:
    """Encodes with one callable; decodes with another, storing the result."""

    def __init__(self, write=None, read=None):
        self._write = write
        self._read = read
        self.result = None

    def encode(self, pe):
        self._write(pe)

    def decode(self, pd):
        self.result = self._read(pd)


def _write_many(pe):
    pe.put_int8(-5)
    pe.put_int16(-300)
    pe.put_int32(123456)
    pe.put_int64(-(2**40))
    pe.put_string("héllo")
    pe.put_bytes(b"\x01\x02\x03")
    pe.put_bytes(None)
    pe.put_int32_array([1, -2, 3])
    pe.put_int64_array([2**50, -1])
    pe.put_raw_bytes(b"zz")


def _read_many(pd):
    return (
        pd.get_int8(),
        pd.get_int16(),
        pd.get_int32(),
        pd.get_int64(),
        pd.get_string(),
        pd.get_bytes(),
        pd.get_bytes(),
        pd.get_int32_array(),
        pd.get_int64_array(),
        pd.get_subset(2).raw,
    )


def test_round_trip_of_all_primitives():
    data = encode(_Codec(write=_write_many))
    out = _Codec(read=_read_many)
    decode(data, out)
    assert out.result == (
        -5,
        -300,
        123456,
        -(2**40),
        "héllo",
        b"\x01\x02\x03",
        None,
        [1, -2, 3],
        [2**50, -1],
        b"zz",
    )


def test_prep_length_matches_encoded_length():
    prep = PrepEncoder()
    _write_many(prep)
    assert len(encode(_Codec(write=_write_many))) == prep.length


def test_string_wire_format():
    assert encode(_Codec(write=lambda pe: pe.put_string("abc"))) == b"\x00\x03abc"


def test_negative_int32_wire_format():
    assert encode(_Codec(write=lambda pe: pe.put_int32(-1))) == b"\xff\xff\xff\xff"


def test_null_bytes_encoded_as_minus_one():
    data = encode(_Codec(write=lambda pe: pe.put_bytes(None)))
    assert data == b"\xff\xff\xff\xff"
    assert RealDecoder(data).get_bytes() is None


def test_empty_bytes_decode_as_empty():
    data = encode(_Codec(write=lambda pe: pe.put_bytes(b"")))
    assert RealDecoder(data).get_bytes() == b""


def test_empty_arrays_round_trip():
    def write(pe):
        pe.put_int32_array([])
        pe.put_int64_array([])

    out = _Codec(read=lambda pd: (pd.get_int32_array(), pd.get_int64_array()))
    decode(encode(_Codec(write=write)), out)
    assert out.result == ([], [])


def test_length_field_written_over_following_bytes():
    def write(pe):
        pe.push(LengthField())
        pe.put_string("abc")
        pe.pop()

    data = encode(_Codec(write=write))
    assert data == b"\x00\x00\x00\x05\x00\x03abc"

    def read(pd):
        pd.push(LengthField())
        text = pd.get_string()
        pd.pop()
        return text

    out = _Codec(read=read)
    decode(data, out)
    assert out.result == "abc"


def test_length_field_mismatch_is_rejected():
    def read(pd):
        pd.push(LengthField())
        pd.get_string()
        pd.pop()

    with pytest.raises(DecodingError):
        decode(b"\x00\x00\x00\x09\x00\x03abc", _Codec(read=read))


def test_insufficient_data_exhausts_decoder():
    decoder = RealDecoder(b"\x00\x01")
    with pytest.raises(InsufficientData):
        decoder.get_int32()
    assert decoder.remaining() == 0


def test_string_longer_than_input():
    decoder = RealDecoder(b"\x00\x05ab")
    with pytest.raises(InsufficientData):
        decoder.get_string()
    assert decoder.remaining() == 0


def test_invalid_string_length():
    with pytest.raises(DecodingError):
        RealDecoder(b"\xff\xfe").get_string()


def test_invalid_bytes_length():
    with pytest.raises(DecodingError):
        RealDecoder(b"\xff\xff\xff\xfe").get_bytes()


def test_array_length_beyond_remaining():
    with pytest.raises(InsufficientData):
        RealDecoder(b"\x00\x00\x00\x05\x00").get_array_length()


def test_array_length_too_large():
    n = 2 * 0xFFFF + 1
    data = n.to_bytes(4, "big") + bytes(n)
    with pytest.raises(DecodingError) as info:
        RealDecoder(data).get_array_length()
    assert not isinstance(info.value, InsufficientData)


def test_int32_array_short_input():
    with pytest.raises(InsufficientData):
        RealDecoder(b"\x00\x00\x00\x02\x00\x00\x00\x01").get_int32_array()


def test_subset_beyond_remaining():
    decoder = RealDecoder(b"abc")
    with pytest.raises(InsufficientData):
        decoder.get_subset(4)
    assert decoder.remaining() == 0


def test_decode_rejects_leftover_bytes():
    with pytest.raises(DecodingError):
        decode(b"\x00\x00\x00\x01\x00", _Codec(read=lambda pd: pd.get_int32()))


def test_decode_none_is_ignored():
    out = _Codec(read=lambda pd: pd.get_int32())
    decode(None, out)
    assert out.result is None


def test_prep_rejects_long_string():
    with pytest.raises(EncodingError):
        PrepEncoder().put_string("x" * 0x8000)


def test_prep_rejects_huge_array_length():
    with pytest.raises(EncodingError):
        PrepEncoder().put_array_length(0x7FFFFFFF + 1)


def test_encode_rejects_oversized_request():
    class _Huge:
        def save_offset(self, offset):
            pass

        def reserve_length(self):
            return MAX_REQUEST_SIZE + 1

        def run(self, cur_offset, buf):
            pass

    def write(pe):
        pe.push(_Huge())
        pe.pop()

    with pytest.raises(EncodingError):
        encode(_Codec(write=write))


def test_real_encoder_rejects_out_of_range_value():
    with pytest.raises(EncodingError):
        RealEncoder(2).put_int16(0x8000)


def test_real_encoder_rejects_overflow():
    with pytest.raises(EncodingError):
        RealEncoder(3).put_raw_bytes(b"abcd")


def test_decoder_tracks_remaining():
    decoder = RealDecoder(b"\x00\x01\x00\x00\x00\x02")
    assert decoder.get_int16() == 1
    assert decoder.remaining() == 4
    assert decoder.get_int32() == 2
    assert decoder.remaining() == 0