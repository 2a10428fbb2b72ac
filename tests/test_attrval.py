import io

import pytest

from daxwire.attrval import decode_attribute_value, encode_attribute_value
from daxwire.codec import Reader, Writer
from daxwire.errors import InvalidParameterError, SerializationError


def _encode(value):
    buf = io.BytesIO()
    writer = Writer(buf)
    encode_attribute_value(value, writer)
    writer.flush()
    return buf.getvalue()


ROUND_TRIP_CASES = [
    {"S": "abc"},
    {"S": "abcdefghijklmnopqrstuvwxyz0123456789"},
    {"N": "123"},
    {"N": "-123"},
    {"N": "123456789012345678901234567890"},
    {"N": "-123456789012345678901234567890"},
    {"N": "314E-2"},
    {"N": "-314E-2"},
    {"B": bytes.fromhex("010203")},
    {"SS": ["abc", "def", "xyz"]},
    {"NS": ["123", "456", "789"]},
    {"BS": [bytes.fromhex("010203"), bytes.fromhex("040506")]},
    {"L": [{"S": "abc"}, {"N": "123"}]},
    {"M": {"s": {"S": "abc"}, "n": {"N": "123"}}},
    {"BOOL": True},
    {"BOOL": False},
    {"NULL": True},
]


@pytest.mark.parametrize("value", ROUND_TRIP_CASES)
def test_round_trip(value):
    encoded = _encode(value)
    assert decode_attribute_value(Reader(encoded)) == value


INT_BOUNDARIES = [
    ("c349010000000000000000", -(2**64) - 1),
    ("3bffffffffffffffff", -(2**64)),
    ("3bfffffffffffffffe", -(2**64) + 1),
    ("3b8000000000000000", -(2**63) - 1),
    ("3b7fffffffffffffff", -(2**63)),
    ("20", -1),
    ("00", 0),
    ("1b7fffffffffffffff", 2**63 - 1),
    ("1b8000000000000000", 2**63),
    ("1bffffffffffffffff", 2**64 - 1),
    ("c249010000000000000000", 2**64),
]


@pytest.mark.parametrize("cbor_hex, value", INT_BOUNDARIES)
def test_decode_int_boundaries(cbor_hex, value):
    decoded = decode_attribute_value(Reader(bytes.fromhex(cbor_hex)))
    assert decoded == {"N": str(value)}


def test_decimal_number_decodes_to_exponent_form():
    assert decode_attribute_value(Reader(_encode({"N": "3.14"}))) == {"N": "314E-2"}


def test_nested_values_round_trip():
    value = {"M": {"outer": {"L": [{"M": {"x": {"NS": ["1", "2.5"]}}}, {"NULL": True}]}}}
    decoded = decode_attribute_value(Reader(_encode(value)))
    assert decoded == {"M": {"outer": {"L": [{"M": {"x": {"NS": ["1", "25E-1"]}}}, {"NULL": True}]}}}


def test_none_value_raises():
    with pytest.raises(InvalidParameterError):
        _encode(None)


def test_false_null_raises():
    with pytest.raises(InvalidParameterError):
        _encode({"NULL": False})


@pytest.mark.parametrize("number", ["abc", "1.2.3", "12a", "1e", ""])
def test_invalid_number_raises(number):
    with pytest.raises(InvalidParameterError):
        _encode({"N": number})


def test_undefined_simple_value_raises():
    with pytest.raises(SerializationError):
        decode_attribute_value(Reader(bytes([0xF7])))


def test_unknown_tag_raises():
    buf = io.BytesIO()
    writer = Writer(buf)
    writer.write_tag(99)
    writer.write_int(1)
    writer.flush()
    with pytest.raises(SerializationError):
        decode_attribute_value(Reader(buf.getvalue()))