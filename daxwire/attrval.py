"""Encoding of DynamoDB attribute values to and from CBOR.

Attribute values use the low-level DynamoDB form: a dict with exactly one
of the keys ``S``, ``N``, ``B``, ``SS``, ``NS``, ``BS``, ``L``, ``M``,
``BOOL`` or ``NULL``. Numbers are decimal strings, binaries are bytes.
"""

from __future__ import annotations

import re
from typing import Any

from daxwire.codec import Reader, Writer
from daxwire.constants import (
    ARRAY,
    BYTES,
    FALSE,
    MAJOR_TYPE_MASK,
    MAP,
    MINOR_TYPE_MASK,
    NEG_INT,
    NIL,
    POS_INT,
    SIMPLE,
    TAG,
    TAG_DECIMAL,
    TAG_NEG_BIG_INT,
    TAG_POS_BIG_INT,
    TRUE,
    UTF,
)
from daxwire.decimals import Decimal
from daxwire.errors import InvalidParameterError, SerializationError

TAG_STRING_SET = 3321
TAG_NUMBER_SET = 3322
TAG_BINARY_SET = 3323
TAG_DOCUMENT_PATH_ORDINAL = 3324

AttributeValue = dict[str, Any]

_INTEGER = re.compile(r"[+-]?[0-9]+")
_MAX_SMALL_DIGITS = 18


def _write_number(text: str, writer: Writer) -> None:
    if any(ch in text for ch in ".eE"):
        writer.write_decimal(Decimal.parse(text))
        return
    if not _INTEGER.fullmatch(text):
        raise InvalidParameterError(f"invalid number {text}")
    value = int(text)
    if len(text) > _MAX_SMALL_DIGITS:
        writer.write_big_int(value)
    else:
        writer.write_int(value)


def encode_attribute_value(value: AttributeValue | None, writer: Writer) -> None:
    """Write one attribute value to ``writer``."""
    if value is None:
        raise InvalidParameterError("invalid attribute value: nil")

    if (text := value.get("S")) is not None:
        writer.write_string(text)
    elif (number := value.get("N")) is not None:
        _write_number(number, writer)
    elif (data := value.get("B")) is not None:
        writer.write_bytes(bytes(data))
    elif (strings := value.get("SS")) is not None:
        writer.write_tag(TAG_STRING_SET)
        writer.write_array_header(len(strings))
        for item in strings:
            writer.write_string(item)
    elif (numbers := value.get("NS")) is not None:
        writer.write_tag(TAG_NUMBER_SET)
        writer.write_array_header(len(numbers))
        for item in numbers:
            _write_number(item, writer)
    elif (binaries := value.get("BS")) is not None:
        writer.write_tag(TAG_BINARY_SET)
        writer.write_array_header(len(binaries))
        for item in binaries:
            writer.write_bytes(bytes(item))
    elif (elements := value.get("L")) is not None:
        writer.write_array_header(len(elements))
        for item in elements:
            encode_attribute_value(item, writer)
    elif (members := value.get("M")) is not None:
        writer.write_map_header(len(members))
        for key, item in members.items():
            writer.write_string(key)
            encode_attribute_value(item, writer)
    elif (flag := value.get("BOOL")) is not None:
        writer.write_boolean(bool(flag))
    elif (null := value.get("NULL")) is not None:
        if not null:
            raise InvalidParameterError("invalid null attribute value")
        writer.write_null()


def _decode_tagged_set(reader: Reader, minor: int) -> AttributeValue:
    _, tag = reader.read_type_header()
    if tag == TAG_STRING_SET:
        count = reader.read_array_length()
        return {"SS": [reader.read_string() for _ in range(count)]}
    if tag == TAG_NUMBER_SET:
        count = reader.read_array_length()
        numbers = []
        for _ in range(count):
            number = decode_attribute_value(reader).get("N")
            if number is None:
                raise SerializationError("number set element is not a number")
            numbers.append(number)
        return {"NS": numbers}
    if tag == TAG_BINARY_SET:
        count = reader.read_array_length()
        return {"BS": [reader.read_bytes() for _ in range(count)]}
    raise SerializationError(f"unknown minor type {minor} or tag {tag}")


def decode_attribute_value(reader: Reader) -> AttributeValue:
    """Read one attribute value from ``reader``."""
    header = reader.peek_header()
    major = header & MAJOR_TYPE_MASK
    minor = header & MINOR_TYPE_MASK

    if major == UTF:
        return {"S": reader.read_string()}
    if major == BYTES:
        return {"B": reader.read_bytes()}
    if major == ARRAY:
        count = reader.read_array_length()
        return {"L": [decode_attribute_value(reader) for _ in range(count)]}
    if major == MAP:
        count = reader.read_map_length()
        members: dict[str, AttributeValue] = {}
        for _ in range(count):
            key = reader.read_string()
            members[key] = decode_attribute_value(reader)
        return {"M": members}
    if major in (POS_INT, NEG_INT):
        return {"N": reader.read_cbor_integer_to_string()}
    if major == SIMPLE:
        reader.read_type_header()
        if header == FALSE:
            return {"BOOL": False}
        if header == TRUE:
            return {"BOOL": True}
        if header == NIL:
            return {"NULL": True}
        raise SerializationError(f"unknown minor type {minor} for simple major type")
    if major == TAG:
        if minor in (TAG_POS_BIG_INT, TAG_NEG_BIG_INT):
            return {"N": str(reader.read_big_int())}
        if minor == TAG_DECIMAL:
            return {"N": str(reader.read_decimal())}
        return _decode_tagged_set(reader, minor)
    raise SerializationError(f"unknown major type {major}")