"""CBOR header constants and small helpers for inspecting headers."""

from __future__ import annotations

import struct

# Type encoding sizes.
SIZE8 = 0x18
SIZE16 = 0x19
SIZE32 = 0x1A
SIZE64 = 0x1B
SIZE_STREAM = 0x1F

# Major types.
POS_INT = 0x00
POS_INT8 = POS_INT + SIZE8
POS_INT16 = POS_INT + SIZE16
POS_INT32 = POS_INT + SIZE32
POS_INT64 = POS_INT + SIZE64

NEG_INT = 0x20
NEG_INT8 = NEG_INT + SIZE8
NEG_INT16 = NEG_INT + SIZE16
NEG_INT32 = NEG_INT + SIZE32
NEG_INT64 = NEG_INT + SIZE64

BYTES = 0x40
BYTES8 = BYTES + SIZE8
BYTES16 = BYTES + SIZE16
BYTES32 = BYTES + SIZE32
BYTES64 = BYTES + SIZE64
BYTES_STREAM = BYTES + SIZE_STREAM

UTF = 0x60
UTF8 = UTF + SIZE8
UTF16 = UTF + SIZE16
UTF32 = UTF + SIZE32
UTF64 = UTF + SIZE64
UTF_STREAM = UTF + SIZE_STREAM

ARRAY = 0x80
ARRAY8 = ARRAY + SIZE8
ARRAY16 = ARRAY + SIZE16
ARRAY32 = ARRAY + SIZE32
ARRAY64 = ARRAY + SIZE64
ARRAY_STREAM = ARRAY + SIZE_STREAM

MAP = 0xA0
MAP8 = MAP + SIZE8
MAP16 = MAP + SIZE16
MAP32 = MAP + SIZE32
MAP64 = MAP + SIZE64
MAP_STREAM = MAP + SIZE_STREAM

TAG = 0xC0
TAG8 = TAG + SIZE8
TAG16 = TAG + SIZE16
TAG32 = TAG + SIZE32
TAG64 = TAG + SIZE64

SIMPLE = 0xE0

# Simple and special values.
FALSE = SIMPLE + 0x14
TRUE = FALSE + 1
NIL = FALSE + 2
UNDEFINED = FALSE + 3
SIMPLE8 = FALSE + 4
FLOAT16 = FALSE + 5
FLOAT32 = FALSE + 6
FLOAT64 = FALSE + 7
BREAK = SIMPLE + SIZE_STREAM

# Standard tags.
TAG_DATETIME = 0
TAG_TIMESTAMP = 1
TAG_POS_BIG_INT = 2
TAG_NEG_BIG_INT = 3
TAG_DECIMAL = 4
TAG_BIG_FLOAT = 5

MAJOR_TYPE_MASK = 0xE0
MINOR_TYPE_MASK = 0x1F

_UV_INF = 0x7FF0000000000000
_UV_NEG_INF = 0xFFF0000000000000
_EXP_MASK = 0x7FF
_EXP_SHIFT = 64 - 11 - 1


def is_nan(value: float) -> bool:
    """Return True if the IEEE 754 bit pattern of ``value`` is a NaN."""
    (bits,) = struct.unpack(">Q", struct.pack(">d", float(value)))
    return ((bits >> _EXP_SHIFT) & _EXP_MASK) == _EXP_MASK and bits not in (_UV_INF, _UV_NEG_INF)


def major_type(header: int) -> int:
    """Return the major type bits of a header byte."""
    return header & MAJOR_TYPE_MASK


def minor_type(header: int) -> int:
    """Return the minor type bits of a header byte."""
    return header & MINOR_TYPE_MASK