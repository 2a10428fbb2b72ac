"""Order-preserving binary encoding of decimal numbers.

Header byte:
  0x00        null low
  0x01        negative, four bytes follow for a positive exponent
  0x02..0x3f  negative, positive exponent 61..0
  0x40..0x7d  negative, negative exponent -1..-62
  0x7e        negative, four bytes follow for a negative exponent
  0x7f        negative zero
  0x80        zero
  0x81        positive, four bytes follow for a negative exponent
  0x82..0xbf  positive, negative exponent -62..-1
  0xc0..0xfd  positive, positive exponent 0..61
  0xfe        positive, four bytes follow for a positive exponent
  0xff        null high

The significand follows as base-1000 digits packed into 10 bits each, ended
by a terminator that records how many decimal digits the last group holds.
"""

from __future__ import annotations

import io
from typing import BinaryIO

from daxwire.decimals import Decimal
from daxwire.errors import SerializationError

_NULL_LOW = 0x00
_NULL_HIGH = 0xFF
_POS_ADJUST = 12
_NEG_ADJUST = 999 + 12


def precision(decimal: Decimal) -> int:
    """Return the number of decimal digits in the unscaled value (1 for zero)."""
    return len(str(abs(decimal.unscaled)))


def _int32_be(value: int) -> bytes:
    return (value & 0xFFFFFFFF).to_bytes(4, "big")


def _to_signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _pack_digits(digits: list[int]) -> bytes:
    out = bytearray()
    accum = 0
    bits = 0
    for digit in digits:
        accum = (accum << 10) | digit
        bits += 10
        while bits >= 8:
            bits -= 8
            out.append((accum >> bits) & 0xFF)
            accum &= (1 << bits) - 1
    if bits:
        out.append((accum << (8 - bits)) & 0xFF)
    return bytes(out)


def encode_lex_decimal(decimal: Decimal) -> bytes:
    """Encode ``decimal`` so that byte order matches numeric order."""
    value = decimal.unscaled
    if value == 0:
        return bytes([0x80])

    out = bytearray()
    prec = precision(decimal)
    exponent = prec - decimal.scale

    if value < 0:
        if -0x3E <= exponent < 0x3E:
            out.append((0x3F - exponent) & 0xFF)
        else:
            out.append(0x7E if exponent < 0 else 0x01)
            out += _int32_be(exponent ^ 0x7FFFFFFF)
    else:
        if -0x3E <= exponent < 0x3E:
            out.append((exponent + 0xC0) & 0xFF)
        else:
            out.append(0x81 if exponent < 0 else 0xFE)
            out += _int32_be(exponent ^ 0x80000000)

    remainder = prec % 3
    if remainder == 1:
        terminator = 0
        value *= 100
    elif remainder == 2:
        terminator = 1
        value *= 10
    else:
        terminator = 2

    magnitude = abs(value)
    groups = []
    while magnitude:
        magnitude, group = divmod(magnitude, 1000)
        groups.append(group)
    groups.reverse()

    if value < 0:
        digits = [_NEG_ADJUST - g for g in groups]
        terminator = 1023 - terminator
    else:
        digits = [g + _POS_ADJUST for g in groups]
    digits.append(terminator)

    out += _pack_digits(digits)
    return bytes(out)


def _read_byte(stream: BinaryIO) -> int:
    data = stream.read(1)
    if not data:
        raise SerializationError("incomplete lexdecimal")
    return data[0]


def _read_uint32(stream: BinaryIO) -> int:
    data = stream.read(4)
    if len(data) != 4:
        raise SerializationError("incomplete lexdecimal")
    return int.from_bytes(data, "big")


def _quo(a: int, b: int) -> int:
    """Integer division truncated toward zero."""
    return a // b if a >= 0 else -((-a) // b)


def decode_lex_decimal(stream: BinaryIO | bytes | bytearray | memoryview) -> Decimal | None:
    """Decode one value from ``stream``; null markers decode to None.

    Only the bytes of the value are consumed from a stream.
    """
    if isinstance(stream, (bytes, bytearray, memoryview)):
        stream = io.BytesIO(bytes(stream))

    header = _read_byte(stream)
    if header in (_NULL_HIGH, _NULL_LOW):
        return None
    if header in (0x7F, 0x80):
        return Decimal(0, 0)

    if header in (0x01, 0x7E):
        digit_adjust = _NEG_ADJUST
        exponent = _to_signed32(_read_uint32(stream) ^ 0x7FFFFFFF)
    elif header in (0x81, 0xFE):
        digit_adjust = _POS_ADJUST
        exponent = _to_signed32(_read_uint32(stream) ^ 0x80000000)
    elif header >= 0x82:
        digit_adjust = _POS_ADJUST
        exponent = header - 0xC0
    else:
        digit_adjust = _NEG_ADJUST
        exponent = 0x3F - header

    prec = 0
    accum = 0
    bits = 0
    last_digit: int | None = None
    unscaled: int | None = None

    while True:
        accum = (accum << 8) | _read_byte(stream)
        bits += 8
        if bits < 10:
            continue
        digit = (accum >> (bits - 10)) & 0x3FF

        if digit in (0, 1023, 1, 1022, 2, 1021):
            if last_digit is None:
                raise SerializationError("malformed lexdecimal")
            if digit in (0, 1023):
                last, factor, count = _quo(last_digit, 100), 10, 1
            elif digit in (1, 1022):
                last, factor, count = _quo(last_digit, 10), 100, 2
            else:
                last, factor, count = last_digit, 1000, 3
            unscaled = last if unscaled is None else unscaled * factor + last
            prec += count
            break

        if unscaled is None:
            unscaled = last_digit
            if unscaled is not None:
                prec += 3
        else:
            unscaled = unscaled * 1000 + last_digit
            prec += 3
        bits -= 10
        accum &= (1 << bits) - 1
        last_digit = digit - digit_adjust

    return Decimal(unscaled, prec - exponent)