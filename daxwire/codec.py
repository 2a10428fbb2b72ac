"""Streaming CBOR writer and reader used by the DAX wire protocol."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

from daxwire.constants import (
    ARRAY,
    ARRAY_STREAM,
    BREAK,
    BYTES,
    FALSE,
    FLOAT16,
    FLOAT32,
    FLOAT64,
    MAJOR_TYPE_MASK,
    MAP,
    MAP_STREAM,
    MINOR_TYPE_MASK,
    NEG_INT,
    NIL,
    POS_INT,
    SIMPLE,
    SIZE8,
    SIZE16,
    SIZE32,
    SIZE64,
    TAG,
    TAG_DECIMAL,
    TAG_NEG_BIG_INT,
    TAG_POS_BIG_INT,
    TRUE,
    UTF,
    is_nan,
)
from daxwire.decimals import Decimal
from daxwire.errors import (
    InvalidParameterError,
    NotANumberError,
    ObjectTooBigError,
    SerializationError,
)

DEFAULT_BUFFER_SIZE = 8192
MAX_OBJECT_LENGTH = 1024 * 1024 * 1024

_UINT64_LIMIT = 1 << 64
_NAN_MASK = 0xFFFFFFFFFFFFFFF0
_EXTRA_BYTES = {SIZE8: 1, SIZE16: 2, SIZE32: 4, SIZE64: 8}


class Writer:
    """Buffers CBOR-encoded values and writes them to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._buffer = bytearray()

    def __enter__(self) -> Writer:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def flush(self) -> None:
        """Write all buffered bytes to the underlying stream."""
        if self._buffer:
            self._stream.write(bytes(self._buffer))
            self._buffer.clear()

    def close(self) -> None:
        """Flush pending output; the underlying stream stays open."""
        self.flush()

    def _emit(self, data: bytes | bytearray) -> None:
        self._buffer += data
        if len(self._buffer) >= DEFAULT_BUFFER_SIZE:
            self.flush()

    def _write_type64(self, header: int, value: int) -> None:
        self._emit(bytes([header]) + value.to_bytes(8, "big"))

    def write_type(self, major: int, value: int) -> None:
        """Write a header of the given major type carrying ``value``."""
        if not 0 <= value < _UINT64_LIMIT:
            raise InvalidParameterError(f"cbor: header value {value} out of range")
        if value < SIZE8:
            self._emit(bytes([major + value]))
        elif value < 1 << 8:
            self._emit(bytes([major + SIZE8, value]))
        elif value < 1 << 16:
            self._emit(bytes([major + SIZE16]) + value.to_bytes(2, "big"))
        elif value < 1 << 32:
            self._emit(bytes([major + SIZE32]) + value.to_bytes(4, "big"))
        else:
            self._write_type64(major + SIZE64, value)

    def write_raw(self, data: bytes) -> None:
        """Write bytes as they are, with no header."""
        self._emit(data)

    def write_float(self, value: float) -> None:
        """Write a single-precision float."""
        try:
            packed = struct.pack(">f", value)
        except OverflowError as exc:
            raise InvalidParameterError(f"cbor: {value} does not fit a float32") from exc
        self._emit(bytes([FLOAT32]) + packed)

    def write_float64(self, value: float) -> None:
        """Write a double-precision float; NaNs are written in canonical form."""
        (bits,) = struct.unpack(">Q", struct.pack(">d", value))
        if is_nan(value):
            bits &= _NAN_MASK
        self._write_type64(FLOAT64, bits)

    def write_boolean(self, value: bool) -> None:
        self._emit(bytes([TRUE if value else FALSE]))

    def write_bytes(self, data: bytes) -> None:
        self.write_type(BYTES, len(data))
        self._emit(data)

    def write_string(self, text: str) -> None:
        encoded = text.encode("utf-8")
        self.write_type(UTF, len(encoded))
        self._emit(encoded)

    def write_tag(self, tag: int) -> None:
        self.write_type(TAG, tag)

    def write_map_header(self, pairs: int) -> None:
        self.write_type(MAP, pairs)

    def write_array_header(self, elems: int) -> None:
        self.write_type(ARRAY, elems)

    def write_map_stream_header(self) -> None:
        self._emit(bytes([MAP_STREAM]))

    def write_array_stream_header(self) -> None:
        self._emit(bytes([ARRAY_STREAM]))

    def write_stream_break(self) -> None:
        self._emit(bytes([BREAK]))

    def write_null(self) -> None:
        self._emit(bytes([NIL]))

    def write_int(self, value: int) -> None:
        """Write an integer in the range ``-2**64 .. 2**64 - 1``."""
        if value < 0:
            self.write_type(NEG_INT, -1 - value)
        else:
            self.write_type(POS_INT, value)

    def write_big_int(self, value: int) -> None:
        """Write any integer, as a tagged bignum when it exceeds 64 bits."""
        if -_UINT64_LIMIT <= value < _UINT64_LIMIT:
            self.write_int(value)
            return
        if value < 0:
            tag, magnitude = TAG_NEG_BIG_INT, -1 - value
        else:
            tag, magnitude = TAG_POS_BIG_INT, value
        self._emit(bytes([TAG | tag]))
        self.write_bytes(magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "big"))

    def write_decimal(self, value: Decimal) -> None:
        """Write a decimal fraction as tag 4 around ``[exponent, mantissa]``."""
        self._emit(bytes([TAG | TAG_DECIMAL]))
        self.write_array_header(2)
        self.write_int(-value.scale)
        self.write_big_int(value.unscaled)


class Reader:
    """Reads CBOR-encoded values from a binary stream or a bytes object."""

    def __init__(self, stream: BinaryIO | bytes | bytearray | memoryview) -> None:
        if isinstance(stream, (bytes, bytearray, memoryview)):
            stream = io.BytesIO(bytes(stream))
        self._stream = stream
        self._peeked = b""

    def __enter__(self) -> Reader:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Drop any peeked byte; the underlying stream stays open."""
        self._peeked = b""

    def _read(self, count: int) -> bytes:
        data = self._peeked[:count]
        self._peeked = self._peeked[count:]
        while len(data) < count:
            chunk = self._stream.read(count - len(data))
            if not chunk:
                raise SerializationError("cbor: unexpected end of data")
            data += chunk
        return data

    def _read_sized(self, length: int) -> bytes:
        if length > MAX_OBJECT_LENGTH:
            raise ObjectTooBigError()
        return self._read(length) if length else b""

    @staticmethod
    def _verify_major_type(header: int, expected: int) -> None:
        actual = header & MAJOR_TYPE_MASK
        if actual != expected:
            raise SerializationError(f"cbor: expected major type {expected}, got {actual}")

    def peek_header(self) -> int:
        """Return the next header byte without consuming it."""
        if not self._peeked:
            chunk = self._stream.read(1)
            if not chunk:
                raise SerializationError("cbor: unexpected end of data")
            self._peeked = chunk
        return self._peeked[0]

    def read_raw_type_header(self, out: BinaryIO | None) -> tuple[int, int]:
        """Read a header, copying its raw bytes to ``out`` when given."""
        header = self._read(1)[0]
        if out is not None:
            out.write(bytes([header]))
        minor = header & MINOR_TYPE_MASK
        size = _EXTRA_BYTES.get(minor)
        if size is None:
            return header, minor
        extra = self._read(size)
        if out is not None:
            out.write(extra)
        return header, int.from_bytes(extra, "big")

    def read_type_header(self) -> tuple[int, int]:
        """Read a header and return the header byte and its value."""
        return self.read_raw_type_header(None)

    def read_string(self) -> str:
        header, value = self.read_type_header()
        self._verify_major_type(header, UTF)
        data = self._read_sized(value)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError("cbor: invalid utf-8 string") from exc

    def read_bytes(self) -> bytes:
        header, value = self.read_type_header()
        self._verify_major_type(header, BYTES)
        return self._read_sized(value)

    def read_raw_bytes(self, out: BinaryIO) -> None:
        """Copy an encoded byte string, header included, to ``out``."""
        header, value = self.read_raw_type_header(out)
        self._verify_major_type(header, BYTES)
        out.write(self._read_sized(value))

    def bytes_reader(self) -> Reader:
        """Return a reader over the contents of the next byte string."""
        header, value = self.read_type_header()
        self._verify_major_type(header, BYTES)
        return Reader(io.BytesIO(self._read_sized(value)))

    def read_remaining(self) -> bytes:
        """Return every byte left in the stream."""
        data = self._peeked + self._stream.read()
        self._peeked = b""
        return data

    def read_map_length(self) -> int:
        header, value = self.read_type_header()
        self._verify_major_type(header, MAP)
        return value

    def read_bytes_length(self) -> int:
        header, value = self.read_type_header()
        self._verify_major_type(header, BYTES)
        return value

    def read_array_length(self) -> int:
        header, value = self.read_type_header()
        self._verify_major_type(header, ARRAY)
        return value

    def read_float64(self) -> float:
        """Read a float of any width, or an integer as a float."""
        header, value = self.read_type_header()
        major = header & MAJOR_TYPE_MASK
        if major == POS_INT:
            return float(value)
        if major == NEG_INT:
            return float(-1 - value)
        if major != SIMPLE:
            raise NotANumberError()
        minor = header & MINOR_TYPE_MASK
        if minor == FLOAT16 & MINOR_TYPE_MASK:
            return struct.unpack(">e", value.to_bytes(2, "big"))[0]
        if minor == FLOAT32 & MINOR_TYPE_MASK:
            return struct.unpack(">f", value.to_bytes(4, "big"))[0]
        if minor == FLOAT64 & MINOR_TYPE_MASK:
            result = struct.unpack(">d", value.to_bytes(8, "big"))[0]
            return float("nan") if is_nan(result) else result
        raise NotANumberError()

    def read_nil(self) -> None:
        self.read_type_header()

    def read_break(self) -> None:
        self.read_type_header()

    def read_int(self) -> int:
        """Read a plain CBOR integer."""
        header, value = self.read_type_header()
        major = header & MAJOR_TYPE_MASK
        if major == NEG_INT:
            return -1 - value
        if major == POS_INT:
            return value
        raise NotANumberError()

    def read_cbor_integer_to_string(self) -> str:
        """Read a plain CBOR integer as a decimal string."""
        return str(self.read_int())

    def _read_tagged_big_int(self, negative: bool) -> int:
        magnitude = int.from_bytes(self.read_bytes(), "big")
        return -1 - magnitude if negative else magnitude

    def read_big_int(self) -> int:
        """Read a plain integer or a tagged bignum."""
        header, value = self.read_type_header()
        major = header & MAJOR_TYPE_MASK
        if major == POS_INT:
            return value
        if major == NEG_INT:
            return -1 - value
        if major == TAG and value in (TAG_POS_BIG_INT, TAG_NEG_BIG_INT):
            return self._read_tagged_big_int(value == TAG_NEG_BIG_INT)
        raise NotANumberError()

    def read_decimal(self) -> Decimal:
        """Read a decimal fraction, or an integer as a decimal of scale 0."""
        header, value = self.read_type_header()
        major = header & MAJOR_TYPE_MASK
        if major == POS_INT:
            return Decimal(value, 0)
        if major == NEG_INT:
            return Decimal(-1 - value, 0)
        if major == TAG:
            if value in (TAG_POS_BIG_INT, TAG_NEG_BIG_INT):
                return Decimal(self._read_tagged_big_int(value == TAG_NEG_BIG_INT), 0)
            if value == TAG_DECIMAL and self.read_array_length() == 2:
                exponent = self.read_int()
                unscaled = self.read_big_int()
                return Decimal(unscaled, -exponent)
        raise NotANumberError()