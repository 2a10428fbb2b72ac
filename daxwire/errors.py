"""Exceptions raised while encoding or decoding DAX wire data."""

from __future__ import annotations


class DaxCodecError(Exception):
    """Base class for every error raised by the codec."""

    code = "DaxCodecError"
    default_message = "codec error"

    def __init__(self, message: str | None = None) -> None:
        self.message = self.default_message if message is None else message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidParameterError(DaxCodecError):
    """A value handed to the codec cannot be represented."""

    code = "InvalidParameter"
    default_message = "invalid parameter"


class SerializationError(DaxCodecError):
    """The encoded data is malformed or of an unexpected type."""

    code = "SerializationError"
    default_message = "serialization error"


class MissingKeyError(DaxCodecError):
    """An item lacks a value for one of its key attributes."""

    code = "ParamRequiredError"
    default_message = "One of the required keys was not given a value"


class NotANumberError(InvalidParameterError):
    """The data read is not a number."""

    default_message = "cbor: not a number"


class ObjectTooBigError(SerializationError):
    """A string or byte string is longer than the codec accepts."""

    default_message = "cbor: object too big"