import pytest

from daxwire.errors import (
    DaxCodecError,
    InvalidParameterError,
    MissingKeyError,
    NotANumberError,
    ObjectTooBigError,
    SerializationError,
)


def _prefix(err):
    text = str(err)
    return text[: len(text) - len(err.message)]


def test_not_a_number_defaults():
    err = NotANumberError()
    assert err.message == "cbor: not a number"
    assert _prefix(err) == _prefix(InvalidParameterError("x"))


def test_object_too_big_defaults():
    err = ObjectTooBigError()
    assert err.message == "cbor: object too big"
    assert _prefix(err) == _prefix(SerializationError("x"))


def test_missing_key_defaults():
    err = MissingKeyError()
    assert err.message == "One of the required keys was not given a value"


def test_str_joins_code_and_message():
    err = SerializationError("boom")
    assert str(err) == _prefix(SerializationError("other")) + "boom"
    assert str(err).endswith(": boom")


def test_custom_message_overrides_default():
    err = NotANumberError("custom")
    assert err.message == "custom"
    assert str(err).endswith("custom")


def test_subclasses_caught_by_base():
    err = ObjectTooBigError()
    assert isinstance(err, SerializationError)
    assert isinstance(err, DaxCodecError)
    assert err.message == "cbor: object too big"
    with pytest.raises(DaxCodecError, match="object too big"):
        raise err


def test_codes_are_distinct():
    rendered = {
        str(InvalidParameterError("m")),
        str(SerializationError("m")),
        str(MissingKeyError("m")),
    }
    assert len(rendered) == 3