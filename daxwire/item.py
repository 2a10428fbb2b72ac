"""Encoding of item keys and non-key attributes for the DAX wire protocol."""

from __future__ import annotations

import io
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from daxwire.attrval import AttributeValue, decode_attribute_value, encode_attribute_value
from daxwire.codec import Reader, Writer
from daxwire.decimals import Decimal
from daxwire.errors import InvalidParameterError, MissingKeyError, SerializationError
from daxwire.lexdecimal import decode_lex_decimal, encode_lex_decimal

SCALAR_STRING = "S"
SCALAR_NUMBER = "N"
SCALAR_BINARY = "B"


@dataclass(frozen=True)
class AttributeDefinition:
    """Name and scalar type (``S``, ``N`` or ``B``) of a key attribute."""

    attribute_name: str
    attribute_type: str


def _unsupported(kind: str, definition: AttributeDefinition) -> InvalidParameterError:
    return InvalidParameterError(
        f"Unsupported KeyType encountered in {kind} Attribute: {definition.attribute_type}"
    )


def _field(value: AttributeValue, name: str):
    field = value.get(name)
    if field is None:
        raise MissingKeyError()
    return field


def _lookup(item: Mapping[str, AttributeValue], definition: AttributeDefinition) -> AttributeValue:
    value = item.get(definition.attribute_name)
    if value is None:
        raise MissingKeyError()
    return value


def _check_keydef(keydef: Sequence[AttributeDefinition]) -> None:
    if not keydef:
        raise InvalidParameterError("key definition cannot be empty")


def get_encoded_item_key(
    item: Mapping[str, AttributeValue] | None, keydef: Sequence[AttributeDefinition]
) -> bytes:
    """Return the key bytes of ``item`` under the key schema ``keydef``."""
    if item is None:
        raise InvalidParameterError("item cannot be nil")
    _check_keydef(keydef)

    hash_def = keydef[0]
    hash_value = _lookup(item, hash_def)
    buf = io.BytesIO()
    writer = Writer(buf)

    if len(keydef) == 1:
        if hash_def.attribute_type == SCALAR_STRING:
            writer.write_raw(_field(hash_value, "S").encode("utf-8"))
        elif hash_def.attribute_type == SCALAR_NUMBER:
            encode_attribute_value({"N": _field(hash_value, "N")}, writer)
        elif hash_def.attribute_type == SCALAR_BINARY:
            writer.write_raw(bytes(_field(hash_value, "B")))
        else:
            raise _unsupported("Hash", hash_def)
    else:
        if hash_def.attribute_type == SCALAR_STRING:
            writer.write_string(_field(hash_value, "S"))
        elif hash_def.attribute_type == SCALAR_NUMBER:
            encode_attribute_value({"N": _field(hash_value, "N")}, writer)
        elif hash_def.attribute_type == SCALAR_BINARY:
            writer.write_bytes(bytes(_field(hash_value, "B")))
        else:
            raise _unsupported("Hash", hash_def)

        range_def = keydef[1]
        range_value = _lookup(item, range_def)
        if range_def.attribute_type == SCALAR_STRING:
            writer.write_raw(_field(range_value, "S").encode("utf-8"))
        elif range_def.attribute_type == SCALAR_NUMBER:
            writer.write_raw(encode_lex_decimal(Decimal.parse(_field(range_value, "N"))))
        elif range_def.attribute_type == SCALAR_BINARY:
            writer.write_raw(bytes(_field(range_value, "B")))
        else:
            raise _unsupported("Range", range_def)

    writer.flush()
    return buf.getvalue()


def encode_item_key(
    item: Mapping[str, AttributeValue] | None,
    keydef: Sequence[AttributeDefinition],
    writer: Writer,
) -> None:
    """Write the key of ``item`` as a CBOR byte string."""
    writer.write_bytes(get_encoded_item_key(item, keydef))


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SerializationError("invalid utf-8 in key") from exc


def _decode_number(reader: Reader) -> AttributeValue:
    value = decode_attribute_value(reader)
    if value.get("N") is None:
        raise MissingKeyError()
    return value


def decode_item_key(reader: Reader, keydef: Sequence[AttributeDefinition]) -> dict[str, AttributeValue]:
    """Read a key written by :func:`encode_item_key`."""
    _check_keydef(keydef)
    hash_def = keydef[0]
    keys: dict[str, AttributeValue] = {}

    if len(keydef) == 1:
        if hash_def.attribute_type == SCALAR_STRING:
            keys[hash_def.attribute_name] = {"S": _decode_text(reader.read_bytes())}
        elif hash_def.attribute_type == SCALAR_NUMBER:
            with reader.bytes_reader() as inner:
                keys[hash_def.attribute_name] = _decode_number(inner)
        elif hash_def.attribute_type == SCALAR_BINARY:
            keys[hash_def.attribute_name] = {"B": reader.read_bytes()}
        else:
            raise _unsupported("Hash", hash_def)
        return keys

    with reader.bytes_reader() as inner:
        if hash_def.attribute_type == SCALAR_STRING:
            keys[hash_def.attribute_name] = {"S": inner.read_string()}
        elif hash_def.attribute_type == SCALAR_NUMBER:
            keys[hash_def.attribute_name] = _decode_number(inner)
        elif hash_def.attribute_type == SCALAR_BINARY:
            keys[hash_def.attribute_name] = {"B": inner.read_bytes()}
        else:
            raise _unsupported("Hash", hash_def)

        range_def = keydef[1]
        if range_def.attribute_type == SCALAR_STRING:
            keys[range_def.attribute_name] = {"S": _decode_text(inner.read_remaining())}
        elif range_def.attribute_type == SCALAR_NUMBER:
            number = decode_lex_decimal(inner.read_remaining())
            if number is None:
                raise SerializationError("range key number is null")
            keys[range_def.attribute_name] = {"N": str(number)}
        elif range_def.attribute_type == SCALAR_BINARY:
            keys[range_def.attribute_name] = {"B": inner.read_remaining()}
        else:
            raise _unsupported("Range", range_def)
    return keys


def encode_item_non_key_attributes(
    item: Mapping[str, AttributeValue],
    keydef: Sequence[AttributeDefinition],
    names_to_id: Callable[[tuple[str, ...]], int],
    writer: Writer,
) -> None:
    """Write the attribute-list id and the values of the non-key attributes.

    ``names_to_id`` maps the sorted tuple of non-key attribute names to the
    id of that attribute list.
    """
    _check_keydef(keydef)
    key_names = {definition.attribute_name for definition in keydef[:2]}
    names = tuple(sorted(name for name in item if name not in key_names))
    writer.write_int(names_to_id(names))
    for name in names:
        encode_attribute_value(item[name], writer)


def decode_item_non_key_attributes(
    reader: Reader, id_to_names: Callable[[int], Sequence[str]]
) -> dict[str, AttributeValue]:
    """Read non-key attributes; ``id_to_names`` resolves an attribute-list id."""
    list_id = reader.read_int()
    names = id_to_names(list_id)
    return {name: decode_attribute_value(reader) for name in names}