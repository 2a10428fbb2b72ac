import io

import pytest

from daxwire.codec import Reader, Writer
from daxwire.errors import InvalidParameterError, MissingKeyError
from daxwire.item import (
    AttributeDefinition,
    decode_item_key,
    decode_item_non_key_attributes,
    encode_item_key,
    encode_item_non_key_attributes,
    get_encoded_item_key,
)


def _defs(*pairs):
    return [AttributeDefinition(name, kind) for name, kind in pairs]


KEY_CASES = [
    (_defs(("hks", "S")), {"hks": {"S": "hkv"}}, "43686b76"),
    (_defs(("hkn", "N")), {"hkn": {"N": "5"}}, "4105"),
    (_defs(("hkb", "B")), {"hkb": {"B": bytes.fromhex("010203")}}, "43010203"),
    (_defs(("hks", "S"), ("rks", "S")), {"hks": {"S": "hkv"}, "rks": {"S": "rkv"}}, "4763686b76726b76"),
    (_defs(("hks", "S"), ("rkn", "N")), {"hks": {"S": "hkv"}, "rkn": {"N": "5"}}, None),
    (
        _defs(("hks", "S"), ("rkb", "B")),
        {"hks": {"S": "hkv"}, "rkb": {"B": bytes.fromhex("010203")}},
        "4763686b76010203",
    ),
    (_defs(("hkn", "N"), ("rks", "S")), {"hkn": {"N": "5"}, "rks": {"S": "rkv"}}, "4405726b76"),
    (_defs(("hkn", "N"), ("rkn", "N")), {"hkn": {"N": "5"}, "rkn": {"N": "1"}}, None),
    (
        _defs(("hkn", "N"), ("rkb", "B")),
        {"hkn": {"N": "5"}, "rkb": {"B": bytes.fromhex("010203")}},
        "4405010203",
    ),
    (
        _defs(("hkb", "B"), ("rks", "S")),
        {"hkb": {"B": bytes.fromhex("040506")}, "rks": {"S": "rkv"}},
        "4743040506726b76",
    ),
    (
        _defs(("hkb", "B"), ("rkn", "N")),
        {"hkb": {"B": bytes.fromhex("040506")}, "rkn": {"N": "123"}},
        None,
    ),
    (
        _defs(("hkb", "B"), ("rkb", "B")),
        {"hkb": {"B": bytes.fromhex("040506")}, "rkb": {"B": bytes.fromhex("010203")}},
        "4743040506010203",
    ),
]


@pytest.mark.parametrize("keydef, item, expected_hex", KEY_CASES)
def test_item_key_round_trip(keydef, item, expected_hex):
    buf = io.BytesIO()
    writer = Writer(buf)
    encode_item_key(item, keydef, writer)
    writer.flush()
    encoded = buf.getvalue()
    if expected_hex is not None:
        assert encoded.hex() == expected_hex
    assert decode_item_key(Reader(encoded), keydef) == item


def test_range_number_keys_sort_in_numeric_order():
    keydef = _defs(("hks", "S"), ("rkn", "N"))
    numbers = ["-100", "-1.5", "0", "0.25", "3", "42", "1000"]
    keys = [get_encoded_item_key({"hks": {"S": "h"}, "rkn": {"N": n}}, keydef) for n in numbers]
    assert keys == sorted(keys)


def test_get_encoded_item_key_none_item():
    with pytest.raises(InvalidParameterError):
        get_encoded_item_key(None, _defs(("hks", "S")))


def test_missing_hash_key():
    with pytest.raises(MissingKeyError):
        get_encoded_item_key({"other": {"S": "x"}}, _defs(("hks", "S")))


def test_missing_range_key():
    with pytest.raises(MissingKeyError):
        get_encoded_item_key({"hks": {"S": "x"}}, _defs(("hks", "S"), ("rks", "S")))


def test_wrong_key_type_is_missing():
    with pytest.raises(MissingKeyError):
        get_encoded_item_key({"hks": {"N": "1"}}, _defs(("hks", "S")))


def test_unsupported_hash_type():
    with pytest.raises(InvalidParameterError, match="Hash Attribute: BOOL"):
        get_encoded_item_key({"k": {"BOOL": True}}, _defs(("k", "BOOL")))


def test_unsupported_range_type():
    with pytest.raises(InvalidParameterError, match="Range Attribute: X"):
        get_encoded_item_key({"h": {"S": "a"}, "r": {"S": "b"}}, _defs(("h", "S"), ("r", "X")))


def test_invalid_range_number():
    with pytest.raises(InvalidParameterError, match="invalid number"):
        get_encoded_item_key({"h": {"S": "a"}, "r": {"N": "1.x"}}, _defs(("h", "S"), ("r", "N")))


ATTR_NAMES = ("av1", "av2", "av3")
ATTR_LIST_ID = 1


def _names_to_id(names):
    if tuple(names) != ATTR_NAMES:
        raise LookupError(f"unknown attribute list {names}")
    return ATTR_LIST_ID


def _id_to_names(list_id):
    if list_id != ATTR_LIST_ID:
        raise LookupError(f"unknown attribute list id {list_id}")
    return list(ATTR_NAMES)


def test_item_non_key_attributes_round_trip():
    keydef = _defs(("hks", "S"), ("rkn", "N"))
    item = {
        "hks": {"S": "hkv"},
        "rkn": {"N": "123"},
        "av3": {"B": bytes.fromhex("010203")},
        "av1": {"S": "avs"},
        "av2": {"N": "456"},
    }
    buf = io.BytesIO()
    writer = Writer(buf)
    encode_item_non_key_attributes(item, keydef, _names_to_id, writer)
    writer.flush()
    encoded = buf.getvalue()
    assert encoded[0] == ATTR_LIST_ID

    actual = decode_item_non_key_attributes(Reader(encoded), _id_to_names)
    expected = {k: v for k, v in item.items() if k not in ("hks", "rkn")}
    assert actual == expected
    assert list(actual) == list(ATTR_NAMES)


def test_non_key_attributes_unknown_list_propagates():
    keydef = _defs(("hks", "S"))
    with pytest.raises(LookupError):
        encode_item_non_key_attributes(
            {"hks": {"S": "x"}, "zzz": {"S": "y"}}, keydef, _names_to_id, Writer(io.BytesIO())
        )


def test_non_key_attributes_unknown_id_propagates():
    buf = io.BytesIO()
    writer = Writer(buf)
    writer.write_int(7)
    writer.flush()
    with pytest.raises(LookupError):
        decode_item_non_key_attributes(Reader(buf.getvalue()), _id_to_names)