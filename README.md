# daxwire

Encoding and decoding of DynamoDB data in the CBOR wire format that a DAX
cluster speaks. There are no runtime dependencies.

The package holds:

- `daxwire.codec`: a buffered CBOR `Writer` and a `Reader` for integers
  (plain and tagged bignums), floats, strings, byte strings, arrays, maps,
  tags, booleans, null and decimal fractions;
- `daxwire.decimals`: a frozen `Decimal` made of an unscaled integer and a
  scale, with `Decimal.parse` and a string form;
- `daxwire.lexdecimal`: an order-preserving binary encoding of decimals, whose
  byte strings sort in the same order as the numbers they hold;
- `daxwire.attrval`: DynamoDB attribute values to and from CBOR;
- `daxwire.item`: item keys and non-key attributes;
- `daxwire.constants` and `daxwire.errors`: header constants and exceptions.

## Installation

```
pip install daxwire
```

## Attribute values

Attribute values are plain dictionaries in DynamoDB's low-level shape, such as
`{"S": "abc"}`, `{"N": "123"}`, `{"B": b"\x01"}`, `{"SS": [...]}`,
`{"NS": [...]}`, `{"BS": [...]}`, `{"L": [...]}`, `{"M": {...}}`,
`{"BOOL": True}` and `{"NULL": True}`.

```python
import io

from daxwire.attrval import decode_attribute_value, encode_attribute_value
from daxwire.codec import Reader, Writer

buf = io.BytesIO()
with Writer(buf) as writer:          # closing the writer flushes it
    encode_attribute_value({"N": "-314E-2"}, writer)

buf.seek(0)
with Reader(buf) as reader:
    print(decode_attribute_value(reader))   # {'N': '-314E-2'}
```

A `Reader` also accepts a `bytes` object directly.

Numbers are written as CBOR integers, as tagged big integers, or as tagged
decimal fractions when the text holds `.`, `e` or `E`. A number read back from
a decimal comes out as unscaled digits followed by an exponent, so `"3.14"`
reads back as `"314E-2"`. Sets are written under the tags 3321 (strings),
3322 (numbers) and 3323 (binaries).

## Decimals

```python
from daxwire.decimals import Decimal
from daxwire.lexdecimal import decode_lex_decimal, encode_lex_decimal

d = Decimal.parse("3.14")
print(str(d))                  # 314E-2

data = encode_lex_decimal(d)   # b'\xc1Q\x80 '
print(decode_lex_decimal(data))  # 314E-2
```

`decode_lex_decimal` takes a binary stream positioned at an encoded value, or
a bytes object, and returns the `Decimal` it holds; from a stream it consumes
only the bytes of that value. The null markers `0x00` and `0xff` decode to
`None`.

## Item keys

```python
from daxwire.item import AttributeDefinition, get_encoded_item_key

keydef = [AttributeDefinition("hks", "S"), AttributeDefinition("rkb", "B")]
item = {"hks": {"S": "hkv"}, "rkb": {"B": b"\x01\x02\x03"}}
key = get_encoded_item_key(item, keydef)
```

`encode_item_key` and `decode_item_key` write and read a key as a CBOR byte
string. A numeric range key is stored in the order-preserving decimal
encoding.

`encode_item_non_key_attributes` and `decode_item_non_key_attributes` write
and read the remaining attributes, sorted by name. The names themselves are
not written; in their place goes an attribute-list id. You supply the mapping
as callables: `names_to_id` receives the sorted tuple of names and returns the
id, and `id_to_names` receives the id and returns the names.

## Errors

Every error is a subclass of `daxwire.errors.DaxCodecError`:

- `InvalidParameterError` for input values that cannot be encoded;
- `NotANumberError` (an `InvalidParameterError`) when a number is expected
  but something else is found;
- `SerializationError` for malformed, truncated or unexpected wire data;
- `ObjectTooBigError` (a `SerializationError`) when a string or byte string
  is longer than 1 GiB;
- `MissingKeyError` when a key attribute is absent from an item.

## What it does not do

This is an encoding library only. It opens no connections, sends no requests
to a cluster, and does not keep the attribute-list id mapping itself; that
mapping is left to the callables you pass in.

## Running the tests

```
pip install -e .[test]
pytest
```