"""CBOR wire encoding for DynamoDB attribute values, item keys and order-preserving decimals."""

__version__ = "0.1.0"