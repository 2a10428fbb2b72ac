"""Arbitrary-precision decimal numbers held as an unscaled integer and a scale."""

from __future__ import annotations

import re
from dataclasses import dataclass

from daxwire.errors import InvalidParameterError

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


@dataclass(frozen=True)
class Decimal:
    """A signed decimal equal to ``unscaled * 10 ** -scale``."""

    unscaled: int = 0
    scale: int = 0

    @classmethod
    def parse(cls, text: str) -> Decimal:
        """Parse a number such as ``-12.5``, ``3E7`` or ``1.23E-4``."""
        if not text:
            raise InvalidParameterError(f"invalid number {text}")

        mantissa = text
        exponent = 0
        sep = min((i for i in (text.find("E"), text.find("e")) if i >= 0), default=-1)
        if sep >= 0:
            exp_text = text[sep + 1:]
            if not _INTEGER.fullmatch(exp_text):
                raise InvalidParameterError(f"invalid number {text}")
            exponent = int(exp_text)
            if not _INT32_MIN <= exponent <= _INT32_MAX:
                raise InvalidParameterError(f"invalid number {text}")
            mantissa = text[:sep]

        dot = mantissa.rfind(".")
        if dot >= 0:
            sign_pos = min((i for i in (mantissa.find("+"), mantissa.find("-")) if i >= 0), default=-1)
            if sign_pos > 0:
                raise InvalidParameterError(f"invalid number {text}")
            exponent -= len(mantissa) - dot - 1
            mantissa = mantissa[:dot] + mantissa[dot + 1:]

        if not _INTEGER.fullmatch(mantissa):
            raise InvalidParameterError(f"invalid number {text}")
        return cls(int(mantissa), -exponent)

    def __str__(self) -> str:
        if self.scale == 0:
            return str(self.unscaled)
        return f"{self.unscaled}E{-self.scale}"