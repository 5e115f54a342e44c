"""
Field element type and hash function signatures.

A field element is a non-negative, arbitrary-precision integer. The tree
itself never enforces an upper bound: the injected hash functions define
which values are meaningful.
"""

import re
from collections.abc import Callable
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer


_DECIMAL = re.compile(r"[0-9]+")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")


def _parse_field_element(value: Any) -> Any:
    """
    Accepts decimal or `0x`-prefixed strings in addition to plain integers.

    JavaScript tooling writes bigints as strings, so both spellings must
    round-trip. Other spellings Python would accept (`0b`, `0o`, `_`
    separators, signs, whitespace) are left as strings and rejected by
    pydantic's strict `int` check, like every other non-integer input.
    """
    if isinstance(value, str):
        if _DECIMAL.fullmatch(value):
            return int(value, 10)
        if _HEX.fullmatch(value):
            return int(value, 16)
    return value


FieldElement = Annotated[
    int,
    BeforeValidator(_parse_field_element),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(ge=0),
]
"""A field element: validated as `int >= 0`, serialized to JSON as a decimal string."""

LeafHash = Callable[[int], int]
"""The unary leaf hash `H1: Field -> Field`."""

NodeHash = Callable[[int, int], int]
"""The binary node hash `H2: Field x Field -> Field`, taking `(left, right)`."""
