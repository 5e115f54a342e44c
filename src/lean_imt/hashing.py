"""
Hash function handling for the Lean incremental Merkle tree.

The tree is hash-agnostic: callers inject a unary leaf hash `H1` and a binary
node hash `H2`. In production these are circuit-friendly hashes such as
Poseidon. This module validates injected functions and provides a small,
deterministic SHA-256 based reference hasher for tests and tooling.

### Reference hasher construction

Inputs are encoded as fixed-width big-endian integers and domain-separated
the way Certificate Transparency trees separate leaves from nodes:

- `hash1(x)    = SHA256(0x00 || x) mod p`
- `hash2(l, r) = SHA256(0x01 || l || r) mod p`
"""

from __future__ import annotations

import hashlib
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_MODULUS
from .types.exceptions import ConfigError

LEAF_DOMAIN: bytes = b"\x00"
"""Domain separator prepended to leaf hash inputs."""

NODE_DOMAIN: bytes = b"\x01"
"""Domain separator prepended to node hash inputs."""


def validate_hash_functions(leaf_hash: Any, node_hash: Any) -> None:
    """
    Checks that both injected hash functions are present and callable.

    Raises:
        ConfigError: If either function is missing or not callable.
    """
    for setting, func in (("leaf_hash", leaf_hash), ("node_hash", node_hash)):
        if func is None:
            raise ConfigError(setting, "a hash function is required")
        if not callable(func):
            raise ConfigError(setting, f"expected a callable, got {type(func).__name__}")


class Sha256FieldHasher(BaseModel):
    """A SHA-256 based hasher whose outputs are reduced into a prime field."""

    model_config = ConfigDict(frozen=True)

    modulus: int = Field(default=DEFAULT_MODULUS, gt=1, description="The field modulus p.")

    @property
    def element_size(self) -> int:
        """The number of bytes used to encode one field element."""
        return (self.modulus.bit_length() + 7) // 8

    def _encode(self, value: int) -> bytes:
        """
        Encodes a field element as fixed-width big-endian bytes.

        Raises:
            ValueError: If `value` is not an element of the field.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Field element must be an int, got {type(value).__name__}")
        if not 0 <= value < self.modulus:
            raise ValueError(f"{value} is not an element of the field of order {self.modulus}")
        return value.to_bytes(self.element_size, "big")

    def _digest(self, data: bytes) -> int:
        return int.from_bytes(hashlib.sha256(data).digest(), "big") % self.modulus

    def hash1(self, value: int) -> int:
        """The leaf hash `H1`."""
        return self._digest(LEAF_DOMAIN + self._encode(value))

    def hash2(self, left: int, right: int) -> int:
        """The node hash `H2`, ordered `(left, right)`."""
        return self._digest(NODE_DOMAIN + self._encode(left) + self._encode(right))
