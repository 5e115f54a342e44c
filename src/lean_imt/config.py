"""
Global configuration for the Lean incremental Merkle tree.

This module contains environment-specific settings that apply across the package.
"""

import os

from .types.exceptions import ConfigError

BN254_SCALAR_FIELD: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)
"""The BN254 scalar field order, the field Poseidon runs over in common zk circuits."""

KOALABEAR_PRIME: int = 2**31 - 2**24 + 1
"""The KoalaBear prime: P = 2^31 - 2^24 + 1."""

_SUPPORTED_FIELDS: dict[str, int] = {
    "bn254": BN254_SCALAR_FIELD,
    "koalabear": KOALABEAR_PRIME,
}

LEAN_IMT_FIELD = os.environ.get("LEAN_IMT_FIELD", "bn254").lower()
"""The field flag ('bn254' or 'koalabear'). Defaults to 'bn254'."""

if LEAN_IMT_FIELD not in _SUPPORTED_FIELDS:
    raise ConfigError(
        "LEAN_IMT_FIELD",
        f"'{LEAN_IMT_FIELD}' is not supported. Supported values: {sorted(_SUPPORTED_FIELDS)}",
    )

DEFAULT_MODULUS: int = _SUPPORTED_FIELDS[LEAN_IMT_FIELD]
"""The modulus reference hashers reduce into when none is given explicitly."""
