"""Reusable type definitions for the Lean incremental Merkle tree."""

from .base import CamelModel, StrictBaseModel
from .exceptions import (
    ConfigError,
    CorruptStateError,
    EmptyTreeError,
    LeafIndexError,
    LeanIMTError,
)
from .field import FieldElement, LeafHash, NodeHash

__all__ = [
    # Core types
    "CamelModel",
    "StrictBaseModel",
    "FieldElement",
    "LeafHash",
    "NodeHash",
    # Exceptions
    "LeanIMTError",
    "ConfigError",
    "LeafIndexError",
    "EmptyTreeError",
    "CorruptStateError",
]
