"""
Lean incremental Merkle tree.

An append-only, dynamically-sized binary Merkle tree over field elements,
with caller-supplied hash functions, inclusion proofs and full-state export.

Usage::

    from lean_imt import LeanIMT, Sha256FieldHasher

    hasher = Sha256FieldHasher()
    tree = LeanIMT(hasher.hash1, hasher.hash2, [hasher.hash1(v) for v in (1, 2, 3)])

    proof = tree.generate_proof(2)
    assert tree.verify_proof(proof)
"""

from .hashing import Sha256FieldHasher, validate_hash_functions
from .path import (
    Direction,
    NoSibling,
    PathStep,
    Sibling,
    combine,
    compute_path,
    depth_for_size,
    level_sizes,
)
from .proof import LeanIMTProof, build_proof, verify_proof
from .state import TreeState
from .tree import LeanIMT
from .types import (
    ConfigError,
    CorruptStateError,
    EmptyTreeError,
    FieldElement,
    LeafHash,
    LeafIndexError,
    LeanIMTError,
    NodeHash,
)

__all__ = [
    # Tree
    "LeanIMT",
    "TreeState",
    # Paths
    "Direction",
    "Sibling",
    "NoSibling",
    "PathStep",
    "compute_path",
    "combine",
    "depth_for_size",
    "level_sizes",
    # Proofs
    "LeanIMTProof",
    "build_proof",
    "verify_proof",
    # Hashing
    "Sha256FieldHasher",
    "validate_hash_functions",
    # Types
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
