"""
Inclusion proofs for the Lean incremental Merkle tree.

### Why the proof carries the tree size

Because of the lean rule, whether a node has a sibling at some level depends
on the size of that level, which in turn depends on the number of leaves. The
sibling list alone does not say which levels were skipped. The proof therefore
embeds `size`, and the verifier rebuilds the level sizes from it.

A proof generated against a tree of `n` leaves only verifies as a proof for a
tree of exactly `n` leaves.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import Field, ValidationError

from .path import Direction, Sibling, combine, compute_path
from .types import FieldElement, LeafIndexError, NodeHash, StrictBaseModel


class LeanIMTProof(StrictBaseModel):
    """
    A proof that `leaf` sits at `index` in a tree of `size` leaves with root `root`.

    This object is immutable and holds no reference to the tree that produced it.
    Its JSON form uses camelCase keys and decimal strings for field elements.
    """

    root: FieldElement
    """The root the proof commits to."""

    leaf: FieldElement
    """The leaf being proven."""

    index: int = Field(ge=0)
    """The position of the leaf."""

    siblings: list[FieldElement]
    """Sibling nodes, leaf to root. Levels where the lean rule applied are omitted."""

    size: int = Field(ge=0)
    """The number of leaves in the tree the proof was generated from."""


def build_proof(levels: Sequence[Sequence[int]], index: int) -> LeanIMTProof:
    """
    Builds an inclusion proof for the leaf at `index`.

    Args:
        levels: The node levels of a tree, leaves first.
        index: The position of the leaf to prove.

    Returns:
        The proof. Only `Sibling` steps of the path contribute to `siblings`.

    Raises:
        LeafIndexError: If `index` is outside `[0, size)`.
    """
    leaves = levels[0]
    if not 0 <= index < len(leaves):
        raise LeafIndexError(index, len(leaves))

    siblings = [step.value for step in compute_path(levels, index) if isinstance(step, Sibling)]

    return LeanIMTProof(
        root=levels[-1][0],
        leaf=leaves[index],
        index=index,
        siblings=siblings,
        size=len(leaves),
    )


def verify_proof(proof: LeanIMTProof | Mapping[str, Any], node_hash: NodeHash) -> bool:
    """
    Verifies an inclusion proof against the root it carries.

    ### Verification Algorithm

    1.  Start with `node = leaf`, the leaf position and the leaf level size.

    2.  At each level, the node has a sibling iff `index ^ 1 < level_size`.
        If it does, the next sibling from the proof is consumed and hashed
        with the node, ordered by the parity of the index. Otherwise the node
        is carried up unchanged and no sibling is consumed.

    3.  Halve the index and the level size (rounding up) and repeat until the
        level holds a single node.

    4.  The proof is valid iff every sibling was consumed exactly once and the
        final node equals the root.

    Every structural problem resolves to `False` instead of raising.

    Args:
        proof: The proof, or a mapping in its serialized form.
        node_hash: The binary node hash `H2(left, right)`.

    Returns:
        `True` if the proof is valid, `False` otherwise.
    """
    if not isinstance(proof, LeanIMTProof):
        try:
            proof = LeanIMTProof.model_validate(proof)
        except ValidationError:
            return False

    if not 0 <= proof.index < proof.size:
        return False

    node = proof.leaf
    index = proof.index
    level_size = proof.size
    siblings = iter(proof.siblings)

    try:
        while level_size > 1:
            if index ^ 1 < level_size:
                sibling = next(siblings, None)
                if sibling is None:
                    # Too few siblings for this size.
                    return False
                node = combine(node_hash, node, _step(sibling, index))
            index >>= 1
            level_size = (level_size + 1) // 2
    except (ValueError, TypeError):
        # The hash function rejected a value carried by the proof.
        return False

    # Too many siblings for this size.
    if next(siblings, None) is not None:
        return False

    return node == proof.root


def _step(sibling: int, index: int) -> Sibling:
    """Rebuilds the path step for a sibling from the parity of the traced index."""
    return Sibling(value=sibling, direction=Direction.LEFT if index & 1 else Direction.RIGHT)
