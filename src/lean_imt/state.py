"""
Full-state export and import for the Lean incremental Merkle tree.

An exported state holds every level of the tree, so a tree can be rebuilt
without replaying its insertions. Import never trusts the blob: the level
layout and every internal node are checked against the node hash.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import Field, ValidationError

from .path import level_sizes
from .types import CorruptStateError, FieldElement, NodeHash, StrictBaseModel

logger = logging.getLogger(__name__)


class TreeState(StrictBaseModel):
    """A serializable snapshot of every level of a tree."""

    size: int = Field(ge=0)
    """The number of leaves."""

    levels: list[list[FieldElement]] = Field(min_length=1)
    """The node levels, leaves first. The last level holds the root."""


def parse_state(state: TreeState | str | bytes | Mapping[str, Any]) -> TreeState:
    """
    Parses an exported state from any of its accepted forms.

    Raises:
        CorruptStateError: If the input is not a well-formed state.
    """
    if isinstance(state, TreeState):
        return state

    try:
        if isinstance(state, (str, bytes)):
            return TreeState.from_json(state)
        return TreeState.model_validate(state)
    except ValidationError as e:
        raise CorruptStateError(f"malformed state: {e.error_count()} validation error(s)") from e


def load_levels(state: TreeState, node_hash: NodeHash) -> list[list[int]]:
    """
    Validates a state and returns fresh, owned copies of its levels.

    ### Checks

    1.  The leaf level holds exactly `size` leaves.
    2.  The number of levels and the length of each level match `size`.
    3.  Every internal node equals `H2(left, right)` of its children, or its
        only child when the lean rule applies.

    Args:
        state: The parsed state.
        node_hash: The binary node hash used to check internal nodes.

    Returns:
        The levels, ready to be owned by a tree.

    Raises:
        CorruptStateError: If any check fails.
    """
    levels = [list(level) for level in state.levels]

    if len(levels[0]) != state.size:
        raise CorruptStateError(
            f"size is {state.size} but the leaf level holds {len(levels[0])} leaves", level=0
        )

    expected_sizes = level_sizes(state.size)
    if len(levels) != len(expected_sizes):
        raise CorruptStateError(
            f"expected {len(expected_sizes)} levels for {state.size} leaves, got {len(levels)}"
        )

    for level, (nodes, expected) in enumerate(zip(levels, expected_sizes, strict=True)):
        if len(nodes) != expected:
            raise CorruptStateError(
                f"expected {expected} nodes, got {len(nodes)}",
                level=level,
            )

    for level in range(1, len(levels)):
        children = levels[level - 1]
        for index, node in enumerate(levels[level]):
            left = children[2 * index]
            if 2 * index + 1 < len(children):
                expected_node = node_hash(left, children[2 * index + 1])
            else:
                expected_node = left
            if node != expected_node:
                raise CorruptStateError(
                    "node does not match its children", level=level, index=index
                )

    logger.debug("Validated tree state with %d leaves and %d levels", state.size, len(levels))
    return levels
