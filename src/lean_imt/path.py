"""
Leaf-to-root path tracing for the Lean incremental Merkle tree.

### The lean rule

A classic Merkle tree pads every odd level so that each node has a sibling.
The Lean-IMT does not: when the last node of an odd-sized level has no
sibling, it is carried to the next level unchanged. The root of a tree with
leaves `[a, b, c]` is therefore `H2(H2(a, b), c)`, not `H2(H2(a, b), H2(c, 0))`.

The consequence for paths is that a leaf may have fewer siblings than the tree
has levels. A path is recorded as one step per level, where each step either
names a sibling (and the side it sits on) or states that no sibling exists.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .types.field import NodeHash


class Direction(Enum):
    """The side a sibling occupies relative to the traced node."""

    LEFT = "left"
    """The sibling is the left child; the traced node is the right child."""

    RIGHT = "right"
    """The sibling is the right child; the traced node is the left child."""


@dataclass(frozen=True, slots=True)
class Sibling:
    """A path step where the traced node is paired with a sibling."""

    value: int
    """The sibling node."""

    direction: Direction
    """Which side the sibling sits on."""


@dataclass(frozen=True, slots=True)
class NoSibling:
    """A path step where the lean rule applies and the node is carried up."""


PathStep = Sibling | NoSibling
"""One level of a leaf-to-root path."""


def depth_for_size(size: int) -> int:
    """
    Computes the depth of a tree holding `size` leaves.

    The depth is `ceil(log2(size))` for `size > 1`, and `0` otherwise.

    Examples: 0->0, 1->0, 2->1, 3->2, 4->2, 5->3.
    """
    if size <= 1:
        return 0
    return (size - 1).bit_length()


def level_sizes(size: int) -> list[int]:
    """
    Computes the number of nodes on each level of a tree with `size` leaves.

    Level `0` holds the leaves; each following level holds half as many nodes,
    rounded up. The list has `depth_for_size(size) + 1` entries.

    Examples: 0->[0], 1->[1], 3->[3, 2, 1], 5->[5, 3, 2, 1].
    """
    sizes = [size]
    for _ in range(depth_for_size(size)):
        sizes.append((sizes[-1] + 1) // 2)
    return sizes


def compute_path(
    levels: Sequence[Sequence[int]],
    index: int,
    sizes: Sequence[int] | None = None,
) -> list[PathStep]:
    """
    Traces the path from a leaf to the root.

    ### Algorithm

    The trace climbs one level at a time. At each level the sibling position
    is found by flipping the lowest bit of the current index (`index ^ 1`).
    The sibling exists iff that position is inside the level. The index is
    then halved to move to the parent.

    Only sibling nodes are read: the traced node and its ancestors are never
    inspected. With `sizes`, the trace can therefore be taken for the layout a
    tree will have after an insertion or removal, before any node is written.

    Args:
        levels: The node levels, leaves first. The last level is the root level.
        index: The position of the leaf in `levels[0]`.
        sizes: The level lengths to trace against. Defaults to the lengths of
            `levels`. Every sibling inside these lengths must exist in `levels`.

    Returns:
        One step per level below the root level, ordered leaf to root.
    """
    if sizes is None:
        sizes = [len(level) for level in levels]

    path: list[PathStep] = []

    for level, size in enumerate(sizes[:-1]):
        sibling_index = index ^ 1

        if sibling_index < size:
            # An odd index is a right child, so its sibling sits on the left.
            direction = Direction.LEFT if index & 1 else Direction.RIGHT
            path.append(Sibling(value=levels[level][sibling_index], direction=direction))
        else:
            # Last node of an odd-sized level: the lean rule applies.
            path.append(NoSibling())

        index >>= 1

    return path


def combine(node_hash: NodeHash, node: int, step: PathStep) -> int:
    """
    Computes the parent of `node` for a single path step.

    Args:
        node_hash: The binary node hash `H2(left, right)`.
        node: The traced node at the current level.
        step: The path step for the current level.

    Returns:
        The traced node's parent. For `NoSibling` this is `node` itself.
    """
    if isinstance(step, NoSibling):
        return node
    if step.direction is Direction.LEFT:
        return node_hash(step.value, node)
    return node_hash(node, step.value)
