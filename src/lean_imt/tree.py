"""
The Lean incremental Merkle tree.

### Storage

Nodes are stored level by level in plain Python lists: `levels[0]` holds the
leaves, `levels[d]` holds the nodes at height `d`, and the last level holds the
root. Each level has `ceil(len(previous) / 2)` nodes. There are no pointers
between nodes; a node is addressed by its `(level, index)` pair.

### Incremental maintenance

A mutation touches exactly one leaf-to-root path. The path trace for the
touched leaf is computed once and every new ancestor is hashed before any slot
is written. When the tree grows past a power of two, a new empty level is
appended and the root ends up in it.

### Concurrency

A tree is not thread-safe. Mutations must be serialized by the caller, and
must not overlap with reads of the same instance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from .hashing import validate_hash_functions
from .path import combine, compute_path, level_sizes
from .proof import LeanIMTProof, build_proof, verify_proof
from .state import TreeState, load_levels, parse_state
from .types import EmptyTreeError, LeafHash, LeafIndexError, NodeHash

logger = logging.getLogger(__name__)


class LeanIMT:
    """
    An append-only binary Merkle tree following the lean rule.

    Leaves are expected to be already hashed. The leaf hash is kept so that
    callers can hash raw values with the function the tree was configured with.
    """

    def __init__(
        self,
        leaf_hash: LeafHash,
        node_hash: NodeHash,
        leaves: Iterable[int] | None = None,
    ) -> None:
        """
        Creates a tree, optionally filled with initial leaves.

        Args:
            leaf_hash: The unary leaf hash `H1`.
            node_hash: The binary node hash `H2(left, right)`.
            leaves: Already-hashed leaves, inserted in order.

        Raises:
            ConfigError: If either hash function is missing or not callable.
        """
        validate_hash_functions(leaf_hash, node_hash)

        self._leaf_hash = leaf_hash
        self._node_hash = node_hash
        self._levels: list[list[int]] = [[]]

        if leaves is not None:
            self.insert_many(leaves)

    # =================================================================
    # Accessors
    # =================================================================

    @property
    def size(self) -> int:
        """The number of leaves."""
        return len(self._levels[0])

    @property
    def depth(self) -> int:
        """The number of levels above the leaf level."""
        return len(self._levels) - 1

    @property
    def root(self) -> int | None:
        """The root, or `None` for an empty tree."""
        if self.size == 0:
            return None
        return self._levels[-1][0]

    @property
    def leaves(self) -> tuple[int, ...]:
        """A copy of the leaves."""
        return tuple(self._levels[0])

    @property
    def levels(self) -> tuple[tuple[int, ...], ...]:
        """A copy of every level, leaves first."""
        return tuple(tuple(level) for level in self._levels)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, leaf: object) -> bool:
        return self.has(leaf)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.size}, depth={self.depth}, root={self.root})"

    def hash_leaf(self, value: int) -> int:
        """Hashes a raw value with the leaf hash `H1`."""
        return self._leaf_hash(value)

    # =================================================================
    # Mutations
    #
    # Every mutation computes its new nodes before writing any of them.
    # If the node hash raises, the tree is left exactly as it was.
    # =================================================================

    def insert(self, leaf: int) -> None:
        """
        Appends a leaf and rebuilds its path to the root.

        Args:
            leaf: The already-hashed leaf.
        """
        index = self.size
        sizes = level_sizes(index + 1)
        path_nodes = self._path_nodes(index, leaf, sizes)

        self._levels[0].append(leaf)

        # Crossing a power of two adds exactly one level above the old root.
        if len(sizes) > len(self._levels):
            self._levels.append([])
            logger.debug("Tree depth grew to %d", self.depth)

        self._write_path(index, path_nodes)
        logger.debug("Inserted leaf at index %d", index)

    def insert_many(self, leaves: Iterable[int]) -> None:
        """
        Appends several leaves at once.

        The result is identical to calling `insert` for each leaf in order, but
        every internal node is computed at most once.

        Args:
            leaves: The already-hashed leaves, in insertion order.
        """
        new_leaves = list(leaves)
        if not new_leaves:
            return

        start = self.size
        sizes = level_sizes(start + len(new_leaves))

        # Each level is rebuilt from the first parent touched by the new leaves.
        # `tails[d]` holds the new nodes of level `d + 1` from `firsts[d]` onward.
        tails: list[list[int]] = []
        firsts: list[int] = []
        first, tail = start, new_leaves
        for level in range(len(sizes) - 1):
            old = self._levels[level] if level < len(self._levels) else []

            def child(
                i: int, old: list[int] = old, first: int = first, tail: list[int] = tail
            ) -> int:
                return old[i] if i < first else tail[i - first]

            first_parent = first >> 1
            parents = [
                self._parent_of(child, sizes[level], i)
                for i in range(first_parent, sizes[level + 1])
            ]
            firsts.append(first_parent)
            tails.append(parents)
            first, tail = first_parent, parents

        self._levels[0].extend(new_leaves)
        while len(self._levels) < len(sizes):
            self._levels.append([])
        for level, (first_parent, parents) in enumerate(zip(firsts, tails, strict=True), 1):
            self._levels[level][first_parent:] = parents

        logger.debug("Inserted %d leaves starting at index %d", len(new_leaves), start)

    def update(self, index: int, leaf: int) -> None:
        """
        Replaces a leaf and rebuilds its path to the root.

        Args:
            index: The position of the leaf to replace.
            leaf: The new, already-hashed leaf.

        Raises:
            LeafIndexError: If `index` is outside `[0, size)`.
        """
        self._check_index(index)

        path_nodes = self._path_nodes(index, leaf, level_sizes(self.size))

        self._levels[0][index] = leaf
        self._write_path(index, path_nodes)
        logger.debug("Updated leaf at index %d", index)

    def update_many(self, indices: Sequence[int], leaves: Sequence[int]) -> None:
        """
        Replaces several leaves at once.

        All arguments are validated before anything is written, so a rejected
        call leaves the tree unchanged.

        Args:
            indices: The positions of the leaves to replace, without duplicates.
            leaves: The new, already-hashed leaves, one per index.

        Raises:
            ValueError: If the lengths differ or an index appears twice.
            LeafIndexError: If any index is outside `[0, size)`.
        """
        if len(indices) != len(leaves):
            raise ValueError(
                f"Got {len(indices)} indices but {len(leaves)} leaves; counts must match"
            )
        if len(set(indices)) != len(indices):
            raise ValueError("Leaf indices must not contain duplicates")
        for index in indices:
            self._check_index(index)

        # Recompute only the parents of modified nodes, one level at a time.
        changes: list[dict[int, int]] = [dict(zip(indices, leaves, strict=True))]
        for level in range(self.depth):
            nodes = self._levels[level]
            changed = changes[-1]

            def child(i: int, nodes: list[int] = nodes, changed: dict[int, int] = changed) -> int:
                return changed.get(i, nodes[i])

            changes.append(
                {
                    parent: self._parent_of(child, len(nodes), parent)
                    for parent in {index >> 1 for index in changed}
                }
            )

        for nodes, changed in zip(self._levels, changes, strict=True):
            for index, node in changed.items():
                nodes[index] = node

        logger.debug("Updated %d leaves", len(indices))

    def remove_last(self) -> int:
        """
        Removes the last leaf.

        Only the last leaf can be removed, so every other index stays stable.

        Returns:
            The removed leaf.

        Raises:
            EmptyTreeError: If the tree has no leaves.
        """
        if self.size == 0:
            raise EmptyTreeError("remove the last leaf")

        new_size = self.size - 1
        sizes = level_sizes(new_size)

        # The new last leaf may have lost its sibling on some levels.
        path_nodes: list[int] = []
        if new_size > 0:
            path_nodes = self._path_nodes(new_size - 1, self._levels[0][new_size - 1], sizes)

        leaf = self._levels[0].pop()

        # Every level shrinks to its new length; the top level may disappear.
        del self._levels[len(sizes) :]
        for nodes, size in zip(self._levels, sizes, strict=True):
            del nodes[size:]

        if new_size > 0:
            self._write_path(new_size - 1, path_nodes)

        logger.debug("Removed leaf at index %d; depth is now %d", new_size, self.depth)
        return leaf

    # =================================================================
    # Queries
    # =================================================================

    def index_of(self, leaf: object) -> int | None:
        """
        Finds a leaf by linear scan.

        Only `int` leaves can match. `True` or `1.0` never match a stored `1`.

        Returns:
            The first index holding `leaf`, or `None` if it is absent.
        """
        if isinstance(leaf, bool) or not isinstance(leaf, int):
            return None
        try:
            return self._levels[0].index(leaf)
        except ValueError:
            return None

    def has(self, leaf: object) -> bool:
        """Checks whether `leaf` is in the tree."""
        return self.index_of(leaf) is not None

    def generate_proof(self, index: int) -> LeanIMTProof:
        """
        Builds an inclusion proof for the leaf at `index`.

        Raises:
            LeafIndexError: If `index` is outside `[0, size)`.
        """
        return build_proof(self._levels, index)

    def verify_proof(self, proof: LeanIMTProof | Mapping[str, Any]) -> bool:
        """
        Verifies a proof with this tree's node hash.

        The proof is checked against the root it carries, not against this
        tree's current root.
        """
        return verify_proof(proof, self._node_hash)

    # =================================================================
    # State export / import
    # =================================================================

    def export_state(self) -> TreeState:
        """Returns a snapshot of every level."""
        return TreeState(size=self.size, levels=[list(level) for level in self._levels])

    def export(self) -> str:
        """Returns a snapshot of every level as a JSON string."""
        return self.export_state().to_json()

    @classmethod
    def import_state(
        cls,
        leaf_hash: LeafHash,
        node_hash: NodeHash,
        state: TreeState | str | bytes | Mapping[str, Any],
    ) -> LeanIMT:
        """
        Rebuilds a tree from an exported state without replaying insertions.

        Args:
            leaf_hash: The unary leaf hash `H1`.
            node_hash: The binary node hash `H2(left, right)`.
            state: A `TreeState`, its JSON form, or its mapping form.

        Returns:
            A tree equal, node for node, to the exported one.

        Raises:
            ConfigError: If either hash function is missing or not callable.
            CorruptStateError: If the state is malformed or inconsistent.
        """
        tree = cls(leaf_hash, node_hash)
        tree._levels = load_levels(parse_state(state), node_hash)
        logger.debug("Imported tree with %d leaves", tree.size)
        return tree

    # =================================================================
    # Internal helpers
    # =================================================================

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise LeafIndexError(index, self.size)

    def _parent_of(self, child: Callable[[int], int], count: int, parent: int) -> int:
        """Computes the parent at position `parent` from a level of `count` nodes."""
        left = child(2 * parent)
        if 2 * parent + 1 < count:
            return self._node_hash(left, child(2 * parent + 1))
        return left

    def _path_nodes(self, index: int, leaf: int, sizes: list[int]) -> list[int]:
        """
        Computes the ancestors `leaf` would have at `index`, without writing them.

        Args:
            index: The leaf position.
            leaf: The leaf value at that position.
            sizes: The level lengths of the tree once the mutation is applied.

        Returns:
            The ancestors from level 1 up to the root level.
        """
        nodes: list[int] = []
        node = leaf
        for step in compute_path(self._levels, index, sizes):
            node = combine(self._node_hash, node, step)
            nodes.append(node)
        return nodes

    def _write_path(self, index: int, path_nodes: list[int]) -> None:
        """
        Stores precomputed ancestors of the leaf at `index`.

        A parent slot equal to the current level length does not exist yet
        and is appended; any other slot is overwritten.
        """
        for level, node in enumerate(path_nodes, 1):
            index >>= 1
            parents = self._levels[level]
            if index == len(parents):
                parents.append(node)
            else:
                parents[index] = node
