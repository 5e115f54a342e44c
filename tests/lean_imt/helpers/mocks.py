"""Mock hash functions for observing how the tree calls them."""

from __future__ import annotations

from .builders import h2


class RecordingNodeHash:
    """
    Node hash wrapper that records every call.

    Delegates to the shared reference node hash, so results are unchanged.
    """

    def __init__(self) -> None:
        """Initialize with an empty call log."""
        self.calls: list[tuple[int, int]] = []

    def __call__(self, left: int, right: int) -> int:
        """Record the operands and hash them."""
        self.calls.append((left, right))
        return h2(left, right)

    def reset(self) -> None:
        """Forget all recorded calls."""
        self.calls.clear()
