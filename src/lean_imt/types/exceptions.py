"""Exception hierarchy for the Lean incremental Merkle tree."""

from __future__ import annotations


class LeanIMTError(Exception):
    """
    Base exception for all Lean-IMT errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ConfigError(LeanIMTError):
    """
    Raised when the tree or the package is configured incorrectly.

    This covers a missing or non-callable hash function at construction time,
    as well as an unsupported value in the environment configuration.

    Attributes:
        setting: The name of the offending argument or environment variable.
        detail: Additional context about the error.
    """

    def __init__(self, setting: str, detail: str) -> None:
        self.setting = setting
        self.detail = detail

        super().__init__(f"Invalid {setting}: {detail}")


class LeafIndexError(LeanIMTError, IndexError):
    """
    Raised when a leaf index lies outside `[0, size)`.

    Also an `IndexError`, so generic sequence-style handlers keep working.

    Attributes:
        index: The rejected index.
        size: The number of leaves in the tree at the time of the call.
    """

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size

        if size == 0:
            msg = f"Leaf index {index} is out of range: the tree is empty"
        else:
            msg = (
                f"Leaf index {index} is out of range for {size} leaves "
                f"(valid range: [0, {size - 1}])"
            )

        super().__init__(msg)


class EmptyTreeError(LeanIMTError):
    """
    Raised when an operation requires at least one leaf.

    Attributes:
        operation: The operation that was attempted.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation

        super().__init__(f"Cannot {operation}: the tree is empty")


class CorruptStateError(LeanIMTError):
    """
    Raised when an exported tree state fails validation on import.

    Attributes:
        detail: Description of what went wrong.
        level: The level at which the inconsistency was found (if known).
        index: The node index at which the inconsistency was found (if known).
    """

    def __init__(
        self,
        detail: str,
        *,
        level: int | None = None,
        index: int | None = None,
    ) -> None:
        self.detail = detail
        self.level = level
        self.index = index

        msg = f"Corrupt tree state: {detail}"
        if level is not None and index is not None:
            msg = f"{msg} (at level {level}, index {index})"
        elif level is not None:
            msg = f"{msg} (at level {level})"

        super().__init__(msg)
