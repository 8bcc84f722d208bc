"""Base types shared by the tree, its nodes and the checker.

Defines node kinds, the status codes returned by tree operations, the
stat record and the package's exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class NodeKind(IntEnum):
    """Kind of a tree node.

    The integer values order files before directories, which is the
    ordering siblings are kept in.
    """

    FILE = 0
    DIRECTORY = 1


class Status(IntEnum):
    """Result of a tree operation.

    Tree operations return one of these instead of raising.

    Truthiness follows success, not the integer value: ``SUCCESS`` (0) is
    truthy and every error is falsy, so ``if tree.insert_dir(p):`` reads
    as "if the insert succeeded". Compare with ``is Status.SUCCESS`` when
    in doubt.
    """

    SUCCESS = 0
    INITIALIZATION_ERROR = 1
    ALREADY_IN_TREE = 2
    CONFLICTING_PATH = 3
    NOT_FOUND = 4
    PARENT_CHILD_ERROR = 5
    MEMORY_ERROR = 6
    BAD_PATH = 7
    NOT_A_DIRECTORY = 8

    def __bool__(self) -> bool:
        return self is Status.SUCCESS


@dataclass(frozen=True)
class NodeStat:
    """Stat record for a single node.

    Attributes:
        path: Node path as it was requested.
        kind: FILE or DIRECTORY.
        length: Content length in bytes (None for directories).
    """

    path: str
    kind: NodeKind
    length: int | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    # os.stat_result-compatible subset

    @property
    def st_size(self) -> int:
        return self.length or 0

    @property
    def st_mode(self) -> int:
        return 0o040755 if self.is_dir else 0o100644


class FileTreeError(Exception):
    """Base class for filetree exceptions."""


class StatusError(FileTreeError):
    """A tree operation returned a non-success status."""

    def __init__(self, status: Status, message: str | None = None):
        self.status = status
        super().__init__(message or f"operation failed: {status.name}")


class InvariantViolation(FileTreeError, AssertionError):
    """The tree no longer satisfies its structural invariants.

    Raised only in checked mode; indicates a defect in a mutator.
    """


def raise_for_status(status: Status, message: str | None = None) -> None:
    """Raise StatusError unless status is SUCCESS.

    For callers that prefer exceptions over status codes::

        raise_for_status(tree.insert_dir("a/b"))
    """
    if status is not Status.SUCCESS:
        raise StatusError(status, message)
