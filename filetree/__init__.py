"""filetree: In-memory hierarchical namespace of directories and files."""

from .base import (
    FileTreeError,
    InvariantViolation,
    NodeKind,
    NodeStat,
    Status,
    StatusError,
    raise_for_status,
)
from .config import FileTreeConfig, connect_tree
from .context import open_tree
from .node import Node
from .tree import FileTree, normalize_path

__all__ = [
    "connect_tree",
    "FileTree",
    "FileTreeConfig",
    "FileTreeError",
    "InvariantViolation",
    "Node",
    "NodeKind",
    "NodeStat",
    "normalize_path",
    "open_tree",
    "raise_for_status",
    "Status",
    "StatusError",
]
