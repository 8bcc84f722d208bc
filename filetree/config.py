"""Configuration for file trees.

Provides the FileTreeConfig dataclass and the connect_tree factory
function for configuring a FileTree's resource limits and checking.
"""

from dataclasses import dataclass


@dataclass
class FileTreeConfig:
    """Configuration for an in-memory file tree.

    Attributes:
        max_nodes: Maximum number of nodes the tree may hold.
            None means unlimited.
        max_size_mb: Maximum total length of all file contents in
            megabytes. None means unlimited.
        checked: Run the invariant checker before and after every
            mutating operation, raising InvariantViolation on failure.
        absolute_paths: Render paths in the dump with a leading slash.
    """

    max_nodes: int | None = None
    max_size_mb: float | None = None
    checked: bool = False
    absolute_paths: bool = True

    @property
    def max_size_bytes(self) -> int | None:
        if self.max_size_mb is None:
            return None
        return int(self.max_size_mb * 1024 * 1024)


def connect_tree(**kwargs) -> FileTreeConfig:
    """Configure a file tree.

    Args:
        **kwargs: Any FileTreeConfig field.
            - max_nodes (int): Optional. Node allocation limit.
            - max_size_mb (float): Optional. Content size limit.
            - checked (bool): Optional. Validate around every mutation.
            - absolute_paths (bool): Optional. Leading slash in the dump.

    Returns:
        FileTreeConfig for FileTree construction.

    Examples:
        >>> connect_tree()
        FileTreeConfig(max_nodes=None, max_size_mb=None, checked=False, absolute_paths=True)

        >>> connect_tree(max_nodes=100, checked=True)
        FileTreeConfig(max_nodes=100, max_size_mb=None, checked=True, absolute_paths=True)
    """
    max_nodes = kwargs.pop("max_nodes", None)
    max_size_mb = kwargs.pop("max_size_mb", None)
    checked = kwargs.pop("checked", False)
    absolute_paths = kwargs.pop("absolute_paths", True)

    if kwargs:
        raise ValueError(f"Unexpected arguments for file tree: {list(kwargs.keys())}")

    if max_nodes is not None and max_nodes < 0:
        raise ValueError(f"max_nodes must be non-negative, got {max_nodes}")
    if max_size_mb is not None and max_size_mb < 0:
        raise ValueError(f"max_size_mb must be non-negative, got {max_size_mb}")

    return FileTreeConfig(
        max_nodes=max_nodes,
        max_size_mb=max_size_mb,
        checked=bool(checked),
        absolute_paths=bool(absolute_paths),
    )
