"""In-memory file tree.

Provides FileTree, a rooted hierarchy of directory and file nodes
addressed by slash-separated paths. Operations report failures as
Status values instead of raising.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterator, TypeVar

from . import checker
from .base import InvariantViolation, NodeKind, NodeStat, Status
from .config import FileTreeConfig
from .node import SEP, Node

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _checked(method: F) -> F:
    """Validate the tree before and after a mutating method in checked mode."""

    @functools.wraps(method)
    def wrapper(self: FileTree, *args: Any, **kwargs: Any) -> Any:
        self._assert_valid(method.__name__, "before")
        result = method(self, *args, **kwargs)
        self._assert_valid(method.__name__, "after")
        return result

    return wrapper  # type: ignore[return-value]


def _content_length(contents: Any, length: int | None) -> int:
    """Return the length to record for ``contents``.

    Raises:
        TypeError: If length is not an int.
        ValueError: If length is negative.
    """
    if length is None:
        return len(contents) if contents is not None else 0
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError(f"length must be int, not {type(length).__name__}")
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    return length


def normalize_path(path: str) -> str | None:
    """Return the canonical form of ``path``, or None if it is malformed.

    One leading slash is dropped. Empty paths, trailing slashes and
    empty segments are rejected.

    Raises:
        TypeError: If path is not a string.
    """
    if not isinstance(path, str):
        raise TypeError(f"path must be str, not {type(path).__name__}")
    if path.startswith(SEP):
        path = path[1:]
    if not path:
        return None
    if any(not segment for segment in path.split(SEP)):
        return None
    return path


class FileTree:
    """A single rooted tree of directories and files.

    The tree starts uninitialized; call ``init()`` before inserting and
    ``destroy()`` to drop every node. File contents are stored by
    reference and handed back unchanged.

    Example::

        tree = FileTree()
        tree.init()
        tree.insert_dir("/a/b")
        tree.insert_file("/a/b/f.txt", b"hello")
        print(tree.to_string())
    """

    def __init__(self, config: FileTreeConfig | None = None):
        """Initialize an uninitialized tree.

        Args:
            config: Limits and checking options. Defaults to no limits
                and no checking.
        """
        self._config = config or FileTreeConfig()
        self._initialized = False
        self._root: Node | None = None
        self._count = 0
        self._size = 0

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def config(self) -> FileTreeConfig:
        return self._config

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def root(self) -> Node | None:
        return self._root

    @property
    def count(self) -> int:
        return self._count

    @property
    def size(self) -> int:
        """Total length of all file contents."""
        return self._size

    def __len__(self) -> int:
        return self._count

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        return self._lookup(path) is not None

    def __str__(self) -> str:
        return self.to_string() or ""

    def __repr__(self) -> str:
        state = "initialized" if self._initialized else "uninitialized"
        return f"FileTree({state}, count={self._count})"

    def check(self) -> bool:
        """Run the invariant checker over the whole tree."""
        return checker.tree_is_valid(self._initialized, self._root, self._count)

    def _assert_valid(self, operation: str, when: str) -> None:
        if self._config.checked and not self.check():
            raise InvariantViolation(f"Tree invariants broken {when} {operation}()")

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @_checked
    def init(self) -> Status:
        """Move the tree to the initialized, empty state."""
        if self._initialized:
            return Status.INITIALIZATION_ERROR
        self._initialized = True
        self._root = None
        self._count = 0
        self._size = 0
        logger.debug("File tree initialized")
        return Status.SUCCESS

    @_checked
    def destroy(self) -> Status:
        """Destroy every node and return to the uninitialized state."""
        if not self._initialized:
            return Status.INITIALIZATION_ERROR
        destroyed = self._root.destroy() if self._root is not None else 0
        self._root = None
        self._count = 0
        self._size = 0
        self._initialized = False
        logger.debug("File tree destroyed (%d nodes freed)", destroyed)
        return Status.SUCCESS

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def _traverse_path(self, path: str) -> Node | None:
        """Return the deepest node whose path is a prefix of ``path``.

        The result is an exact match when ``path`` exists, otherwise the
        farthest ancestor along it. None if the root is not on the path.
        """
        curr = self._root
        if curr is None:
            return None
        if path == curr.path:
            return curr
        if not path.startswith(curr.path + SEP):
            return None

        while curr.is_dir:
            rest = path[len(curr.path) + 1:]
            segment = rest.split(SEP, 1)[0]
            child = curr.find_child(curr.path + SEP + segment)
            if child is None:
                break
            curr = child
            if curr.path == path:
                break
        return curr

    def _lookup(self, path: str) -> Node | None:
        """Return the node at exactly ``path``, or None."""
        if not self._initialized:
            return None
        canonical = normalize_path(path)
        if canonical is None:
            return None
        node = self._traverse_path(canonical)
        if node is None or node.path != canonical:
            return None
        return node

    def walk(self) -> Iterator[Node]:
        """Yield every node in pre-order, children in sorted order."""
        if self._root is not None:
            yield from self._root.walk()

    # -------------------------------------------------------------------------
    # Resource limits
    # -------------------------------------------------------------------------

    def _allocate(
        self, name: str, parent: Node | None, kind: NodeKind, pending: int
    ) -> Node | None:
        """Create a node unless the node limit would be exceeded.

        Args:
            pending: Nodes already created for the current call but not
                yet counted.
        """
        max_nodes = self._config.max_nodes
        if max_nodes is not None and self._count + pending + 1 > max_nodes:
            logger.debug("Node limit of %d reached", max_nodes)
            return None
        return Node.create(name, parent, kind)

    def _fits(self, added: int, removed: int = 0) -> bool:
        """Check whether a content size change stays within max_size_mb."""
        limit = self._config.max_size_bytes
        if limit is None:
            return True
        new_total = self._size - removed + added
        if new_total > limit:
            logger.debug(
                "Content size limit exceeded: %d bytes > %d bytes", new_total, limit
            )
            return False
        return True

    # -------------------------------------------------------------------------
    # Insertion
    # -------------------------------------------------------------------------

    def _insert_rest_of_path(
        self,
        path: str,
        parent: Node | None,
        kind: NodeKind,
        contents: Any = None,
        length: int = 0,
    ) -> Status:
        """Create the part of ``path`` below ``parent``.

        Builds the whole chain of new nodes, one per remaining segment,
        and links its head to ``parent`` (or installs it as the root) only
        once every node exists. On failure the chain is destroyed and the
        tree is left as it was.
        """
        if parent is None:
            if self._root is not None:
                return Status.CONFLICTING_PATH
            rest = path
        else:
            if parent.path == path:
                return Status.ALREADY_IN_TREE
            if not parent.is_dir:
                return Status.NOT_A_DIRECTORY
            rest = path[len(parent.path) + 1:]

        if kind is NodeKind.FILE and not self._fits(length):
            return Status.MEMORY_ERROR

        segments = rest.split(SEP)
        first: Node | None = None
        curr = parent
        created = 0
        try:
            for i, segment in enumerate(segments):
                last = i == len(segments) - 1
                new = self._allocate(
                    segment, curr, kind if last else NodeKind.DIRECTORY, created
                )
                if new is None:
                    if first is not None:
                        first.destroy()
                    return Status.MEMORY_ERROR
                created += 1

                if first is None:
                    first = new
                else:
                    result = curr.link_child(new)
                    if result is not Status.SUCCESS:
                        new.destroy()
                        first.destroy()
                        return result
                curr = new
        except MemoryError:
            if first is not None:
                first.destroy()
            return Status.MEMORY_ERROR

        if kind is NodeKind.FILE:
            curr.insert_file_contents(contents, length)

        if parent is None:
            self._root = first
        else:
            result = parent.link_child(first)
            if result is not Status.SUCCESS:
                first.destroy()
                return result

        self._count += created
        if kind is NodeKind.FILE:
            self._size += length
        logger.debug("Inserted %s (%d new nodes)", path, created)
        return Status.SUCCESS

    def _insert(
        self, path: str, kind: NodeKind, contents: Any = None, length: int = 0
    ) -> Status:
        if not self._initialized:
            return Status.INITIALIZATION_ERROR
        canonical = normalize_path(path)
        if canonical is None:
            return Status.BAD_PATH
        parent = self._traverse_path(canonical)
        return self._insert_rest_of_path(canonical, parent, kind, contents, length)

    @_checked
    def insert_dir(self, path: str) -> Status:
        """Insert a directory, creating any missing directories above it.

        Returns:
            SUCCESS, INITIALIZATION_ERROR, BAD_PATH, ALREADY_IN_TREE,
            CONFLICTING_PATH (the path is not under the existing root),
            NOT_A_DIRECTORY (the path descends through a file),
            MEMORY_ERROR (node limit) or PARENT_CHILD_ERROR.
        """
        return self._insert(path, NodeKind.DIRECTORY)

    @_checked
    def insert_file(
        self, path: str, contents: Any = b"", length: int | None = None
    ) -> Status:
        """Insert a file, creating any missing directories above it.

        Args:
            path: File path.
            contents: File contents, stored by reference.
            length: Content length. Defaults to ``len(contents)``.

        Returns:
            The same statuses as insert_dir; MEMORY_ERROR also covers the
            content size limit.
        """
        length = _content_length(contents, length)
        return self._insert(path, NodeKind.FILE, contents, length)

    # -------------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------------

    def _remove(self, path: str, kind: NodeKind) -> Status:
        if not self._initialized:
            return Status.INITIALIZATION_ERROR
        canonical = normalize_path(path)
        if canonical is None:
            return Status.BAD_PATH

        node = self._traverse_path(canonical)
        if node is None or node.path != canonical or node.kind is not kind:
            return Status.NOT_FOUND

        freed = sum(n.length for n in node.walk() if n.is_file)
        parent = node.parent
        if parent is None:
            self._root = None
        else:
            result = parent.unlink_child(node)
            if result is not Status.SUCCESS:
                return result

        destroyed = node.destroy()
        self._count -= destroyed
        self._size -= freed
        logger.debug("Removed %s (%d nodes freed)", canonical, destroyed)
        return Status.SUCCESS

    @_checked
    def rm_dir(self, path: str) -> Status:
        """Remove a directory and everything below it.

        Returns:
            SUCCESS, INITIALIZATION_ERROR, BAD_PATH or NOT_FOUND (no
            directory at exactly this path).
        """
        return self._remove(path, NodeKind.DIRECTORY)

    @_checked
    def rm_file(self, path: str) -> Status:
        """Remove a file.

        Returns:
            SUCCESS, INITIALIZATION_ERROR, BAD_PATH or NOT_FOUND (no file
            at exactly this path).
        """
        return self._remove(path, NodeKind.FILE)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def contains_dir(self, path: str) -> bool:
        node = self._lookup(path)
        return node is not None and node.is_dir

    def contains_file(self, path: str) -> bool:
        node = self._lookup(path)
        return node is not None and node.is_file

    def get_file_contents(self, path: str) -> Any:
        """Return the contents of the file at ``path``, or None."""
        node = self._lookup(path)
        if node is None or not node.is_file:
            return None
        return node.contents

    @_checked
    def replace_file_contents(
        self, path: str, contents: Any, length: int | None = None
    ) -> Any:
        """Swap in new contents for the file at ``path``.

        Args:
            path: File path.
            contents: New contents, stored by reference.
            length: New length. Defaults to ``len(contents)``.

        Returns:
            The previous contents, or None if there is no file at path,
            the tree is uninitialized or the content size limit would be
            exceeded. Nothing changes when None is returned.
        """
        length = _content_length(contents, length)
        node = self._lookup(path)
        if node is None or not node.is_file:
            return None
        old_length = node.length
        if not self._fits(length, removed=old_length):
            return None
        old = node.insert_file_contents(contents, length)
        self._size += length - old_length
        return old

    def stat(self, path: str) -> tuple[Status, NodeStat | None]:
        """Describe the node at ``path``.

        Returns:
            ``(SUCCESS, NodeStat)`` for an existing path, otherwise
            ``(INITIALIZATION_ERROR, None)``, ``(BAD_PATH, None)`` or
            ``(NOT_FOUND, None)``.
        """
        if not self._initialized:
            return Status.INITIALIZATION_ERROR, None
        if normalize_path(path) is None:
            return Status.BAD_PATH, None
        node = self._lookup(path)
        if node is None:
            return Status.NOT_FOUND, None
        return Status.SUCCESS, NodeStat(path=path, kind=node.kind, length=node.length)

    def to_string(self) -> str | None:
        """Return every path in pre-order, one per line.

        Returns:
            The listing with a trailing newline, ``""`` for an empty tree,
            or None if the tree is uninitialized.
        """
        if not self._initialized:
            return None
        prefix = SEP if self._config.absolute_paths else ""
        return "".join(f"{prefix}{node.path}\n" for node in self.walk())

