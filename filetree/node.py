"""Tree node implementation.

A Node is one entry of a file tree: a directory owning a sorted list of
children, or a file holding a reference to caller-supplied contents.
Ownership runs from parent to children; the parent link is a weak
back-reference.
"""

from __future__ import annotations

import bisect
import weakref
from typing import Any, Iterator

from .base import NodeKind, Status

SEP = "/"


def sort_key(kind: NodeKind, path: str) -> tuple[int, str]:
    """Ordering key for siblings: files first, then by path."""
    return (int(kind), path)


class Node:
    """A single directory or file in a file tree.

    Attributes:
        path: Full path of the node, without a leading slash.
        kind: NodeKind.FILE or NodeKind.DIRECTORY.
    """

    __slots__ = (
        "_path",
        "_parent",
        "_kind",
        "_children",
        "_contents",
        "_length",
        "__weakref__",
    )

    def __init__(self, path: str, parent: Node | None, kind: NodeKind):
        self._path = path
        self._parent: weakref.ref[Node] | None = (
            weakref.ref(parent) if parent is not None else None
        )
        self._kind = kind
        self._children: list[Node] = []
        self._contents: Any = None
        self._length = 0

    @classmethod
    def create(cls, name: str, parent: Node | None, kind: NodeKind) -> Node:
        """Create a node named ``name`` below ``parent``.

        The path is ``parent.path + "/" + name``, or just ``name`` when
        parent is None. The parent link is recorded, but the node is not
        added to the parent's children; call ``parent.link_child(node)``
        for that.
        """
        if parent is None:
            path = name
        else:
            path = parent.path + SEP + name
        return cls(path, parent, kind)

    def destroy(self) -> int:
        """Tear down the subtree rooted here, children first.

        Walks with an explicit stack, so depth is bounded only by memory.

        Returns:
            Number of nodes destroyed, including this one.
        """
        order = []
        stack = [self]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(node._children)

        for node in reversed(order):
            node._children.clear()
            node._parent = None
            node._contents = None
            node._length = 0
        return len(order)

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def sort_key(self) -> tuple[int, str]:
        return sort_key(self._kind, self._path)

    @staticmethod
    def compare(a: Node, b: Node) -> int:
        """Compare two nodes.

        Returns <0, 0 or >0 when a sorts before, equal to or after b.
        A file always sorts before a directory.
        """
        ka, kb = a.sort_key(), b.sort_key()
        return (ka > kb) - (ka < kb)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._path.rsplit(SEP, 1)[-1]

    @property
    def parent(self) -> Node | None:
        if self._parent is None:
            return None
        return self._parent()

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def is_dir(self) -> bool:
        return self._kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self._kind is NodeKind.FILE

    @property
    def num_children(self) -> int:
        return len(self._children)

    @property
    def children(self) -> tuple[Node, ...]:
        return tuple(self._children)

    def get_child(self, index: int) -> Node | None:
        """Return the child at ``index`` or None if there is none."""
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def __iter__(self) -> Iterator[Node]:
        return iter(self._children)

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendants in pre-order, children sorted."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    @property
    def contents(self) -> Any:
        """File contents (None for directories)."""
        return self._contents

    @property
    def length(self) -> int | None:
        """File length (None for directories)."""
        if self.is_dir:
            return None
        return self._length

    def insert_file_contents(self, contents: Any, length: int) -> Any:
        """Replace this file's contents reference and length.

        The contents are stored as given, not copied.

        Returns:
            The previous contents.

        Raises:
            IsADirectoryError: If this node is a directory.
        """
        if self.is_dir:
            raise IsADirectoryError(f"Is a directory: '{self._path}'")
        old = self._contents
        self._contents = contents
        self._length = length
        return old

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    def has_child(self, path: str, kind: NodeKind) -> tuple[bool, int]:
        """Binary-search the children for ``(kind, path)``.

        Returns:
            Whether such a child exists, and the index it has or would
            be inserted at.
        """
        target = sort_key(kind, path)
        index = bisect.bisect_left(self._children, target, key=Node.sort_key)
        found = (
            index < len(self._children)
            and self._children[index].sort_key() == target
        )
        return found, index

    def find_child(self, path: str) -> Node | None:
        """Return the child with ``path`` regardless of its kind."""
        for kind in NodeKind:
            found, index = self.has_child(path, kind)
            if found:
                return self._children[index]
        return None

    def link_child(self, child: Node) -> Status:
        """Make ``child`` a child of this node.

        Returns:
            SUCCESS, or PARENT_CHILD_ERROR if this node is a file or
            child's path is not exactly one segment below this node's
            path, or ALREADY_IN_TREE if a child with the same path exists.
            The child is left untouched on failure.
        """
        if not self.is_dir:
            return Status.PARENT_CHILD_ERROR

        prefix = self._path + SEP
        if not child.path.startswith(prefix):
            return Status.PARENT_CHILD_ERROR
        rest = child.path[len(prefix):]
        if not rest or SEP in rest:
            return Status.PARENT_CHILD_ERROR

        if self.find_child(child.path) is not None:
            return Status.ALREADY_IN_TREE

        _, index = self.has_child(child.path, child.kind)
        self._children.insert(index, child)
        child._parent = weakref.ref(self)
        return Status.SUCCESS

    def unlink_child(self, child: Node) -> Status:
        """Remove ``child`` from this node's children without destroying it.

        Returns:
            SUCCESS, or PARENT_CHILD_ERROR if child is not a child here.
        """
        found, index = self.has_child(child.path, child.kind)
        if not found or self._children[index] is not child:
            return Status.PARENT_CHILD_ERROR
        del self._children[index]
        child._parent = None
        return Status.SUCCESS

    def add_child(self, name: str, kind: NodeKind) -> Status:
        """Create a node named ``name`` and link it below this node.

        Unlike ``create``, the link is made in both directions.

        Returns:
            SUCCESS, or the status of ``link_child``. The new node is
            destroyed when linking fails.
        """
        child = Node.create(name, self, kind)
        result = self.link_child(child)
        if result is not Status.SUCCESS:
            child.destroy()
        return result

    def __repr__(self) -> str:
        return f"Node({self._path!r}, {self._kind.name})"
