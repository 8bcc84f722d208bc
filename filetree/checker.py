"""Invariant checker for file trees.

Read-only validation of the structure a FileTree maintains. Each
function reports the first broken invariant it finds through the module
logger and returns False.
"""

from __future__ import annotations

import logging

from .node import SEP, Node

logger = logging.getLogger(__name__)


def node_is_valid(node: Node) -> bool:
    """Check a node against its parent and its own children.

    Verifies that the node's path is exactly one segment below its
    parent's path, that its children are strictly sorted and point back
    at it, and that files have no children.
    """
    parent = node.parent
    if parent is not None:
        ppath = parent.path
        npath = node.path
        if not npath.startswith(ppath):
            logger.warning("Parent path %r is not a prefix of %r", ppath, npath)
            return False
        rest = npath[len(ppath):]
        if not rest.startswith(SEP) or len(rest) == 1:
            logger.warning("%r is not a direct child path of %r", npath, ppath)
            return False
        if SEP in rest[1:]:
            logger.warning("%r is a grandchild path of %r", npath, ppath)
            return False

    if node.is_file and node.num_children:
        logger.warning("File %r has children", node.path)
        return False

    children = node.children
    for child in children:
        if child.parent is not node:
            logger.warning("Child %r does not link back to %r", child.path, node.path)
            return False

    for left, right in zip(children, children[1:]):
        if Node.compare(left, right) >= 0:
            logger.warning(
                "Children of %r out of order: %r before %r",
                node.path,
                left.path,
                right.path,
            )
            return False

    # A file and a directory with one path are not adjacent.
    paths = [child.path for child in children]
    if len(set(paths)) != len(paths):
        logger.warning("Duplicate child paths under %r", node.path)
        return False

    return True


def tree_check(node: Node | None) -> bool:
    """Pre-order walk of the subtree at ``node``, stopping at the first failure."""
    if node is None:
        return True
    for current in node.walk():
        if not node_is_valid(current):
            return False
    return True


def count_nodes(node: Node | None) -> int:
    if node is None:
        return 0
    return sum(1 for _ in node.walk())


def tree_is_valid(initialized: bool, root: Node | None, count: int) -> bool:
    """Check the tree-level invariants, then every node from the root.

    Args:
        initialized: Whether the tree is initialized.
        root: The root node, or None.
        count: The node count the tree claims.

    Returns:
        True if every invariant holds.
    """
    if not initialized:
        if count != 0:
            logger.warning("Not initialized, but count is %d", count)
            return False
        if root is not None:
            logger.warning("Not initialized, but root is set")
            return False

    if initialized and count == 0 and root is not None:
        logger.warning("Initialized with count 0, but root is set")
        return False

    if initialized and root is None and count != 0:
        logger.warning("Initialized without a root, but count is %d", count)
        return False

    if root is None:
        return True

    if root.parent is not None:
        logger.warning("Root %r has a parent", root.path)
        return False

    if not root.path or SEP in root.path:
        logger.warning("Root path %r is not a single segment", root.path)
        return False

    actual = count_nodes(root)
    if actual != count:
        logger.warning("Count is %d, but %d nodes are reachable", count, actual)
        return False

    return tree_check(root)
