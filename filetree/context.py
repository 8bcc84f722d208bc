"""Scoped file tree lifecycle.

Pairs FileTree.init() with FileTree.destroy() so a tree never outlives
the block that uses it.
"""

from contextlib import contextmanager
from typing import Iterator

from .base import Status, StatusError
from .config import FileTreeConfig, connect_tree
from .tree import FileTree


@contextmanager
def open_tree(config: FileTreeConfig | None = None, **kwargs) -> Iterator[FileTree]:
    """Yield an initialized FileTree and destroy it on exit.

    Args:
        config: Tree configuration. When omitted, ``kwargs`` are passed
            to ``connect_tree()``.

    Example::

        with open_tree(checked=True) as tree:
            tree.insert_dir("/a/b")
            assert tree.contains_dir("/a")
    """
    if config is None:
        config = connect_tree(**kwargs)
    elif kwargs:
        raise ValueError("Pass either a config or keyword options, not both")

    tree = FileTree(config)
    status = tree.init()
    if status is Status.SUCCESS:
        try:
            yield tree
        finally:
            if tree.initialized:
                tree.destroy()
    else:
        raise StatusError(status)
