import pytest

from filetree import FileTree, connect_tree


@pytest.fixture
def tree():
    """An initialized tree that validates itself around every mutation."""
    t = FileTree(connect_tree(checked=True))
    t.init()
    yield t
    if t.initialized:
        t.destroy()
