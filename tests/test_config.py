"""Tests for configuration, the scoped lifecycle and status helpers."""

import logging

import pytest

from filetree import (
    FileTreeConfig,
    Status,
    StatusError,
    connect_tree,
    open_tree,
    raise_for_status,
)


class TestConnectTree:
    """Tests for connect_tree option handling."""

    def test_defaults(self):
        """Test the default configuration."""
        config = connect_tree()
        assert config == FileTreeConfig()
        assert config.max_size_bytes is None
        assert config.absolute_paths

    def test_options(self):
        """Test that options are carried into the config."""
        config = connect_tree(max_nodes=10, max_size_mb=0.5, checked=True)
        assert config.max_nodes == 10
        assert config.max_size_bytes == 512 * 1024
        assert config.checked

    def test_unknown_option(self):
        """Test that unknown options are rejected."""
        with pytest.raises(ValueError, match="Unexpected arguments"):
            connect_tree(max_files=3)

    def test_negative_limits(self):
        """Test that negative limits are rejected."""
        with pytest.raises(ValueError):
            connect_tree(max_nodes=-1)
        with pytest.raises(ValueError):
            connect_tree(max_size_mb=-1)


class TestOpenTree:
    """Tests for the open_tree context manager."""

    def test_lifecycle(self):
        """Test that open_tree initializes and destroys the tree."""
        with open_tree(checked=True) as tree:
            assert tree.initialized
            assert tree.config.checked
            tree.insert_dir("/a/b")
        assert not tree.initialized
        assert tree.count == 0

    def test_destroys_on_error(self):
        """Test that the tree is destroyed when the block raises."""
        with pytest.raises(RuntimeError):
            with open_tree() as tree:
                tree.insert_dir("/a")
                raise RuntimeError("boom")
        assert not tree.initialized

    def test_config_and_kwargs_conflict(self):
        """Test that a config and keyword options cannot be combined."""
        with pytest.raises(ValueError):
            with open_tree(FileTreeConfig(), checked=True):
                pass

    def test_tolerates_early_destroy(self):
        """Test that destroying inside the block is allowed."""
        with open_tree() as tree:
            tree.destroy()
        assert not tree.initialized


class TestStatus:
    """Tests for Status helpers."""

    def test_truthiness(self):
        """Test that SUCCESS is truthy and errors are falsy."""
        assert Status.SUCCESS
        assert not Status.NOT_FOUND

    def test_raise_for_status(self):
        """Test that raise_for_status raises only on failure."""
        raise_for_status(Status.SUCCESS)
        with pytest.raises(StatusError) as excinfo:
            raise_for_status(Status.ALREADY_IN_TREE)
        assert excinfo.value.status is Status.ALREADY_IN_TREE


class TestLogging:
    """Tests for module logging."""

    def test_mutations_log_at_debug(self, caplog):
        """Test that inserts and removals are logged at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="filetree.tree"):
            with open_tree() as tree:
                tree.insert_dir("/a/b")
                tree.rm_dir("/a/b")
        assert "Inserted a/b (2 new nodes)" in caplog.text
        assert "Removed a/b (1 nodes freed)" in caplog.text
