"""
Tests for helper utilities.
"""

import os
import tempfile
from unittest.mock import patch

import pytest

from yaml_magic.errors import YamlIOError
from yaml_magic.utils.helpers import atomic_write, backup_path, temp_path


class TestAtomicWrite:
    """Test cases for atomic_write."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.file_path = os.path.join(self.temp_dir, "config.yaml")

    def teardown_method(self):
        """Clean up test fixtures."""
        import shutil

        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _read(self):
        with open(self.file_path, encoding="utf-8") as f:
            return f.read()

    def test_paths(self):
        """Test temporary and backup path names."""
        assert str(temp_path("a/b.yaml")) == os.path.join("a", "b.yaml.tmp")
        assert str(backup_path("a/b.yaml")) == os.path.join("a", "b.yaml.bak")

    def test_write_new_file(self):
        """Test writing a file that does not exist yet."""
        atomic_write(self.file_path, "key: value\n")

        assert self._read() == "key: value\n"
        assert os.listdir(self.temp_dir) == ["config.yaml"]

    def test_replace_existing_file(self):
        """Test replacing an existing file leaves no temporary files."""
        atomic_write(self.file_path, "old: 1\n")
        atomic_write(self.file_path, "new: 2\n")

        assert self._read() == "new: 2\n"
        assert sorted(os.listdir(self.temp_dir)) == ["config.yaml"]

    def test_stale_backup_removed(self):
        """Test that a leftover backup from an earlier run is replaced."""
        with open(self.file_path + ".bak", "w", encoding="utf-8") as f:
            f.write("stale\n")
        atomic_write(self.file_path, "key: value\n")

        assert not os.path.exists(self.file_path + ".bak")
        assert self._read() == "key: value\n"

    def test_creates_parent_directories(self):
        """Test writing below a missing directory."""
        nested = os.path.join(self.temp_dir, "a", "b", "config.yaml")
        atomic_write(nested, "key: value\n")

        assert os.path.isfile(nested)

    def test_os_error_wrapped(self):
        """Test that file-system errors become YamlIOError."""
        with patch("pathlib.Path.write_text", side_effect=PermissionError("denied")):
            with pytest.raises(YamlIOError) as exc_info:
                atomic_write(self.file_path, "key: value\n")

        assert exc_info.value.file_path == self.file_path
        assert "denied" in str(exc_info.value)
        assert isinstance(exc_info.value, OSError)
