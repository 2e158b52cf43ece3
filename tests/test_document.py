"""
End-to-end tests for YamlMagic documents.
"""

import datetime
import os
import tempfile

import pytest
import yaml

from yaml_magic import YamlMagic, from_text, load
from yaml_magic.core.nodes import BreakLine, Comment, Mapping, Scalar
from yaml_magic.errors import ConfigurationError, ParseError, YamlIOError

SAMPLE = """\
# Service configuration
global:
  sitename: test-site
  version: 25.1.102

# API settings
api:
  replicas: 2
  ports:
    - 8080
    - 8443
  empty:


script: |
  echo hello
  echo bye

last: true
# end of file
"""


class TestYamlMagic:
    """Test cases for loading, editing and saving documents."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.file_path = os.path.join(self.temp_dir, "config.yaml")

    def teardown_method(self):
        """Clean up test fixtures."""
        import shutil

        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, content):
        with open(self.file_path, "w", encoding="utf-8") as f:
            f.write(content)

    def _read(self):
        with open(self.file_path, encoding="utf-8") as f:
            return f.read()

    def test_round_trip_keeps_layout(self):
        """Test that a canonical file renders back unchanged."""
        doc = from_text(SAMPLE, self.file_path)

        assert doc.to_string() == SAMPLE

    def test_round_trip_keeps_data(self):
        """Test that rendering keeps the parsed data."""
        doc = from_text(SAMPLE, self.file_path)

        assert yaml.safe_load(doc.to_string()) == yaml.safe_load(SAMPLE)

    def test_render_is_idempotent(self):
        """Test that loading rendered text renders it identically."""
        messy = "a:   1\nb:\n    c: 'x'   # note\n\n\n\nd: [1, 2]\n"

        once = from_text(messy, self.file_path).to_string()
        twice = from_text(once, self.file_path).to_string()

        assert once == twice
        assert yaml.safe_load(once) == yaml.safe_load(messy)

    def test_greeting_comment(self):
        """Test that a leading comment stays above the first key."""
        doc = from_text("# hello\nname: test\n", self.file_path)

        assert doc.map.entries[0] == Comment(
            "hello", anchor_key="name", anchor_occurrence=1, trailing_line="name: test"
        )
        assert str(doc) == "# hello\nname: test\n"

    def test_null_value_with_blank_lines(self):
        """Test that blank lines after a null value are kept."""
        doc = from_text("a:\n\n\nb: 1\n", self.file_path)

        assert doc["a"] is None
        assert isinstance(doc.map.entries[1], BreakLine)
        assert doc.map.entries[1].count == 2
        assert doc.to_string() == "a:\n\n\nb: 1\n"

    def test_repeated_keys_keep_their_comments(self):
        """Test comments above keys that appear in several mappings."""
        text = (
            "first:\n"
            "  # first name\n"
            "  name: a\n"
            "second:\n"
            "  # second name\n"
            "  name: b\n"
        )
        doc = from_text(text, self.file_path)

        assert doc.node("first").entries[0].text == "first name"
        assert doc.node("second").entries[0].text == "second name"
        assert doc.to_string() == text

    def test_document_start_blank_lines(self):
        """Test blank lines before the first key."""
        doc = from_text("\n\na: 1\n", self.file_path)

        assert doc.to_string() == "\n\na: 1\n"

    def test_document_marker_ignored(self):
        """Test that a comment above a document marker anchors to the next key."""
        doc = from_text("# top\n---\na: 1\n", self.file_path)

        assert doc.to_string() == "# top\na: 1\n"

    def test_empty_content(self):
        """Test creating a document from empty text."""
        doc = YamlMagic.from_string("   \n", self.file_path)

        assert doc.keys() == []
        assert doc.to_string() == ""

    def test_invalid_content(self):
        """Test that invalid YAML raises ParseError."""
        with pytest.raises(ParseError):
            from_text("a: [1, 2\n", self.file_path)

    def test_non_mapping_root(self):
        """Test that a sequence root raises ParseError."""
        with pytest.raises(ParseError, match="mapping"):
            from_text("- a\n- b\n", self.file_path)

    def test_load_missing_file(self):
        """Test loading a file that does not exist."""
        with pytest.raises(YamlIOError) as exc_info:
            load(os.path.join(self.temp_dir, "missing.yaml"))

        assert "missing.yaml" in str(exc_info.value)

    def test_load_and_access(self):
        """Test loading a file and reading values."""
        self._write(SAMPLE)
        doc = load(self.file_path)

        assert doc.path == self.file_path
        assert doc["api"]["ports"] == [8080, 8443]
        assert doc.get("missing", "default") == "default"
        assert doc["missing"] is None
        assert "global" in doc
        assert "missing" not in doc
        assert doc.keys() == ["global", "api", "script", "last"]

    def test_original_tree_is_a_copy(self):
        """Test that the parsed tree is kept without annotations."""
        doc = from_text(SAMPLE, self.file_path)
        tree = doc.original_tree

        assert tree.annotations() == []
        tree["global"] = Scalar("changed")
        assert doc.original_tree["global"] != Scalar("changed")

    def test_set_and_save_keeps_comments(self):
        """Test adding a key, saving and loading again."""
        self._write(SAMPLE)
        doc = load(self.file_path)
        doc["new_key"] = {"enabled": True}
        doc.save()

        saved = self._read()
        assert saved == SAMPLE + "new_key:\n  enabled: true\n"

        reloaded = load(self.file_path)
        assert reloaded["new_key"] == {"enabled": True}
        assert reloaded.to_string() == saved

    def test_update_existing_key(self):
        """Test that updating a value keeps its comment."""
        doc = from_text("# count\na: 1\nb: 2\n", self.file_path)
        doc["a"] = 5

        assert doc.to_string() == "# count\na: 5\nb: 2\n"

    def test_delete_key(self):
        """Test deleting a key."""
        doc = from_text("a: 1\nb: 2\n", self.file_path)
        del doc["a"]

        assert doc.to_string() == "b: 2\n"
        with pytest.raises(KeyError):
            del doc["a"]

    def test_add_comment_and_break_line(self):
        """Test adding annotations to the root mapping."""
        doc = from_text("a: 1\nb: 2\n", self.file_path)
        doc.add_comment("about b", before="b")
        doc.add_break_line(after="a")
        doc.add_comment("the end")

        assert doc.to_string() == "a: 1\n\n# about b\nb: 2\n# the end\n"

    def test_add_comment_missing_key(self):
        """Test adding a comment before a missing key."""
        doc = from_text("a: 1\n", self.file_path)

        with pytest.raises(KeyError):
            doc.add_comment("text", before="missing")

    def test_add_break_line_invalid_count(self):
        """Test that a break line needs a positive count."""
        doc = from_text("a: 1\n", self.file_path)

        with pytest.raises(ConfigurationError):
            doc.add_break_line(count=0)

    def test_replace_map(self):
        """Test assigning a new root mapping."""
        doc = YamlMagic(self.file_path)
        doc.map = {"a": [1, 2], "b": None}

        assert isinstance(doc.map, Mapping)
        assert doc.to_string() == "a:\n  - 1\n  - 2\nb:\n"

        with pytest.raises(ConfigurationError):
            doc.map = [1, 2]

    def test_save_with_header(self):
        """Test that a header comment is written once."""
        doc = from_text("a: 1\n", self.file_path)

        doc.save(header="Generated file")
        assert self._read() == "# Generated file\na: 1\n"

        load(self.file_path).save(header="Generated file")
        assert self._read() == "# Generated file\na: 1\n"

    def test_save_leaves_no_temporary_files(self):
        """Test that saving leaves only the target file."""
        self._write("a: 1\n")
        doc = load(self.file_path)
        doc["b"] = 2
        doc.save()

        assert os.listdir(self.temp_dir) == ["config.yaml"]
        assert self._read() == "a: 1\nb: 2\n"

    def test_equality(self):
        """Test that documents compare by rendered text."""
        first = from_text("a: 1\n", self.file_path)
        second = from_text("a:   1\n", "other.yaml")

        assert first == second
        assert hash(first) == hash(second)
        assert first != from_text("a: 2\n", self.file_path)
        assert "config.yaml" in repr(first)

    def test_timestamps_survive_save(self):
        """Test that dates stay dates and keep their comments across a save."""
        self._write("# release day\nreleased: 2001-12-14\nstamp: 2001-12-14 21:59:43.10 -5\n")
        doc = load(self.file_path)
        doc.save()

        saved = self._read()
        assert saved == (
            "# release day\n"
            "released: 2001-12-14\n"
            "stamp: 2001-12-14T21:59:43.100000-05:00\n"
        )
        reloaded = load(self.file_path)
        assert reloaded["released"] == datetime.date(2001, 12, 14)
        assert reloaded["stamp"] == doc["stamp"]
        assert isinstance(yaml.safe_load(saved)["released"], datetime.date)

    def test_zero_indent_sequence_keeps_annotations(self):
        """Test comments and blank lines in a list written without indentation."""
        text = "people:\n- name: A\n\n# second\n- name: B\n  age: 3\n"

        doc = from_text(text, self.file_path)

        assert doc.to_string() == (
            "people:\n"
            "  - name: A\n"
            "\n"
            "  # second\n"
            "  - name: B\n"
            "    age: 3\n"
        )

    def test_comment_above_line_with_apostrophe_in_inline_comment(self):
        """Test that an apostrophe in an inline comment keeps the comment above."""
        doc = from_text("# above\na: b # it's\n", self.file_path)

        assert doc.to_string() == "# above\na: b\n"
