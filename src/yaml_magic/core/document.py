"""
Editable YAML document.

Use the ``YamlMagic`` class to load, modify and save YAML files while keeping
their comments and blank lines.
"""

import copy
from typing import Any, List, Optional, Union

from yaml_magic.core.extractor import extract_annotations
from yaml_magic.core.merger import merge_annotations
from yaml_magic.core.nodes import BreakLine, Comment, Mapping, Node, to_node, to_python
from yaml_magic.core.parser import YAMLParser
from yaml_magic.core.serializer import YamlSerializer
from yaml_magic.errors import ConfigurationError
from yaml_magic.utils.helpers import atomic_write
from yaml_magic.utils.logging import get_logger

logger = get_logger("core.document")


class YamlMagic:
    """
    A YAML file held as an editable, annotated tree.

    Example usage::

        yaml_magic = YamlMagic.load("config.yaml")
        yaml_magic["new_key"] = "a value"
        yaml_magic.save()
    """

    def __init__(
        self,
        path: str,
        root: Optional[Mapping] = None,
        original_tree: Optional[Mapping] = None,
    ):
        """
        Create a document.

        Args:
            path: File the document is saved to
            root: Editable root mapping; empty if omitted
            original_tree: Parsed tree without annotations
        """
        self.path = str(path)
        self._root = root if root is not None else Mapping()
        self._original_tree = (
            copy.deepcopy(original_tree) if original_tree is not None else Mapping()
        )

    @classmethod
    def from_string(
        cls, content: str, path: str, parser: Optional[YAMLParser] = None
    ) -> "YamlMagic":
        """
        Create a document from YAML content.

        Args:
            content: YAML text
            path: File the document is saved to
            parser: Parser to use (optional)

        Returns:
            Document whose tree holds the content's comments and blank lines

        Raises:
            ParseError: If the content is not valid YAML
        """
        if not content.strip():
            return cls(path)

        parser = parser or YAMLParser()
        tree = parser.parse(content, source=str(path))
        return cls._annotated(content, tree, path)

    @classmethod
    def _annotated(cls, content: str, tree: Mapping, path: str) -> "YamlMagic":
        comments, break_lines = extract_annotations(content, tree)
        root = merge_annotations(tree, comments, break_lines)
        return cls(path, root=root, original_tree=tree)

    @classmethod
    def load(cls, path: str) -> "YamlMagic":
        """
        Load a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Loaded document

        Raises:
            YamlIOError: If the file doesn't exist or cannot be read
            ParseError: If the file is not valid YAML
        """
        parser = YAMLParser()
        content, tree = parser.load_yaml_file(path)
        logger.debug(f"Loaded {path}")
        return cls._annotated(content, tree, str(path))

    @property
    def map(self) -> Mapping:
        """The editable root mapping."""
        return self._root

    @map.setter
    def map(self, value: Union[Mapping, dict]) -> None:
        node = to_node(value)
        if not isinstance(node, Mapping):
            raise ConfigurationError(
                f"Document root must be a mapping, got {type(value).__name__}"
            )
        self._root = node

    @property
    def original_tree(self) -> Mapping:
        """Copy of the tree as parsed, without comments or blank lines."""
        return copy.deepcopy(self._original_tree)

    def node(self, key: str) -> Optional[Node]:
        """Return the node stored under ``key``, or None."""
        return self._root.get(key)

    def get(self, key: str, default: Any = None) -> Any:
        node = self._root.get(key)
        return default if node is None else to_python(node)

    def keys(self) -> List[str]:
        return self._root.keys()

    def __getitem__(self, key: str) -> Any:
        """
        Returns the value for the given key as plain Python data.

        If the key doesn't exist then None is returned.
        """
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        """Adds or updates the given key/value pair."""
        self._root[key] = to_node(value)

    def __delitem__(self, key: str) -> None:
        del self._root[key]

    def __contains__(self, key: object) -> bool:
        return key in self._root

    def add_comment(
        self,
        comment: Union[str, Comment],
        indent_level: int = 0,
        before: Optional[str] = None,
    ) -> Comment:
        """
        Add a comment to the root mapping.

        Args:
            comment: Comment text or a ``Comment``
            indent_level: Indentation in two-space units, for text comments
            before: Key to place the comment above; appended at the end if None

        Returns:
            The stored comment

        Raises:
            KeyError: If ``before`` names a missing key
        """
        if not isinstance(comment, Comment):
            comment = Comment(str(comment), indent_level=indent_level)
        if before is None:
            self._root.append(comment)
        else:
            self._root.insert_before(before, comment)
        return comment

    def add_break_line(self, count: int = 1, after: Optional[str] = None) -> BreakLine:
        """
        Add a run of blank lines to the root mapping.

        Args:
            count: Number of blank lines
            after: Key to place the run below; appended at the end if None

        Returns:
            The stored break line

        Raises:
            ConfigurationError: If ``count`` is less than 1
            KeyError: If ``after`` names a missing key
        """
        break_line = BreakLine(count=count)
        if after is None:
            self._root.append(break_line)
        else:
            self._root.insert_after(after, break_line)
        return break_line

    def to_string(self) -> str:
        """Render the document as YAML text."""
        return YamlSerializer().render(self._root)

    def save(self, header: Optional[str] = None) -> str:
        """
        Save the document to its path.

        Args:
            header: Comment written as the first line, unless already there

        Returns:
            The written text

        Raises:
            YamlIOError: If the file cannot be written
        """
        text = self.to_string()
        if header is not None:
            header_line = Comment(header).render(0) + "\n"
            if not text.startswith(header_line):
                text = header_line + text

        atomic_write(self.path, text)
        logger.info(f"Saved {self.path}")
        return text

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"YamlMagic(path={self.path!r}, keys={self.keys()!r})"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, YamlMagic):
            return NotImplemented
        return self.to_string() == other.to_string()

    def __hash__(self) -> int:
        return hash(self.to_string())


def load(path: str) -> YamlMagic:
    """Convenience function to load a YAML file."""
    return YamlMagic.load(path)


def from_text(text: str, path: str) -> YamlMagic:
    """Convenience function to create a document from YAML text."""
    return YamlMagic.from_string(text, path)
