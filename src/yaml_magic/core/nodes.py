"""
Document node model.

A document is a tree of ``Scalar``, ``Mapping`` and ``Sequence`` nodes.
``Comment`` and ``BreakLine`` annotations are stored between the ordinary
entries of a ``Mapping`` or the items of a ``Sequence``, in the order in which
they are rendered.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple, Union

from yaml_magic.errors import ConfigurationError
from yaml_magic.utils.lines import INDENT, COMMENT_MARKER, is_comment_line, value_from_line

ScalarValue = Union[str, int, float, bool, datetime.date, None]


@dataclass
class Scalar:
    """A leaf value: string, number, boolean, timestamp or null."""

    value: ScalarValue = None


@dataclass
class Comment:
    """
    A comment, possibly spanning several lines.

    Attributes:
        text: Comment text without markers; lines separated by ``\\n``
        indent_level: Indentation in two-space units; 0 renders the comment
            at the nesting level it is stored at
        anchor_key: Key of the line the comment precedes, if any
        anchor_occurrence: Occurrence count of ``anchor_key`` at its depth
        trailing_line: Raw source line the comment precedes
        source_line: Index of ``trailing_line`` in the source
    """

    text: str
    indent_level: int = 0
    anchor_key: Optional[str] = None
    anchor_occurrence: int = 0
    trailing_line: Optional[str] = None
    source_line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        if self.indent_level < 0:
            raise ConfigurationError(
                f"Invalid indent level for Comment: {self.indent_level}"
            )

    @property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    @property
    def line_value(self) -> Optional[str]:
        if self.trailing_line is None:
            return None
        return value_from_line(self.trailing_line)

    @property
    def is_document_end(self) -> bool:
        """True for a comment with nothing after it in the source."""
        return self.anchor_key is None and self.trailing_line is None

    def render(self, indent_level: int) -> str:
        indent = INDENT * indent_level
        return "\n".join(
            f"{indent}{COMMENT_MARKER} {line}".rstrip() for line in self.lines
        )


@dataclass
class BreakLine:
    """
    A run of ``count`` blank lines.

    Attributes:
        count: Number of blank lines, at least 1
        anchor_key: Key of the line the run follows, if any
        anchor_occurrence: Occurrence count of ``anchor_key`` at its depth
        preceding_line: Raw source line the run follows
        source_line: Index of ``preceding_line`` in the source
    """

    count: int = 1
    anchor_key: Optional[str] = None
    anchor_occurrence: int = 0
    preceding_line: Optional[str] = None
    source_line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        if self.count < 1:
            raise ConfigurationError(f"Invalid count for BreakLine: {self.count}")

    @property
    def line_value(self) -> Optional[str]:
        if self.preceding_line is None:
            return None
        return value_from_line(self.preceding_line)

    @property
    def follows_comment(self) -> bool:
        return self.preceding_line is not None and is_comment_line(self.preceding_line)

    @property
    def is_document_start(self) -> bool:
        """True for blank lines with no content before them."""
        return self.anchor_key is None and self.preceding_line is None

    def render(self) -> str:
        return "\n" * self.count


Annotation = Union[Comment, BreakLine]


@dataclass
class KeyValue:
    key: str
    value: "Node"


MappingEntry = Union[KeyValue, Comment, BreakLine]


@dataclass
class Mapping:
    """
    Ordered key/value container with interleaved annotations.

    Dictionary-style access only sees ordinary entries; ``entries`` holds
    everything in render order.
    """

    entries: List[MappingEntry] = field(default_factory=list)

    def _index(self, key: str) -> int:
        for index, entry in enumerate(self.entries):
            if isinstance(entry, KeyValue) and entry.key == key:
                return index
        return -1

    def __getitem__(self, key: str) -> "Node":
        index = self._index(key)
        if index == -1:
            raise KeyError(key)
        return self.entries[index].value

    def __setitem__(self, key: str, value: "Node") -> None:
        index = self._index(key)
        if index == -1:
            self.entries.append(KeyValue(key, value))
        else:
            self.entries[index].value = value

    def __delitem__(self, key: str) -> None:
        index = self._index(key)
        if index == -1:
            raise KeyError(key)
        del self.entries[index]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._index(key) != -1

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def get(self, key: str, default: Optional["Node"] = None) -> Optional["Node"]:
        index = self._index(key)
        return default if index == -1 else self.entries[index].value

    def keys(self) -> List[str]:
        return [entry.key for entry in self.entries if isinstance(entry, KeyValue)]

    def values(self) -> List["Node"]:
        return [entry.value for entry in self.entries if isinstance(entry, KeyValue)]

    def items(self) -> List[Tuple[str, "Node"]]:
        return [
            (entry.key, entry.value)
            for entry in self.entries
            if isinstance(entry, KeyValue)
        ]

    def annotations(self) -> List[Annotation]:
        return [entry for entry in self.entries if not isinstance(entry, KeyValue)]

    def append(self, entry: MappingEntry) -> None:
        if isinstance(entry, KeyValue) and entry.key in self:
            raise ConfigurationError(f"Duplicate key in mapping: {entry.key}")
        self.entries.append(entry)

    def insert(self, index: int, entry: MappingEntry) -> None:
        if isinstance(entry, KeyValue) and entry.key in self:
            raise ConfigurationError(f"Duplicate key in mapping: {entry.key}")
        self.entries.insert(index, entry)

    def insert_before(self, key: str, entry: MappingEntry) -> None:
        index = self._index(key)
        if index == -1:
            raise KeyError(key)
        self.insert(index, entry)

    def insert_after(self, key: str, entry: MappingEntry) -> None:
        index = self._index(key)
        if index == -1:
            raise KeyError(key)
        self.insert(index + 1, entry)


@dataclass
class Sequence:
    """Ordered list of nodes with interleaved annotations."""

    items: List[Union["Node", Comment, BreakLine]] = field(default_factory=list)

    def values(self) -> List["Node"]:
        return [item for item in self.items if not isinstance(item, (Comment, BreakLine))]

    def __len__(self) -> int:
        return len(self.values())

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.values())

    def append(self, item: Union["Node", Comment, BreakLine]) -> None:
        self.items.append(item)


Node = Union[Scalar, Mapping, Sequence]


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _scalar(value: Any) -> Scalar:
    if value is None or isinstance(value, bool):
        return Scalar(value)
    if isinstance(value, int):
        return Scalar(int(value))
    if isinstance(value, float):
        return Scalar(float(value))
    if isinstance(value, str):
        return Scalar(str(value))
    if isinstance(value, datetime.date):
        return Scalar(value)
    if isinstance(value, bytes):
        return Scalar(value.decode("utf-8", errors="replace"))
    return Scalar(str(value))


def to_node(value: Any) -> Node:
    """
    Convert plain Python data into nodes.

    Nodes are returned unchanged. Dictionaries become mappings with string
    keys, lists and tuples become sequences. ``Comment`` and ``BreakLine``
    values found inside dictionaries or lists are kept as annotations.

    Args:
        value: Python value or node

    Returns:
        Equivalent node
    """
    if isinstance(value, (Scalar, Mapping, Sequence)):
        return value
    if isinstance(value, dict):
        mapping = Mapping()
        for key, item in value.items():
            if isinstance(item, (Comment, BreakLine)):
                mapping.entries.append(item)
            else:
                mapping[_key_text(key)] = to_node(item)
        return mapping
    if isinstance(value, (list, tuple)):
        return Sequence(
            [
                item if isinstance(item, (Comment, BreakLine)) else to_node(item)
                for item in value
            ]
        )
    return _scalar(value)


def to_python(node: Node) -> Any:
    """Convert a node into plain Python data, dropping annotations."""
    if isinstance(node, Mapping):
        return {key: to_python(value) for key, value in node.items()}
    if isinstance(node, Sequence):
        return [to_python(item) for item in node.values()]
    return node.value
