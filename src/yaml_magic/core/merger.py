"""
Annotation merger.

Re-attaches extracted comments and blank-line runs to the parsed tree:
1. Comments are placed immediately before the entry or sequence item they
   were anchored to
2. Blank-line runs are then placed immediately after the entry, sequence
   item or comment they followed

Matching is best effort. An annotation is placed at most once, the first
candidate in source order wins, and annotations that match nothing are
dropped.
"""

import datetime
from typing import Callable, List, Optional, TypeVar

from yaml_magic.core.nodes import (
    BreakLine,
    Comment,
    KeyValue,
    Mapping,
    Node,
    Scalar,
    ScalarValue,
    Sequence,
)
from yaml_magic.core.occurrences import OccurrenceCounter
from yaml_magic.core.serializer import format_scalar, read_scalar
from yaml_magic.utils.lines import BLOCK_INDICATORS, comment_text, remove_quotes
from yaml_magic.utils.logging import get_logger

logger = get_logger("core.merger")

_NULL_TEXTS = ("", "~", "null", "Null", "NULL")

A = TypeVar("A", Comment, BreakLine)


def scalar_matches(raw_value: Optional[str], value: ScalarValue) -> bool:
    """
    Compare the raw text of a source value with a parsed scalar.

    Quote characters are ignored on both sides.

    Args:
        raw_value: Value text taken from a source line
        value: Parsed scalar value

    Returns:
        True if the text plausibly spells the value
    """
    if raw_value is None:
        return False
    if value is None:
        return raw_value in _NULL_TEXTS
    if isinstance(value, str) and raw_value.startswith(BLOCK_INDICATORS):
        # Clipped or kept literal blocks always end with a line break
        if raw_value.startswith("|") and "-" not in raw_value[:3]:
            return "\n" in value
        return True

    text = remove_quotes(raw_value)
    if text == remove_quotes(format_scalar(value)):
        return True
    if isinstance(value, str):
        return text == remove_quotes(value)
    if isinstance(value, datetime.date):
        return read_scalar(text) == value
    if text.lower() == str(value).lower():
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return float(text.replace("_", "")) == value
        except ValueError:
            return False
    return False


def value_matches(raw_value: Optional[str], node: Node) -> bool:
    """Mappings, sequences and nulls match on key and occurrence alone."""
    if isinstance(node, (Mapping, Sequence)) or node.value is None:
        return True
    return scalar_matches(raw_value, node.value)


def _ends_comment(break_line: BreakLine, comment: Comment) -> bool:
    return comment_text(break_line.preceding_line) == comment.lines[-1]


class AnnotationMerger:
    """Merge extracted annotations into a parsed tree."""

    def __init__(
        self, tree: Mapping, comments: List[Comment], break_lines: List[BreakLine]
    ):
        """
        Initialize the merger.

        Args:
            tree: Parsed, annotation-free tree
            comments: Comments in source order
            break_lines: Blank-line runs in source order
        """
        self.tree = tree
        self.counter = OccurrenceCounter(tree)
        # Working copies; matched annotations are removed as they are placed
        self._comments = list(comments)
        self._break_lines = list(break_lines)

    def merge(self) -> Mapping:
        """
        Produce the annotated tree.

        Returns:
            New root mapping holding the tree's entries and the matched
            annotations
        """
        total_comments = len(self._comments)
        total_break_lines = len(self._break_lines)

        merged = self._merge_comments(self.tree, 0)
        merged = self._merge_break_lines(merged, 0)

        for comment in self._comments:
            logger.debug(f"Dropping unanchored comment: {comment.text!r}")
        for break_line in self._break_lines:
            logger.debug(
                f"Dropping unanchored blank lines after: {break_line.preceding_line!r}"
            )
        logger.debug(
            f"Placed {total_comments - len(self._comments)}/{total_comments} comment(s) "
            f"and {total_break_lines - len(self._break_lines)}/{total_break_lines} "
            "blank-line run(s)"
        )
        return merged

    @staticmethod
    def _take(pending: List[A], predicate: Callable[[A], bool]) -> List[A]:
        """
        Remove and return the first pending annotation matching ``predicate``
        together with any later ones anchored to the same source line.
        """
        for index, annotation in enumerate(pending):
            if predicate(annotation):
                break
        else:
            return []

        first = pending.pop(index)
        taken = [first]
        if first.source_line is None:
            return taken
        rest = []
        for annotation in pending:
            if annotation.source_line == first.source_line and predicate(annotation):
                taken.append(annotation)
            else:
                rest.append(annotation)
        pending[:] = rest
        return taken

    def _take_all(self, pending: List[A], predicate: Callable[[A], bool]) -> List[A]:
        taken = [annotation for annotation in pending if predicate(annotation)]
        pending[:] = [annotation for annotation in pending if not predicate(annotation)]
        return taken

    def _merge_comments(self, mapping: Mapping, depth: int) -> Mapping:
        merged = Mapping()
        for entry in mapping.entries:
            if not isinstance(entry, KeyValue):
                merged.entries.append(entry)
                continue

            occurrence = self.counter.count(entry.key, depth)
            merged.entries.extend(
                self._take(
                    self._comments,
                    lambda comment: comment.anchor_key == entry.key
                    and comment.anchor_occurrence == occurrence
                    and value_matches(comment.line_value, entry.value),
                )
            )
            merged.entries.append(
                KeyValue(entry.key, self._merge_value_comments(entry.value, depth + 1))
            )

        if depth == 0:
            merged.entries.extend(
                self._take_all(self._comments, lambda comment: comment.is_document_end)
            )
        return merged

    def _merge_value_comments(self, value: Node, depth: int) -> Node:
        if isinstance(value, Mapping):
            return self._merge_comments(value, depth)
        if isinstance(value, Sequence):
            return self._merge_sequence_comments(value, depth)
        return value

    def _merge_sequence_comments(self, sequence: Sequence, depth: int) -> Sequence:
        merged = Sequence()
        for item in sequence.items:
            if isinstance(item, Scalar):
                merged.items.extend(
                    self._take(
                        self._comments,
                        lambda comment: comment.anchor_key is None
                        and comment.trailing_line is not None
                        and scalar_matches(comment.line_value, item.value),
                    )
                )
                merged.append(item)
            elif isinstance(item, (Mapping, Sequence)):
                merged.append(self._merge_value_comments(item, depth))
            else:
                merged.append(item)
        return merged

    def _comment_break_lines(self, comment: Comment) -> List[BreakLine]:
        return self._take(
            self._break_lines,
            lambda break_line: break_line.follows_comment
            and _ends_comment(break_line, comment),
        )

    def _merge_break_lines(self, mapping: Mapping, depth: int) -> Mapping:
        merged = Mapping()
        if depth == 0:
            merged.entries.extend(
                self._take_all(
                    self._break_lines, lambda break_line: break_line.is_document_start
                )
            )

        for entry in mapping.entries:
            if isinstance(entry, Comment):
                merged.entries.append(entry)
                merged.entries.extend(self._comment_break_lines(entry))
                continue
            if isinstance(entry, BreakLine):
                merged.entries.append(entry)
                continue

            occurrence = self.counter.count(entry.key, depth)
            found = self._take(
                self._break_lines,
                lambda break_line: break_line.anchor_key == entry.key
                and break_line.anchor_occurrence == occurrence
                and value_matches(break_line.line_value, entry.value),
            )
            value = self._merge_value_break_lines(entry.value, depth + 1)

            if found and _opens_container(value, found[0]):
                # Blank lines right after "key:" come before the first child
                children = value.entries if isinstance(value, Mapping) else value.items
                children[0:0] = found
                found = []

            merged.entries.append(KeyValue(entry.key, value))
            merged.entries.extend(found)
        return merged

    def _merge_value_break_lines(self, value: Node, depth: int) -> Node:
        if isinstance(value, Mapping):
            return self._merge_break_lines(value, depth)
        if isinstance(value, Sequence):
            return self._merge_sequence_break_lines(value, depth)
        return value

    def _merge_sequence_break_lines(self, sequence: Sequence, depth: int) -> Sequence:
        merged = Sequence()
        for item in sequence.items:
            if isinstance(item, Comment):
                merged.append(item)
                merged.items.extend(self._comment_break_lines(item))
            elif isinstance(item, BreakLine):
                merged.append(item)
            elif isinstance(item, (Mapping, Sequence)):
                merged.append(self._merge_value_break_lines(item, depth))
            else:
                merged.append(item)
                merged.items.extend(
                    self._take(
                        self._break_lines,
                        lambda break_line: break_line.anchor_key is None
                        and break_line.preceding_line is not None
                        and not break_line.follows_comment
                        and scalar_matches(break_line.line_value, item.value),
                    )
                )
        return merged


def _opens_container(value: Node, break_line: BreakLine) -> bool:
    if isinstance(value, Mapping):
        has_children = len(value) > 0
    elif isinstance(value, Sequence):
        has_children = len(value) > 0
    else:
        return False
    return has_children and break_line.line_value == ""


def merge_annotations(
    tree: Mapping, comments: List[Comment], break_lines: List[BreakLine]
) -> Mapping:
    """Convenience function to merge annotations into a parsed tree."""
    return AnnotationMerger(tree, comments, break_lines).merge()
