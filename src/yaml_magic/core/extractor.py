"""
Annotation extraction.

Scans raw YAML text line by line and collects comment runs and blank-line
runs, each anchored to the key of the line it precedes (comments) or follows
(blank lines).
"""

from typing import Dict, List, Optional, Tuple

from yaml_magic.core.nodes import BreakLine, Comment, Mapping
from yaml_magic.core.occurrences import OccurrenceCounter
from yaml_magic.utils.lines import (
    block_scalar_lines,
    comment_text,
    indent_depth,
    is_blank_line,
    is_comment_line,
    is_document_marker,
    key_from_line,
    line_depths,
    strip_inline_comment,
)
from yaml_magic.utils.logging import get_logger

logger = get_logger("core.extractor")


class AnnotationExtractor:
    """Extract comments and blank-line runs from raw YAML text."""

    def __init__(self, tree: Mapping):
        """
        Initialize the extractor.

        Args:
            tree: Parsed, annotation-free tree of the same text, used for
                occurrence counting
        """
        self.counter = OccurrenceCounter(tree)

    def extract(self, raw_text: str) -> Tuple[List[Comment], List[BreakLine]]:
        """
        Extract annotations from raw text.

        Args:
            raw_text: YAML source

        Returns:
            Tuple of (comments, break_lines), each in source order
        """
        lines = raw_text.splitlines()
        block_lines = block_scalar_lines(lines)
        depths = line_depths(lines, block_lines)

        comments = self._extract_comments(lines, block_lines, depths)
        break_lines = self._extract_break_lines(lines, block_lines, depths)

        logger.debug(
            f"Extracted {len(comments)} comment(s) and "
            f"{len(break_lines)} blank-line run(s) from {len(lines)} lines"
        )
        return comments, break_lines

    def _anchor(self, line: Optional[str], depth: int) -> Tuple[Optional[str], int]:
        if line is None:
            return None, 0
        key = key_from_line(line)
        if key is None:
            return None, 0
        return key, self.counter.count(key, depth)

    def _extract_comments(
        self, lines: List[str], block_lines: Dict[int, int], depths: Dict[int, int]
    ) -> List[Comment]:
        comments = []
        index = 0
        while index < len(lines):
            if index in block_lines or not is_comment_line(lines[index]):
                index += 1
                continue

            start = index
            while (
                index < len(lines)
                and index not in block_lines
                and is_comment_line(lines[index])
            ):
                index += 1
            run = lines[start:index]

            trailing_index = self._next_content_line(lines, index)
            trailing_line = None
            anchor_key, occurrence = None, 0
            if trailing_index is not None:
                trailing_line = strip_inline_comment(lines[trailing_index])
                anchor_key, occurrence = self._anchor(
                    trailing_line, depths.get(trailing_index, 0)
                )

            comments.append(
                Comment(
                    "\n".join(comment_text(line) for line in run),
                    indent_level=indent_depth(run[0]),
                    anchor_key=anchor_key,
                    anchor_occurrence=occurrence,
                    trailing_line=trailing_line,
                    source_line=trailing_index,
                )
            )
        return comments

    @staticmethod
    def _next_content_line(lines: List[str], start: int) -> Optional[int]:
        for index in range(start, len(lines)):
            line = lines[index]
            if is_blank_line(line) or is_comment_line(line) or is_document_marker(line):
                continue
            return index
        return None

    def _extract_break_lines(
        self, lines: List[str], block_lines: Dict[int, int], depths: Dict[int, int]
    ) -> List[BreakLine]:
        break_lines = []
        index = 0
        while index < len(lines):
            if index in block_lines or not is_blank_line(lines[index]):
                index += 1
                continue

            start = index
            while (
                index < len(lines)
                and index not in block_lines
                and is_blank_line(lines[index])
            ):
                index += 1

            preceding_index: Optional[int] = start - 1
            # A run after a block scalar belongs to the block's key line
            preceding_index = block_lines.get(preceding_index, preceding_index)
            if preceding_index < 0:
                preceding_index = None

            preceding_line = None
            anchor_key, occurrence = None, 0
            if preceding_index is not None:
                preceding_line = lines[preceding_index]
                if not is_comment_line(preceding_line):
                    preceding_line = strip_inline_comment(preceding_line)
                    anchor_key, occurrence = self._anchor(
                        preceding_line, depths.get(preceding_index, 0)
                    )

            break_lines.append(
                BreakLine(
                    count=index - start,
                    anchor_key=anchor_key,
                    anchor_occurrence=occurrence,
                    preceding_line=preceding_line,
                    source_line=preceding_index,
                )
            )
        return break_lines


def extract_annotations(
    raw_text: str, original_tree: Mapping
) -> Tuple[List[Comment], List[BreakLine]]:
    """Convenience function to extract annotations from raw text."""
    return AnnotationExtractor(original_tree).extract(raw_text)
