"""
Raw-line heuristics used to anchor comments and blank lines.

These helpers look at one physical line of YAML source at a time. They do not
parse YAML; they only recognise the handful of shapes needed to locate a key
(``key: value``, ``- key: value``, ``- value``) and the indentation depth of a
line.
"""

import re
from typing import Dict, List, Optional

COMMENT_MARKER = "#"
INDENT = "  "
BLOCK_INDICATORS = ("|", ">")

# A quoted scalar starts at the beginning of a line or after one of these
_SCALAR_STARTS = (":", "-", ",", "[", "{")

_KEY_LINE = re.compile(
    r"^(?:-\s+)*"
    r"(?P<key>\"[^\"]*\"|'[^']*'|[^\s#\"'-][^#]*?|-[^\s#][^#]*?)"
    r"\s*:(?:\s|$)"
)

_SEQUENCE_MARKERS = re.compile(r"^(?:-(?:\s+|$))+")

_BLOCK_HEADER = re.compile(r"(?:^|:\s+|-\s+)[|>][-+0-9]*$")

_QUOTES = re.compile(
    r"(?<![a-zA-Z])'+|(?<=[^sS])'+(?![a-zA-Z])|[\"“”„‟’‘‛]+"
)

_DOCUMENT_MARKERS = ("---", "...")


def leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def indent_depth(line: str) -> int:
    """Nesting depth of a line, counted in two-space units."""
    return leading_spaces(line) // len(INDENT)


def is_blank_line(line: str) -> bool:
    return not line.strip()


def is_comment_line(line: str) -> bool:
    return line.lstrip().startswith(COMMENT_MARKER)


def is_document_marker(line: str) -> bool:
    stripped = line.strip()
    return any(
        stripped == marker or stripped.startswith(marker + " ")
        for marker in _DOCUMENT_MARKERS
    )


def _inline_comment_start(line: str) -> int:
    quote = None
    index = 0
    while index < len(line):
        char = line[index]
        if quote == "'" and line.startswith("''", index):
            index += 2
            continue
        if quote == '"' and char == "\\":
            index += 2
            continue
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            prefix = line[:index].rstrip()
            opens_scalar = not prefix or prefix.endswith(_SCALAR_STARTS)
            if opens_scalar and (index == 0 or line[index - 1] in " \t[{,"):
                quote = char
        elif char == COMMENT_MARKER and (index == 0 or line[index - 1].isspace()):
            return index
        index += 1
    return -1


def strip_inline_comment(line: str) -> str:
    """
    Remove a trailing ``# ...`` comment from a content line.

    A ``#`` starts a comment when it follows whitespace outside a quoted
    scalar. Apostrophes inside plain text do not open a quoted scalar.
    """
    start = _inline_comment_start(line)
    if start == -1:
        return line.rstrip()
    return line[:start].rstrip()


def comment_text(line: str) -> str:
    """
    Text of a comment line without its marker.

    One space after the marker is treated as part of the marker.

    Args:
        line: Raw comment line, e.g. ``"  # some text"``

    Returns:
        The comment text, e.g. ``"some text"``
    """
    text = line.lstrip()[len(COMMENT_MARKER):]
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip()


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def key_from_line(line: str) -> Optional[str]:
    """
    Retrieve a mapping key from a raw line.

    A leading ``- `` sequence marker is skipped. Lines without a ``key:``
    part (bare sequence items, comments, plain text) have no key.

    Args:
        line: Raw YAML line

    Returns:
        The key, or None if the line carries no key
    """
    if is_comment_line(line):
        return None
    match = _KEY_LINE.match(strip_inline_comment(line).strip())
    if match is None:
        return None
    return _unquote(match.group("key").strip())


def value_from_line(line: str) -> str:
    """
    Retrieve the inline value text of a raw line.

    For ``key: value`` lines this is the text after the colon. For bare
    sequence items (``- value``) it is the item text without its marker.
    """
    stripped = strip_inline_comment(line).strip()
    match = _KEY_LINE.match(stripped)
    if match is not None:
        return stripped[match.end():].strip()
    return _SEQUENCE_MARKERS.sub("", stripped).strip()


def remove_quotes(text: str) -> str:
    """
    Remove all quote marks from the string, except where within a word or
    where it is an apostrophe preceded by an "s" (possessive plural).
    """
    return _QUOTES.sub("", text)


def is_block_header(line: str) -> bool:
    """True if the line opens a literal or folded block scalar."""
    if is_comment_line(line):
        return False
    return _BLOCK_HEADER.search(strip_inline_comment(line).strip()) is not None


def block_scalar_lines(lines: List[str]) -> Dict[int, int]:
    """
    Map each line that belongs to a block scalar body to its header line.

    Blank lines inside a body belong to it; blank lines after the last
    content line of a body do not.

    Args:
        lines: Raw document lines

    Returns:
        Dictionary of body line index to header line index
    """
    body: Dict[int, int] = {}
    index = 0
    while index < len(lines):
        if not is_block_header(lines[index]):
            index += 1
            continue
        header = index
        header_indent = leading_spaces(lines[header])
        last_content = header
        cursor = header + 1
        while cursor < len(lines):
            line = lines[cursor]
            if is_blank_line(line):
                cursor += 1
                continue
            if leading_spaces(line) <= header_indent:
                break
            last_content = cursor
            cursor += 1
        if "+" in strip_inline_comment(lines[header]).strip()[-3:]:
            # Keep chomping: trailing blank lines are part of the value
            while last_content + 1 < len(lines) and is_blank_line(lines[last_content + 1]):
                last_content += 1
        for body_index in range(header + 1, last_content + 1):
            body[body_index] = header
        index = last_content + 1
    return body


def _key_column(line: str) -> int:
    stripped = line.lstrip(" ")
    match = _SEQUENCE_MARKERS.match(stripped)
    return leading_spaces(line) + (match.end() if match else 0)


def _is_container_header(line: str) -> bool:
    return key_from_line(line) is not None and value_from_line(line) == ""


def line_depths(lines: List[str], block_lines: Dict[int, int]) -> Dict[int, int]:
    """
    Nesting depth of every content line.

    Works like ``indent_depth``, except that items of a sequence written at
    the indentation of its parent key (``key:`` followed by ``- item``)
    count one level deeper, as if indented by two more spaces.

    Args:
        lines: Raw document lines
        block_lines: Block scalar body lines, as from ``block_scalar_lines``

    Returns:
        Dictionary of line index to depth; blank, comment, marker and block
        body lines are left out
    """
    depths: Dict[int, int] = {}
    # Item columns of the open sequences written at their parent's indentation
    compact: List[int] = []
    header_column: Optional[int] = None

    for index, line in enumerate(lines):
        if (
            index in block_lines
            or is_blank_line(line)
            or is_comment_line(line)
            or is_document_marker(line)
        ):
            continue
        indent = leading_spaces(line)
        is_item = _SEQUENCE_MARKERS.match(line.lstrip(" ")) is not None

        while compact and (indent < compact[-1] or (indent == compact[-1] and not is_item)):
            compact.pop()
        if is_item and indent == header_column:
            compact.append(indent)

        depths[index] = indent // len(INDENT) + len(compact)
        header_column = _key_column(line) if _is_container_header(line) else None
    return depths
