"""
YAML serializer for annotated trees.

Renders mappings and sequences in block style with two-space indentation,
comments as ``# `` lines, blank-line runs as empty lines and multi-line
strings as literal block scalars.
"""

import datetime
import io
import math
from functools import lru_cache
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from yaml_magic.core.nodes import BreakLine, Comment, Mapping, Node, ScalarValue, Sequence
from yaml_magic.utils.lines import BLOCK_INDICATORS, INDENT

_INDICATOR_CHARS = "-?:,[]{}#&*!|>'\"%@`"

# YAML 1.1 readers load these as booleans
_YAML11_BOOLEANS = frozenset(
    ["y", "n", "yes", "no", "on", "off", "true", "false"]
)

_reader = YAML(typ="safe", pure=True)


@lru_cache(maxsize=4096)
def read_scalar(text: str) -> Any:
    """Value the safe reader loads from ``text``; None if it does not parse."""
    try:
        return _reader.load(text)
    except YAMLError:
        return None


def _reads_back_as(text: str) -> bool:
    return read_scalar(text) == text


def needs_quotes(text: str) -> bool:
    """
    Check whether a string must be quoted to read back as the same string.

    Args:
        text: Single-line string

    Returns:
        True if the plain form would be ambiguous
    """
    if not text or text != text.strip():
        return True
    if text[0] in _INDICATOR_CHARS:
        return True
    if ": " in text or " #" in text or text.endswith(":"):
        return True
    if any(char in text for char in "\n\r\t"):
        return True
    if text.lower() in _YAML11_BOOLEANS:
        return True
    return not _reads_back_as(text)


def quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def is_block_string(value: ScalarValue) -> bool:
    """True if a value renders as a literal block scalar."""
    if not isinstance(value, str) or "\n" not in value:
        return False
    if value.lstrip().startswith(BLOCK_INDICATORS):
        return False
    if "\r" in value or value.startswith((" ", "\n")):
        return False
    return True


def block_header(value: str) -> str:
    """Literal block indicator with the chomping that keeps trailing newlines."""
    if not value.endswith("\n"):
        return "|-"
    if value.endswith("\n\n"):
        return "|+"
    return "|"


def format_scalar(value: ScalarValue) -> str:
    """
    Format a scalar for inline use.

    Args:
        value: Scalar value

    Returns:
        YAML text; empty for null
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ".nan"
        if math.isinf(value):
            return ".inf" if value > 0 else "-.inf"
        text = repr(value)
        if "e" in text and "." not in text:
            # YAML 1.1 floats need a fraction part, e.g. 1.0e+20
            mantissa, exponent = text.split("e")
            text = f"{mantissa}.0e{exponent}"
        return text
    if isinstance(value, datetime.date):
        # Plain ISO text reads back as a timestamp
        return value.isoformat()
    if value.lstrip().startswith(BLOCK_INDICATORS) or needs_quotes(value):
        return quote(value)
    return value


def format_key(key: str) -> str:
    return quote(key) if needs_quotes(key) else key


class YamlSerializer:
    """Render an annotated tree to YAML text."""

    def render(self, tree: Mapping) -> str:
        """
        Render a root mapping.

        Args:
            tree: Root mapping, possibly holding annotations

        Returns:
            YAML text
        """
        out = io.StringIO()
        self._write_mapping(tree, out, level=0)
        return out.getvalue()

    def _write_mapping(
        self,
        mapping: Mapping,
        out: io.StringIO,
        level: int,
        item_index: int = -1,  # -1 means the mapping is not a sequence item
    ) -> None:
        in_item = item_index > -1
        key_level = level + 1 if in_item else level
        wrote_key = False

        for entry in mapping.entries:
            if isinstance(entry, Comment):
                default_level = level if in_item and not wrote_key else key_level
                out.write(entry.render(entry.indent_level or default_level))
                out.write("\n")
            elif isinstance(entry, BreakLine):
                out.write(entry.render())
            else:
                if in_item and not wrote_key:
                    out.write(f"{INDENT * level}- ")
                else:
                    out.write(INDENT * key_level)
                wrote_key = True
                out.write(f"{format_key(entry.key)}:")
                self._write_value(entry.value, out, key_level)

    def _write_value(self, value: Node, out: io.StringIO, key_level: int) -> None:
        if isinstance(value, Mapping):
            if len(value) == 0:
                out.write(" {}\n")
                return
            out.write("\n")
            self._write_mapping(value, out, level=key_level + 1)
        elif isinstance(value, Sequence):
            if len(value) == 0:
                out.write(" []\n")
                return
            out.write("\n")
            self._write_sequence(value, out, level=key_level + 1)
        else:
            self._write_scalar(value.value, out, key_level + 1, prefix=" ")

    def _write_sequence(self, sequence: Sequence, out: io.StringIO, level: int) -> None:
        indent = INDENT * level
        for index, item in enumerate(sequence.items):
            if isinstance(item, Comment):
                out.write(item.render(item.indent_level or level))
                out.write("\n")
            elif isinstance(item, BreakLine):
                out.write(item.render())
            elif isinstance(item, Mapping):
                if len(item) == 0:
                    out.write(f"{indent}- {{}}\n")
                else:
                    self._write_mapping(item, out, level=level, item_index=index)
            elif isinstance(item, Sequence):
                if len(item) == 0:
                    out.write(f"{indent}- []\n")
                else:
                    out.write(f"{indent}-\n")
                    self._write_sequence(item, out, level=level + 1)
            else:
                out.write(f"{indent}-")
                self._write_scalar(item.value, out, level + 1, prefix=" ")

    @staticmethod
    def _write_scalar(
        value: ScalarValue, out: io.StringIO, body_level: int, prefix: str = " "
    ) -> None:
        if value is None:
            out.write("\n")
            return
        if is_block_string(value):
            out.write(f"{prefix}{block_header(value)}\n")
            body = value[:-1] if value.endswith("\n") else value
            indent = INDENT * body_level
            for line in body.split("\n"):
                out.write(f"{indent}{line}\n" if line else "\n")
            return
        out.write(f"{prefix}{format_scalar(value)}\n")


def render(tree: Mapping) -> str:
    """Convenience function to render a tree."""
    return YamlSerializer().render(tree)
