"""
YAML parser with validation.

Turns raw YAML text into an annotation-free node tree.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from yaml_magic.core.nodes import Mapping, Node, to_node
from yaml_magic.errors import ParseError, YamlIOError, YamlMagicError


class YAMLParser:
    """Structural YAML parser with error handling using ruamel.yaml."""

    def __init__(self):
        """Initialize ruamel.yaml instance with proper settings."""
        self.yaml = YAML(typ="safe", pure=True)
        self.yaml.allow_duplicate_keys = False

    def parse(self, text: str, source: str = "<string>") -> Mapping:
        """
        Parse YAML text into a tree.

        Args:
            text: YAML source
            source: Name used in error messages

        Returns:
            Root mapping; empty for an empty document

        Raises:
            ParseError: If the YAML syntax is invalid or the root is not a mapping
        """
        data = self._load(text, source)
        if data is None:
            return Mapping()
        if not isinstance(data, dict):
            raise ParseError(
                f"YAML root must be a mapping, got {type(data).__name__}: {source}"
            )
        return to_node(data)

    def parse_value(self, text: str) -> Node:
        """
        Parse a single YAML value, e.g. a command-line argument.

        Args:
            text: YAML value text

        Returns:
            Node for the value
        """
        return to_node(self._load(text, "<value>"))

    def _load(self, text: str, source: str) -> Any:
        try:
            return self.yaml.load(text)
        except YAMLError as e:
            raise ParseError(f"Invalid YAML syntax in {source}: {e}") from e

    def load_yaml_file(self, file_path: str) -> Tuple[str, Mapping]:
        """
        Load and parse a YAML file.

        Args:
            file_path: Path to the YAML file

        Returns:
            Tuple of (raw_text, tree)

        Raises:
            YamlIOError: If the file doesn't exist or cannot be read
            ParseError: If the YAML syntax is invalid
        """
        path = Path(file_path)
        if not path.is_file():
            raise YamlIOError(str(file_path), "File not found.")
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise YamlIOError(str(file_path), str(e)) from e
        return content, self.parse(content, source=str(file_path))

    def check_file(self, file_path: str) -> Optional[str]:
        """
        Check that a file can be loaded as a document.

        Args:
            file_path: Path to the YAML file

        Returns:
            None if the file loads, otherwise the reason it does not
        """
        try:
            self.load_yaml_file(file_path)
        except YamlMagicError as e:
            return e.message
        return None

    def check_files(self, file_paths: List[str]) -> Dict[str, str]:
        """Map every file that fails ``check_file`` to its reason."""
        failures = {}
        for file_path in file_paths:
            reason = self.check_file(file_path)
            if reason is not None:
                failures[file_path] = reason
        return failures
