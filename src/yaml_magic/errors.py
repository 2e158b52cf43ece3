"""
Exceptions raised by yaml_magic.
"""


class YamlMagicError(Exception):
    """Base class for yaml_magic exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message}"


class ParseError(YamlMagicError, ValueError):
    """Raised when text is not valid YAML or its root is not a mapping."""

    def __init__(self, message: str = "Invalid YAML found."):
        super().__init__(message)


class YamlIOError(YamlMagicError, OSError):
    """Raised when a YAML file cannot be read or written."""

    def __init__(self, file_path: str, reason: str = ""):
        message = f"YAML I/O error occurred. (File: {file_path})."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.file_path = file_path


class ConfigurationError(YamlMagicError, ValueError):
    """Raised for invalid construction arguments."""
