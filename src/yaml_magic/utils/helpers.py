"""
Helper utility functions for yaml_magic.
"""

from pathlib import Path

from yaml_magic.errors import YamlIOError
from yaml_magic.utils.logging import get_logger

logger = get_logger("utils.helpers")


def temp_path(file_path: str) -> Path:
    return Path(f"{file_path}.tmp")


def backup_path(file_path: str) -> Path:
    return Path(f"{file_path}.bak")


def atomic_write(file_path: str, content: str) -> None:
    """
    Replace a file's content without leaving it half written.

    The content goes to ``<file>.tmp`` first. An existing target is renamed
    to ``<file>.bak``, the temporary file is renamed into place and the
    backup is deleted. Concurrent writes to the same path are not supported.

    Args:
        file_path: Target file path
        content: Full text to write

    Raises:
        YamlIOError: If any file-system operation fails
    """
    target = Path(file_path)
    tmp_file = temp_path(file_path)
    backup_file = backup_path(file_path)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp_file.write_text(content, encoding="utf-8")

        if backup_file.exists():
            backup_file.unlink()
        if target.exists():
            target.rename(backup_file)
        tmp_file.rename(target)
        if backup_file.exists():
            backup_file.unlink()
    except OSError as e:
        raise YamlIOError(str(file_path), str(e)) from e

    logger.debug(f"Wrote {len(content)} characters to {file_path}")
