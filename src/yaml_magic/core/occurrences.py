"""
Key occurrence counting.

Raw-text scanning cannot always tell which mapping a line belongs to, so
annotations are anchored to a key together with the number of times that key
appears in the whole tree at or above a nesting depth. Extraction and merge
both compute this count against the same parsed tree.
"""

from typing import Dict, Tuple

from yaml_magic.core.nodes import Mapping, Node, Sequence


def count_occurrences(tree: Mapping, key: str, max_depth: int) -> int:
    """
    Count mapping entries named ``key`` at depth ``max_depth`` or less.

    Entries of the root mapping are at depth 0. Entries of a mapping stored
    under a key at depth ``d``, directly or as an item of a sequence, are at
    depth ``d + 1``.

    Args:
        tree: Root mapping
        key: Key to count
        max_depth: Deepest level to include

    Returns:
        Number of matching entries
    """
    return _count(tree, key, max_depth, 0)


def _count(node: Node, key: str, max_depth: int, depth: int) -> int:
    if depth > max_depth:
        return 0
    total = 0
    if isinstance(node, Mapping):
        for entry_key, value in node.items():
            if entry_key == key:
                total += 1
            total += _count(value, key, max_depth, depth + 1)
    elif isinstance(node, Sequence):
        for item in node.values():
            total += _count(item, key, max_depth, depth)
    return total


class OccurrenceCounter:
    """Memoising wrapper around ``count_occurrences`` for one tree."""

    def __init__(self, tree: Mapping):
        self.tree = tree
        self._cache: Dict[Tuple[str, int], int] = {}

    def count(self, key: str, max_depth: int) -> int:
        cache_key = (key, max_depth)
        if cache_key not in self._cache:
            self._cache[cache_key] = count_occurrences(self.tree, key, max_depth)
        return self._cache[cache_key]
