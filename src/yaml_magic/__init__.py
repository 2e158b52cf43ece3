"""
Format-preserving YAML documents.

Load a YAML file, edit it as a tree and save it back with its comments,
blank lines and string layout kept.
"""

from yaml_magic.core.document import YamlMagic, from_text, load
from yaml_magic.core.extractor import AnnotationExtractor, extract_annotations
from yaml_magic.core.merger import AnnotationMerger, merge_annotations
from yaml_magic.core.nodes import (
    BreakLine,
    Comment,
    KeyValue,
    Mapping,
    Node,
    Scalar,
    Sequence,
    to_node,
    to_python,
)
from yaml_magic.core.occurrences import OccurrenceCounter, count_occurrences
from yaml_magic.core.parser import YAMLParser
from yaml_magic.core.serializer import YamlSerializer, render
from yaml_magic.errors import ConfigurationError, ParseError, YamlIOError, YamlMagicError

__all__ = [
    "AnnotationExtractor",
    "AnnotationMerger",
    "BreakLine",
    "Comment",
    "ConfigurationError",
    "KeyValue",
    "Mapping",
    "Node",
    "OccurrenceCounter",
    "ParseError",
    "Scalar",
    "Sequence",
    "YAMLParser",
    "YamlIOError",
    "YamlMagic",
    "YamlMagicError",
    "YamlSerializer",
    "count_occurrences",
    "extract_annotations",
    "from_text",
    "load",
    "merge_annotations",
    "render",
    "to_node",
    "to_python",
]
