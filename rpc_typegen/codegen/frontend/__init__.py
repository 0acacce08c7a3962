"""
Front end: decodes syntax-tree documents and extracts the semantic model.
"""

from .directives import DirectiveReader, has_serialize_marker, parse_duration
from .extract import ExtractionResult, Extractor, extract_unit, unwrap_result
from .syntax import ItemNode, SyntaxUnit, parse_item, parse_type, parse_unit

__all__ = [
    "DirectiveReader",
    "has_serialize_marker",
    "parse_duration",
    "ExtractionResult",
    "Extractor",
    "extract_unit",
    "unwrap_result",
    "ItemNode",
    "SyntaxUnit",
    "parse_item",
    "parse_type",
    "parse_unit",
]
