"""Status classification and formatting for metadata buffers."""

from .classifier import MetadataStatus, classify, is_strict_json, strict_loads
from .formatter import INDENT_WIDTH, format_metadata

__all__ = [
    "INDENT_WIDTH",
    "MetadataStatus",
    "classify",
    "format_metadata",
    "is_strict_json",
    "strict_loads",
]
