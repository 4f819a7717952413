"""Textual host for the metadata field."""

from .app import (
    MetadataEditorApp,
    MetadataTextArea,
    location_for_offset,
    main,
    offset_for_location,
)

__all__ = [
    "MetadataEditorApp",
    "MetadataTextArea",
    "location_for_offset",
    "main",
    "offset_for_location",
]
