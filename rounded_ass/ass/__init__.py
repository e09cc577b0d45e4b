"""ASS document output"""

from .builder import (
    AssDocumentBuilder,
    BOX_STYLE,
    RTL_MARKER,
    TEXT_STYLE,
    build_measurement_document,
    format_ass_time,
    to_ass_color,
)

__all__ = [
    "AssDocumentBuilder",
    "BOX_STYLE",
    "RTL_MARKER",
    "TEXT_STYLE",
    "build_measurement_document",
    "format_ass_time",
    "to_ass_color",
]
