"""Subtitle input: parsing, timing normalization and script detection"""

from .parser import (
    SubtitleParser,
    convert_markup,
    decode_subtitle_bytes,
    detect_format,
    parse_subtitle_file,
)
from .script_detect import detect_script, is_rtl
from .timing import normalize_timing

__all__ = [
    "SubtitleParser",
    "convert_markup",
    "decode_subtitle_bytes",
    "detect_format",
    "parse_subtitle_file",
    "detect_script",
    "is_rtl",
    "normalize_timing",
]
