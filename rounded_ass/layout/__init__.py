"""Box layout: text dimensions, visual parameter resolution and rounded-box geometry"""

from .geometry import build_box_geometry, compute_box_size, format_number, rounded_rect_path
from .measure import (
    CommandMeasureBackend,
    DimensionProvider,
    ExactMeasurer,
    HeuristicEstimator,
    TextMeasurer,
)
from .params import (
    FONT_TABLE,
    platform_family,
    resolve_border_radius,
    resolve_bottom_margin,
    resolve_font,
    resolve_font_size,
)

__all__ = [
    "build_box_geometry",
    "compute_box_size",
    "format_number",
    "rounded_rect_path",
    "CommandMeasureBackend",
    "DimensionProvider",
    "ExactMeasurer",
    "HeuristicEstimator",
    "TextMeasurer",
    "FONT_TABLE",
    "platform_family",
    "resolve_border_radius",
    "resolve_bottom_margin",
    "resolve_font",
    "resolve_font_size",
]
