"""
未指定视觉参数的推导：字体、圆角半径、底边距
"""
import math
import sys
from typing import Optional, Tuple

from ..models import Script

DEFAULT_FONT = "Arial"

PLATFORM_WINDOWS = "windows"
PLATFORM_POSIX = "posix"  # macOS / Linux

# (书写系统, 平台) → 字体
FONT_TABLE = {
    (Script.CJK, PLATFORM_WINDOWS): "Microsoft YaHei",
    (Script.CJK, PLATFORM_POSIX): "Noto Sans CJK SC",
    (Script.ARABIC, PLATFORM_WINDOWS): "Traditional Arabic",
    (Script.ARABIC, PLATFORM_POSIX): "Noto Sans Arabic",
    (Script.HEBREW, PLATFORM_WINDOWS): "David",
    (Script.HEBREW, PLATFORM_POSIX): "Noto Sans Hebrew",
    (Script.LATIN, PLATFORM_WINDOWS): DEFAULT_FONT,
    (Script.LATIN, PLATFORM_POSIX): DEFAULT_FONT,
}

REFERENCE_HEIGHT = 1080
AUTO_RADIUS_BASE = 10
MIN_BOTTOM_MARGIN = 60


def platform_family(platform: Optional[str] = None) -> str:
    """将 sys.platform 归类为 windows / posix"""
    platform = platform or sys.platform
    return PLATFORM_WINDOWS if platform.startswith(("win", "cygwin")) else PLATFORM_POSIX


def resolve_font(
    requested: Optional[str],
    script: Script,
    platform: Optional[str] = None,
) -> Tuple[str, str]:
    """确定字体

    Returns:
        (字体名, 来源说明)
    """
    if requested:
        return requested, "user specified"
    family = platform_family(platform)
    font = FONT_TABLE[(script, family)]
    if script is Script.LATIN:
        return font, "default"
    return font, f"auto-determined for {script.value} script"


def max_allowed_radius(half_width: float, half_height: float) -> float:
    """圆角半径上限：max(1, min(半宽, 半高) - 1)"""
    return max(1, min(half_width, half_height) - 1)


def resolve_border_radius(
    requested: Optional[float],
    half_width: float,
    half_height: float,
    canvas_width: int,
    canvas_height: int,
) -> float:
    """确定单个背景框的有效圆角半径

    指定了半径时按背景框尺寸截断；未指定时按画布分辨率（以 1080p 为基准）和背景框尺寸推导。
    """
    upper = max_allowed_radius(half_width, half_height)

    if requested is not None:
        return min(requested, upper) if requested > 0 else 0

    smaller_dimension = min(half_width, half_height)
    video_scale = min(canvas_width, canvas_height) / REFERENCE_HEIGHT
    base = min(AUTO_RADIUS_BASE * video_scale, smaller_dimension / 4)
    return min(max(base, 0), upper)


def resolve_bottom_margin(requested: Optional[int], canvas_height: int) -> int:
    """确定底边距：画布高度的 5%，限制在 [60, 10%] 之间（下限优先）"""
    if requested is not None:
        return requested
    base = math.floor(canvas_height * 0.05)
    return max(MIN_BOTTOM_MARGIN, min(base, math.floor(canvas_height * 0.1)))


def resolve_font_size(requested: Optional[int], canvas_height: int) -> int:
    """字体大小：未指定时为画布高度的 1/20"""
    if requested:
        return requested
    return max(1, canvas_height // 20)
