"""
背景框几何计算与 ASS 矢量绘图命令生成

ASS 绘图坐标以背景框自身中心为原点，y 轴向下。圆角使用三次贝塞尔近似：
第一个控制点落在原矩形的角点上，第二个控制点与终点重合，起止切线分别与相邻两条边重合。
"""
from typing import Optional, Tuple

from ..models import BoxGeometry, CanvasSize, TextMetrics
from .params import max_allowed_radius, resolve_border_radius

CANVAS_WIDTH_LIMIT = 0.98
ZERO_PADDING_EXTRA = 2


def format_number(value: float) -> str:
    """绘图坐标格式化：保留两位小数并去掉多余的 0（整数不带小数点）"""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")


def compute_box_size(
    text_width: float,
    text_height: float,
    padding_x: float,
    padding_y: float,
    canvas_width: int,
    min_width_ratio: float = 0.0,
    max_width_ratio: float = 1.0,
    disable_min_width: bool = True,
) -> Tuple[float, float]:
    """根据文字尺寸计算背景框宽高

    宽度处理顺序：加水平内边距（为 0 时只加 2px）→ 不超过画布 98% →
    最小宽度（默认关闭）→ 最大宽度比例。高度总是加上下内边距。
    """
    if padding_x == 0:
        box_width = text_width + ZERO_PADDING_EXTRA
    else:
        box_width = text_width + padding_x * 2

    box_width = min(box_width, canvas_width * CANVAS_WIDTH_LIMIT)
    if not disable_min_width:
        box_width = max(box_width, canvas_width * min_width_ratio)
    box_width = min(box_width, canvas_width * max_width_ratio)

    box_height = text_height + padding_y * 2
    return box_width, box_height


def build_box_geometry(
    metrics: TextMetrics,
    canvas: CanvasSize,
    padding_x: float,
    padding_y: float,
    radius: Optional[float] = None,
    min_width_ratio: float = 0.0,
    max_width_ratio: float = 1.0,
    disable_min_width: bool = True,
) -> BoxGeometry:
    """文字尺寸 + 渲染参数 → 背景框几何参数（含有效圆角半径）"""
    box_width, box_height = compute_box_size(
        metrics.width,
        metrics.height,
        padding_x,
        padding_y,
        canvas.width,
        min_width_ratio=min_width_ratio,
        max_width_ratio=max_width_ratio,
        disable_min_width=disable_min_width,
    )
    half_width = box_width / 2
    half_height = box_height / 2
    effective_radius = resolve_border_radius(
        radius, half_width, half_height, canvas.width, canvas.height
    )
    return BoxGeometry(half_width=half_width, half_height=half_height, radius=effective_radius)


def rounded_rect_path(half_width: float, half_height: float, radius: float) -> str:
    """生成以原点为中心的（圆角）矩形绘图命令

    从上边开始顺时针闭合；radius 为 0 时生成普通矩形（4 段直线回到起点）。
    """
    w, h = half_width, half_height
    r = min(radius, max_allowed_radius(w, h)) if radius > 0 else 0

    if r > 0:
        points = [
            ("m", (-w + r, -h)),
            ("l", (w - r, -h)),                              # 上边
            ("b", (w, -h, w, -h + r, w, -h + r)),            # 右上角
            ("l", (w, h - r)),                               # 右边
            ("b", (w, h, w - r, h, w - r, h)),               # 右下角
            ("l", (-w + r, h)),                              # 下边
            ("b", (-w, h, -w, h - r, -w, h - r)),            # 左下角
            ("l", (-w, -h + r)),                             # 左边
            ("b", (-w, -h, -w + r, -h, -w + r, -h)),         # 左上角
        ]
    else:
        points = [
            ("m", (-w, -h)),
            ("l", (w, -h)),
            ("l", (w, h)),
            ("l", (-w, h)),
            ("l", (-w, -h)),
        ]

    return " ".join(
        f"{command} {' '.join(format_number(v) for v in coords)}"
        for command, coords in points
    )
