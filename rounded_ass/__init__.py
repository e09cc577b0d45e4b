"""
rounded-ass - 圆角背景字幕生成器

将 SRT/VTT 字幕转换为 ASS 字幕，每条字幕绘制在自适应尺寸的圆角背景框之上。
- 编码回退解析 SRT/VTT
- 文字书写系统检测（CJK / 阿拉伯文 / 希伯来文 / 拉丁文）
- 精确测量（外部 ass-measure）或启发式估算文字尺寸
- 生成 ASS 矢量绘图命令（圆角矩形）
"""

__version__ = "0.3.0"
__author__ = "rounded-ass contributors"

from .converter import RoundedAssConverter, create_rounded_ass
from .models import Cue, CanvasSize, ConversionReport

__all__ = [
    "RoundedAssConverter",
    "create_rounded_ass",
    "Cue",
    "CanvasSize",
    "ConversionReport",
]
