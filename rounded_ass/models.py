"""
数据模型定义

- Cue: 单条字幕（解析产生，仅 TimingNormalizer 会修改 end）
- CanvasSize: 画布尺寸（来自视频探测或默认 1920x1080）
- TextMetrics: 单条字幕的文字尺寸（测量或估算）
- BoxGeometry: 背景框几何参数（半宽、半高、圆角半径）
- RenderEvent: 一条 ASS Dialogue 事件
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


class SubtitleFormat(Enum):
    """输入字幕格式"""
    SRT = "srt"
    VTT = "vtt"


class Script(Enum):
    """文字书写系统（按检测优先级排列）"""
    CJK = "cjk"
    ARABIC = "arabic"
    HEBREW = "hebrew"
    LATIN = "latin"


@dataclass
class Cue:
    """单条字幕

    text 中的换行已经转换为 ASS 强制换行符 \\N。
    """
    index: int
    start: float  # 秒
    end: float    # 秒
    text: str

    def __str__(self) -> str:
        return f"Cue(#{self.index}, {self.start:.3f}-{self.end:.3f}, {self.text!r})"


@dataclass(frozen=True)
class CanvasSize:
    """参考坐标空间（与目标视频像素尺寸一致）"""
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


DEFAULT_CANVAS = CanvasSize(1920, 1080)


@dataclass(frozen=True)
class TextMetrics:
    """文字渲染尺寸（画布像素）"""
    width: float
    height: float
    measured: bool = False  # True = 外部精确测量，False = 启发式估算


@dataclass(frozen=True)
class BoxGeometry:
    """背景框几何参数，以背景框自身中心为原点"""
    half_width: float
    half_height: float
    radius: float

    @property
    def width(self) -> float:
        return self.half_width * 2

    @property
    def height(self) -> float:
        return self.half_height * 2


@dataclass(frozen=True)
class RenderEvent:
    """ASS Dialogue 事件（layer 0 = 背景框，layer 1 = 文字）"""
    layer: int
    start: str
    end: str
    style: str
    text: str

    def to_dialogue(self) -> str:
        return f"Dialogue: {self.layer},{self.start},{self.end},{self.style},,0,0,0,,{self.text}"


@dataclass
class ConversionReport:
    """一次转换的结果摘要"""
    content: str
    cue_count: int
    canvas: CanvasSize
    font_name: str
    font_size: int
    predominant_script: Script
    margin_bottom: int
    measured_count: int = 0
    estimated_count: int = 0
    output_path: Optional[str] = None
    resolved: Dict[str, Any] = field(default_factory=dict)
