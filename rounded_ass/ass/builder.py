"""
ASS 文档组装

文档结构：
- [Script Info]: 画布尺寸、换行/缩放标志、书写系统标签
- [V4+ Styles]: Default（文字）和 Box-BG（背景框）两个样式
- [Events]: 每条字幕两个事件，Layer 0 背景框在前，Layer 1 文字在后
"""
from typing import List, Sequence

from ..models import BoxGeometry, CanvasSize, Cue, RenderEvent, Script
from ..layout.geometry import format_number, rounded_rect_path
from ..subtitle.script_detect import detect_script, is_rtl

TEXT_STYLE = "Default"
BOX_STYLE = "Box-BG"

# U+202B RIGHT-TO-LEFT EMBEDDING
RTL_MARKER = "\u202b"

STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding"
)
EVENT_FORMAT = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"


def format_ass_time(seconds: float) -> str:
    """Convert seconds to ASS timestamp format (H:MM:SS.cc)"""
    total_cs = int(round(max(seconds, 0) * 100))
    total_seconds, centiseconds = divmod(total_cs, 100)
    minutes, secs = divmod(total_seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}.{centiseconds:02d}"


def to_ass_color(rgb_hex: str) -> str:
    """RRGGBB → ASS 的 BBGGRR 顺序"""
    rgb_hex = rgb_hex.upper()
    return f"{rgb_hex[4:6]}{rgb_hex[2:4]}{rgb_hex[0:2]}"


def _script_info(title: str, canvas: CanvasSize, extra: Sequence[str] = ()) -> List[str]:
    lines = [
        "[Script Info]",
        f"Title: {title}",
        "ScriptType: v4.00+",
        f"PlayResX: {canvas.width}",
        f"PlayResY: {canvas.height}",
        "WrapStyle: 0",
        "ScaledBorderAndShadow: yes",
    ]
    lines.extend(extra)
    return lines


def build_measurement_document(
    cues: Sequence[Cue],
    font_name: str,
    font_size: int,
    canvas: CanvasSize,
) -> str:
    """生成供外部测量程序使用的最小 ASS 文档（每条字幕一行 Dialogue）"""
    lines = _script_info("Temporary ASS file for measurement", canvas)
    lines += [
        "",
        "[V4+ Styles]",
        STYLE_FORMAT,
        f"Style: {TEXT_STYLE},{font_name},{font_size},&H00FFFFFF,&H000000FF,&H00000000,"
        f"&H00000000,0,0,0,0,100,100,0,0,1,0,0,5,10,10,10,1",
        "",
        "[Events]",
        EVENT_FORMAT,
    ]
    for cue in cues:
        lines.append(
            f"Dialogue: 0,{format_ass_time(cue.start)},{format_ass_time(cue.end)},"
            f"{TEXT_STYLE},,0,0,0,,{cue.text}"
        )
    return "\n".join(lines) + "\n"


class AssDocumentBuilder:
    """圆角背景字幕文档生成器"""

    def __init__(
        self,
        canvas: CanvasSize,
        font_name: str,
        font_size: int,
        margin_bottom: int,
        predominant_script: Script = Script.LATIN,
        text_color: str = "FFFFFF",
        bg_color: str = "000000",
        bg_alpha: int = 80,
    ):
        self.canvas = canvas
        self.font_name = font_name
        self.font_size = font_size
        self.margin_bottom = margin_bottom
        self.predominant_script = predominant_script
        self.text_color = to_ass_color(text_color)
        self.bg_color = to_ass_color(bg_color)
        self.bg_alpha = bg_alpha

    @property
    def position(self) -> str:
        """文字和背景框共用的定位点：画布水平中心，距底边 margin_bottom"""
        x = format_number(self.canvas.width / 2)
        y = format_number(self.canvas.height - self.margin_bottom)
        return f"\\pos({x},{y})"

    def header(self) -> str:
        lines = _script_info(
            "ASS subtitles with rounded background boxes",
            self.canvas,
            extra=[f"Language: {self.predominant_script.value}"],
        )
        return "\n".join(lines) + "\n"

    def styles(self) -> str:
        box_font_size = format_number(self.font_size / 2)
        lines = [
            "[V4+ Styles]",
            STYLE_FORMAT,
            f"Style: {TEXT_STYLE},{self.font_name},{self.font_size},&H00{self.text_color},"
            f"&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,0,0,5,10,10,"
            f"{self.margin_bottom},1",
            f"Style: {BOX_STYLE},{self.font_name},{box_font_size},&H00{self.bg_color},"
            f"&H000000FF,&H00{self.bg_color},&H00000000,0,0,0,0,100,100,0,0,1,0,0,7,0,0,0,1",
        ]
        return "\n".join(lines) + "\n"

    def background_event(self, cue: Cue, geometry: BoxGeometry) -> RenderEvent:
        """Layer 0：左上对齐，无边框/阴影，填充色和透明度内联设置，嵌入矢量路径"""
        path = rounded_rect_path(geometry.half_width, geometry.half_height, geometry.radius)
        text = (
            f"{{{self.position}\\bord0\\shad0\\1c&H{self.bg_color}&"
            f"\\1a&H{self.bg_alpha:02X}&\\p1}}{path}{{\\p0}}"
        )
        return RenderEvent(
            layer=0,
            start=format_ass_time(cue.start),
            end=format_ass_time(cue.end),
            style=BOX_STYLE,
            text=text,
        )

    def text_event(self, cue: Cue) -> RenderEvent:
        """Layer 1：居中对齐；字幕自身为 RTL 文字时加方向标记"""
        marker = RTL_MARKER if is_rtl(detect_script(cue.text)) else ""
        text = f"{{\\an5{self.position}\\bord0\\shad0}}{marker}{cue.text}"
        return RenderEvent(
            layer=1,
            start=format_ass_time(cue.start),
            end=format_ass_time(cue.end),
            style=TEXT_STYLE,
            text=text,
        )

    def events(self, cues: Sequence[Cue], geometries: Sequence[BoxGeometry]) -> List[RenderEvent]:
        """按字幕顺序生成事件，每条字幕背景在前、文字在后"""
        if len(cues) != len(geometries):
            raise ValueError(
                f"cues 与 geometries 数量不一致: {len(cues)} != {len(geometries)}"
            )
        events = []
        for cue, geometry in zip(cues, geometries):
            events.append(self.background_event(cue, geometry))
            events.append(self.text_event(cue))
        return events

    def build(self, cues: Sequence[Cue], geometries: Sequence[BoxGeometry]) -> str:
        """组装完整文档"""
        event_lines = [event.to_dialogue() for event in self.events(cues, geometries)]
        return (
            self.header()
            + "\n"
            + self.styles()
            + "\n[Events]\n"
            + EVENT_FORMAT
            + "\n"
            + "\n".join(event_lines)
            + "\n"
        )
