"""
转换流程编排

原始文件 → SubtitleParser → normalize_timing → 书写系统检测 / 参数推导
→ 逐条字幕：DimensionProvider → 背景框几何 → AssDocumentBuilder → ASS 文本

解析器、测量器、视频探测器均通过构造参数注入。
"""
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from .ass.builder import AssDocumentBuilder
from .config import RenderOptions
from .layout.geometry import build_box_geometry
from .layout.measure import CommandMeasureBackend, DimensionProvider, ExactMeasurer, TextMeasurer
from .layout.params import resolve_bottom_margin, resolve_font, resolve_font_size
from .media.probe import FFprobeCanvasProbe, resolve_canvas_size
from .models import CanvasSize, ConversionReport, Cue, DEFAULT_CANVAS, SubtitleFormat
from .subtitle.parser import SubtitleParser, detect_format
from .subtitle.script_detect import detect_script
from .subtitle.timing import normalize_timing
from .utils.logger import setup_logger, set_subtitle_context

logger = setup_logger("converter")

PathLike = Union[str, Path]


def default_output_path(subtitle_path: PathLike) -> Path:
    """默认输出文件：当前目录下的 <字幕文件名>.ass"""
    return Path(f"{Path(subtitle_path).stem}.ass")


class RoundedAssConverter:
    """SRT/VTT → 圆角背景 ASS 转换器"""

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        parser: Optional[SubtitleParser] = None,
        measurer: Optional[TextMeasurer] = None,
        probe: Optional[Callable[[PathLike], CanvasSize]] = None,
        platform: Optional[str] = None,
        default_canvas: CanvasSize = DEFAULT_CANVAS,
    ):
        """
        Args:
            options: 渲染选项（None 使用默认值）
            parser: 字幕解析器
            measurer: 精确测量策略；options.use_exact_measure 为 False 时不使用
            probe: 视频尺寸探测器（可调用对象，失败时抛出 CanvasProbeFailed）
            platform: 用于选择默认字体的平台标识（默认 sys.platform）
            default_canvas: 探测失败或无视频时使用的画布尺寸
        """
        self.options = options or RenderOptions()
        self.parser = parser or SubtitleParser()
        self.probe = probe or FFprobeCanvasProbe()
        self.platform = platform
        self.default_canvas = default_canvas

        exact = None
        if self.options.use_exact_measure:
            exact = measurer or ExactMeasurer(CommandMeasureBackend(self.options.measure_command))
        self.dimension_provider = DimensionProvider(exact=exact)

    def convert_cues(self, cues: List[Cue], canvas: CanvasSize) -> ConversionReport:
        """对已解析的字幕执行时间轴规整、参数推导、测量与文档组装"""
        options = self.options
        normalize_timing(cues)

        predominant_script = detect_script(" ".join(cue.text for cue in cues))
        logger.debug(f"Detected predominant script: {predominant_script.value}")

        font_name, font_source = resolve_font(options.font, predominant_script, self.platform)
        font_size = resolve_font_size(options.font_size, canvas.height)
        margin_bottom = resolve_bottom_margin(options.margin_bottom, canvas.height)
        logger.debug(f'Using font: "{font_name}" ({font_source})')
        logger.debug(
            f"Using bottom margin: {margin_bottom}px "
            f"({'user specified' if options.margin_bottom is not None else 'auto-determined'})"
        )

        metrics = self.dimension_provider.dimensions(cues, font_name, font_size, canvas)
        geometries = [
            build_box_geometry(
                m,
                canvas,
                options.padding_x,
                options.padding_y,
                radius=options.radius,
                min_width_ratio=options.min_width_ratio,
                max_width_ratio=options.max_width_ratio,
                disable_min_width=options.disable_min_width,
            )
            for m in metrics
        ]
        if geometries:
            logger.debug(
                f"Using border radius: {geometries[0].radius}px "
                f"({'user specified' if options.radius is not None else 'auto-determined'})"
            )

        builder = AssDocumentBuilder(
            canvas=canvas,
            font_name=font_name,
            font_size=font_size,
            margin_bottom=margin_bottom,
            predominant_script=predominant_script,
            text_color=options.text_color,
            bg_color=options.bg_color,
            bg_alpha=options.bg_alpha,
        )
        content = builder.build(cues, geometries)

        resolved = {
            "font": (font_name, font_source),
            "font_size": (font_size, "user specified" if options.font_size else "auto-determined"),
            "radius": (
                options.radius if options.radius is not None else "auto",
                "user specified" if options.radius is not None else "auto-determined",
            ),
            "margin_bottom": (
                margin_bottom,
                "user specified" if options.margin_bottom is not None else "auto-determined",
            ),
            "canvas": (str(canvas), ""),
        }

        return ConversionReport(
            content=content,
            cue_count=len(cues),
            canvas=canvas,
            font_name=font_name,
            font_size=font_size,
            predominant_script=predominant_script,
            margin_bottom=margin_bottom,
            measured_count=self.dimension_provider.measured_count,
            estimated_count=self.dimension_provider.estimated_count,
            resolved=resolved,
        )

    def convert_text(
        self,
        content: str,
        subtitle_format: Union[str, SubtitleFormat],
        canvas: Optional[CanvasSize] = None,
    ) -> ConversionReport:
        """转换已解码的字幕文本"""
        cues = self.parser.parse(content, subtitle_format)
        return self.convert_cues(cues, canvas or self.default_canvas)

    def convert_file(
        self,
        subtitle_path: PathLike,
        video_path: Optional[PathLike] = None,
        output_path: Optional[PathLike] = None,
    ) -> ConversionReport:
        """
        转换字幕文件并写出 ASS 文件

        Args:
            subtitle_path: .srt / .vtt 字幕文件
            video_path: 可选视频文件，用于探测画布尺寸
            output_path: 输出路径（默认当前目录下的 <字幕文件名>.ass）

        Returns:
            ConversionReport

        Raises:
            FileNotFoundError: 字幕文件不存在
            UnsupportedFormat: 字幕格式不支持
            EmptyInput: 没有解析出字幕
        """
        subtitle_path = Path(subtitle_path)
        set_subtitle_context(subtitle_path.name)
        try:
            fmt = detect_format(subtitle_path, self.options.subtitle_format)
            logger.debug(f"Parsing {fmt.value.upper()} file: {subtitle_path}")
            cues = self.parser.parse_file(subtitle_path, fmt.value)
            logger.debug(f"Parsed {len(cues)} subtitles from {subtitle_path}")

            canvas = resolve_canvas_size(video_path, self.probe, self.default_canvas)
            report = self.convert_cues(cues, canvas)

            output = Path(output_path) if output_path else default_output_path(subtitle_path)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(report.content, encoding="utf-8")
            report.output_path = str(output)
            logger.info(f"ASS file generated: {output}")
            return report
        finally:
            set_subtitle_context(None)


def create_rounded_ass(
    subtitle_path: PathLike,
    video_path: Optional[PathLike] = None,
    output_path: Optional[PathLike] = None,
    options: Optional[RenderOptions] = None,
    **overrides: Any,
) -> ConversionReport:
    """便捷函数：按选项转换字幕文件

    overrides 中的键与 RenderOptions 字段同名，会覆盖 options 中的对应值。
    """
    options = options or RenderOptions()
    if overrides:
        options = options.merged(overrides)
    return RoundedAssConverter(options).convert_file(subtitle_path, video_path, output_path)
