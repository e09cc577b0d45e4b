"""
文字尺寸提供者

两种策略：
- ExactMeasurer: 生成临时 ASS 文档，调用外部测量程序（默认 ass-measure）得到每行的精确宽高
- HeuristicEstimator: 按字符数和字号估算

DimensionProvider 对每条字幕优先使用精确结果，缺失时回退到估算，并统计两者数量。
"""
import json
import os
import re
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Any

from ..exceptions import MeasurementUnavailable
from ..models import CanvasSize, Cue, TextMetrics
from ..utils.logger import setup_logger

logger = setup_logger("measure")

CHAR_WIDTH_RATIO = 0.6
LINE_HEIGHT_RATIO = 1.2
MAX_ESTIMATED_WIDTH_RATIO = 0.9

_OVERRIDE_TAG_PATTERN = re.compile(r"\{.*?\}")
_LINE_BREAK = "\\N"

# (ASS 文件路径, 画布宽, 画布高) → [{"width": ..., "height": ...}, ...]
MeasureBackend = Callable[[str, int, int], Sequence[Dict[str, Any]]]


class TextMeasurer(ABC):
    """文字尺寸测量策略接口"""

    @abstractmethod
    def measure(
        self,
        cues: List[Cue],
        font_name: str,
        font_size: int,
        canvas: CanvasSize,
    ) -> Optional[List[TextMetrics]]:
        """返回与 cues 一一对应的尺寸列表；不可用时返回 None"""


class HeuristicEstimator(TextMeasurer):
    """启发式估算（无外部依赖，总能给出结果）"""

    def estimate(self, text: str, font_size: int, canvas_width: int) -> TextMetrics:
        """估算单条字幕的尺寸

        宽度按去除覆盖标签后的字符数计算（\\N 视为空格），
        高度按 \\N 数量 + 1 行计算。
        """
        clean_text = _OVERRIDE_TAG_PATTERN.sub("", text).replace(_LINE_BREAK, " ")
        width = min(
            len(clean_text) * font_size * CHAR_WIDTH_RATIO,
            canvas_width * MAX_ESTIMATED_WIDTH_RATIO,
        )
        line_count = text.count(_LINE_BREAK) + 1
        height = font_size * LINE_HEIGHT_RATIO * line_count
        return TextMetrics(width=width, height=height, measured=False)

    def measure(self, cues, font_name, font_size, canvas):
        return [self.estimate(cue.text, font_size, canvas.width) for cue in cues]


class CommandMeasureBackend:
    """通过外部可执行程序测量：`<command> <ass_path> <width> <height>`，输出 JSON 列表"""

    def __init__(self, command: str = "ass-measure", timeout: Optional[float] = 60):
        self.command = command
        self.timeout = timeout

    def __call__(self, ass_path: str, width: int, height: int) -> List[Dict[str, Any]]:
        executable = shutil.which(self.command)
        if executable is None:
            raise MeasurementUnavailable(f"未找到测量程序: {self.command}")

        cmd = [executable, str(ass_path), str(width), str(height)]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise MeasurementUnavailable(f"测量程序执行失败: {e}", original_error=e) from e

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise MeasurementUnavailable(f"测量结果不是有效的 JSON: {e}", original_error=e) from e
        if not isinstance(data, list):
            raise MeasurementUnavailable("测量结果必须是列表")
        return data


class ExactMeasurer(TextMeasurer):
    """外部精确测量策略

    将字幕写入临时 ASS 文档，调用测量后端，结束后删除临时文档。
    任何失败都返回 None，由调用方回退到估算。
    """

    def __init__(self, backend: Optional[MeasureBackend] = None):
        self.backend = backend or CommandMeasureBackend()

    def measure(self, cues, font_name, font_size, canvas):
        from ..ass.builder import build_measurement_document

        document = build_measurement_document(cues, font_name, font_size, canvas)
        fd, temp_path = tempfile.mkstemp(prefix="rounded-ass-measure-", suffix=".ass")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document)
            raw = self.backend(temp_path, canvas.width, canvas.height)
            return [_to_metrics(item) for item in raw]
        except Exception as e:
            logger.warning(f"精确测量失败，回退到估算: {e}")
            return None
        finally:
            Path(temp_path).unlink(missing_ok=True)


def _to_metrics(item: Dict[str, Any]) -> TextMetrics:
    try:
        width = float(item["width"])
        height = float(item["height"])
    except (KeyError, TypeError, ValueError) as e:
        raise MeasurementUnavailable(f"测量结果格式错误: {item!r}", original_error=e) from e
    if width < 0 or height < 0:
        raise MeasurementUnavailable(f"测量结果为负数: {item!r}")
    return TextMetrics(width=width, height=height, measured=True)


class DimensionProvider:
    """逐条字幕选择精确结果或估算结果"""

    def __init__(
        self,
        exact: Optional[TextMeasurer] = None,
        estimator: Optional[HeuristicEstimator] = None,
    ):
        self.exact = exact
        self.estimator = estimator or HeuristicEstimator()
        self.measured_count = 0
        self.estimated_count = 0

    def dimensions(
        self,
        cues: List[Cue],
        font_name: str,
        font_size: int,
        canvas: CanvasSize,
    ) -> List[TextMetrics]:
        """返回与 cues 一一对应的 TextMetrics"""
        self.measured_count = 0
        self.estimated_count = 0

        measured = None
        if self.exact is not None:
            logger.debug("使用精确测量获取字幕尺寸")
            measured = self.exact.measure(cues, font_name, font_size, canvas)

        results = []
        for idx, cue in enumerate(cues):
            if measured is not None and idx < len(measured):
                metrics = measured[idx]
                self.measured_count += 1
                kind = "measured"
            else:
                metrics = self.estimator.estimate(cue.text, font_size, canvas.width)
                self.estimated_count += 1
                kind = "estimated"
            if idx < 3:
                logger.debug(
                    f"Subtitle #{cue.index}: Using {kind} dimensions: "
                    f"{metrics.width}x{metrics.height}",
                    extra={"cue_index": cue.index, "measured": metrics.measured},
                )
            results.append(metrics)

        logger.info(
            f"Subtitle dimensions: {self.measured_count} measured, "
            f"{self.estimated_count} estimated",
            extra={"measured": self.measured_count, "estimated": self.estimated_count},
        )
        return results
