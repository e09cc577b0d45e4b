"""
视频尺寸探测（ffprobe）

探测失败时抛出 CanvasProbeFailed，由 resolve_canvas_size 捕获并回退到默认画布尺寸。
"""
import re
import subprocess
from pathlib import Path
from typing import Optional, Union

from ..exceptions import CanvasProbeFailed
from ..models import CanvasSize, DEFAULT_CANVAS
from ..utils.logger import setup_logger

logger = setup_logger("probe")

_DIMENSION_PATTERN = re.compile(r"^\s*(\d+)x(\d+)")


class FFprobeCanvasProbe:
    """使用 ffprobe 读取第一条视频流的宽高"""

    def __init__(self, ffprobe_path: str = "ffprobe", timeout: Optional[float] = 30):
        self.ffprobe_path = ffprobe_path
        self.timeout = timeout

    def __call__(self, video_path: Union[str, Path]) -> CanvasSize:
        return self.probe(video_path)

    def probe(self, video_path: Union[str, Path]) -> CanvasSize:
        """
        获取视频分辨率

        Args:
            video_path: 视频文件路径

        Returns:
            CanvasSize

        Raises:
            CanvasProbeFailed: 文件不存在、ffprobe 不可用或输出无法解析
        """
        video_path = Path(video_path)
        if not video_path.exists():
            raise CanvasProbeFailed(f"视频文件不存在: {video_path}")

        cmd = [
            self.ffprobe_path,
            '-v', 'error',
            '-select_streams', 'v:0',
            '-show_entries', 'stream=width,height',
            '-of', 'csv=s=x:p=0',
            str(video_path),
        ]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise CanvasProbeFailed(f"ffprobe 执行失败: {e}", original_error=e) from e

        match = _DIMENSION_PATTERN.match(result.stdout)
        if not match:
            raise CanvasProbeFailed(f"Could not parse video dimensions: {result.stdout.strip()!r}")

        width, height = int(match.group(1)), int(match.group(2))
        if width <= 0 or height <= 0:
            raise CanvasProbeFailed(f"视频尺寸无效: {width}x{height}")
        return CanvasSize(width, height)


def resolve_canvas_size(
    video_path: Optional[Union[str, Path]],
    probe=None,
    default: CanvasSize = DEFAULT_CANVAS,
) -> CanvasSize:
    """确定画布尺寸：有视频时探测一次，失败或无视频时使用默认尺寸"""
    if not video_path:
        return default

    probe = probe or FFprobeCanvasProbe()
    try:
        canvas = probe(video_path)
    except CanvasProbeFailed as e:
        logger.warning(f"Could not get video dimensions: {e}")
        logger.warning(f"Using default dimensions: {default}")
        return default

    logger.debug(f"Video dimensions: {canvas}", extra={"canvas": str(canvas)})
    return canvas
