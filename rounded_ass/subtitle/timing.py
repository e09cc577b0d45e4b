"""
字幕时间轴规整

相邻字幕之间的间隙小于阈值（默认 0.1 秒）时，将前一条的结束时间对齐到后一条的开始时间，
避免播放时背景框闪烁。只修改 end，不合并文本。
"""
from typing import List

from ..models import Cue
from ..utils.logger import setup_logger

logger = setup_logger("timing")

DEFAULT_GAP_THRESHOLD = 0.1


def normalize_timing(cues: List[Cue], threshold: float = DEFAULT_GAP_THRESHOLD) -> List[Cue]:
    """单次正向遍历，原地调整并返回同一列表

    Args:
        cues: 按开始时间排序的字幕
        threshold: 间隙阈值（秒）

    Returns:
        调整后的 cues（与入参为同一对象）
    """
    adjusted = 0
    for current_cue, next_cue in zip(cues, cues[1:]):
        if next_cue.start - current_cue.end < threshold:
            if current_cue.end != next_cue.start:
                adjusted += 1
            current_cue.end = next_cue.start

    if adjusted:
        logger.debug(f"时间轴规整: 调整了 {adjusted} 条字幕的结束时间")
    return cues
