"""
异常定义

可恢复错误（MeasurementUnavailable、CanvasProbeFailed）在各自的协作者边界被捕获并回退；
EmptyInput、ConfigError、UnsupportedFormat 会传播给调用方。
"""
from typing import Optional


class RoundedAssError(Exception):
    """转换错误基类"""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None
    ):
        """
        Args:
            message: 错误信息
            original_error: 原始异常
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self):
        return self.message


class DecodingExhausted(RoundedAssError):
    """所有候选编码均解码失败"""
    pass


class EmptyInput(RoundedAssError):
    """字幕文件中没有解析出任何字幕条目"""
    pass


class UnsupportedFormat(RoundedAssError):
    """不支持的字幕格式（仅支持 srt / vtt）"""
    pass


class MeasurementUnavailable(RoundedAssError):
    """精确测量不可用（本地回退到启发式估算）"""
    pass


class CanvasProbeFailed(RoundedAssError):
    """视频尺寸探测失败（本地回退到默认画布尺寸）"""
    pass


class ConfigError(RoundedAssError, ValueError):
    """配置校验失败"""
    pass
