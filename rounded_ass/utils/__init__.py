"""
工具模块
"""
from .logger import setup_logger, add_file_handler, set_subtitle_context, get_subtitle_context

__all__ = [
    "setup_logger",
    "add_file_handler",
    "set_subtitle_context",
    "get_subtitle_context",
]
