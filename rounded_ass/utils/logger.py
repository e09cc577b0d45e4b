"""
日志工具模块

使用 ContextVars 来管理当前处理的字幕文件上下文：
- 每个线程有独立的上下文
- 在 RoundedAssConverter.convert_file() 开始时调用 set_subtitle_context() 即可
"""
import logging
import logging.handlers
import os
from pathlib import Path
from contextvars import ContextVar
from typing import Optional

# 默认配置
DEFAULT_LOG_LEVEL = logging.INFO
LOG_DIR_ENV = "ROUNDED_ASS_LOG_DIR"
PACKAGE_LOGGER = "rounded_ass"
DEFAULT_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(subtitle_str)s | %(name)-22s | %(message)s"

# 上下文变量，用于存储当前的字幕文件名
_subtitle_ctx: ContextVar[Optional[str]] = ContextVar("subtitle_file", default=None)


def set_subtitle_context(name: Optional[str]):
    """设置当前上下文的字幕文件名"""
    _subtitle_ctx.set(name)


def get_subtitle_context() -> Optional[str]:
    """获取当前上下文的字幕文件名"""
    return _subtitle_ctx.get()


class ContextFilter(logging.Filter):
    """
    日志过滤器，用于注入字幕文件名到日志记录中
    """
    def filter(self, record):
        name = get_subtitle_context()
        record.subtitle_str = f"[{name}]" if name else "[GLOBAL]"
        return True


class ContextFormatter(logging.Formatter):
    """补齐 subtitle_str 字段（记录可能来自未挂载 ContextFilter 的日志器）"""

    def format(self, record):
        if not hasattr(record, "subtitle_str"):
            name = get_subtitle_context()
            record.subtitle_str = f"[{name}]" if name else "[GLOBAL]"
        return super().format(record)


def add_file_handler(
    log_file: str,
    level: Optional[int] = None,
    fmt: str = DEFAULT_FILE_FORMAT,
    datefmt: str = "%H:%M:%S",
) -> Optional[logging.Handler]:
    """
    给包根日志器 rounded_ass 挂载滚动文件处理器。

    同一个文件只挂载一个处理器，所有模块日志器通过传播写入，
    避免多个处理器同时滚动同一文件。创建失败时记录警告并返回 None。
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    path = Path(log_file).expanduser().resolve()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == path:
            return handler

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(path), maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
    except OSError as e:
        root.warning(f"日志文件处理器创建失败: {e}")
        return None

    file_handler.setLevel(level or DEFAULT_LOG_LEVEL)
    file_handler.setFormatter(ContextFormatter(fmt, datefmt=datefmt))
    root.addHandler(file_handler)
    return file_handler


def setup_logger(
    name: str,
    level: Optional[int] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    创建并配置模块日志记录器。

    控制台输出由 CLI 在包根日志器上配置（colorlog），这里只负责上下文过滤器；
    文件输出统一挂在包根日志器上，见 add_file_handler。

    参数:
    - name: 日志记录器的名称（自动加上 rounded_ass. 前缀）
    - level: 日志级别（None 表示继承父日志器 rounded_ass 的级别）
    - log_file: 日志文件路径；为 None 时使用环境变量 ROUNDED_ASS_LOG_DIR（未设置则不写文件）
    """
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)

    if not any(isinstance(f, ContextFilter) for f in logger.filters):
        logger.addFilter(ContextFilter())

    if log_file is None and os.environ.get(LOG_DIR_ENV):
        log_file = str(Path(os.environ[LOG_DIR_ENV]) / "rounded_ass.log")
    if log_file:
        add_file_handler(log_file, level)

    return logger
