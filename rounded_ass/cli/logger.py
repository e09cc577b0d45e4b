"""
命令行日志配置

控制台使用 colorlog 彩色输出；文件输出复用 utils.logger 在包根日志器上挂载的滚动文件处理器。
"""
import logging
from typing import Optional

import colorlog

from ..utils.logger import PACKAGE_LOGGER, add_file_handler

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def _is_console_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_format: Optional[str] = None
) -> logging.Logger:
    """
    配置命令行日志

    重复调用时只替换控制台处理器，已挂载的文件处理器保持不变。

    Args:
        name: 日志器名称
        level: 日志级别
        log_file: 日志文件路径（可选）
        log_format: 控制台日志格式（可选）

    Returns:
        配置好的日志器
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    logger.propagate = False

    for handler in [h for h in logger.handlers if _is_console_handler(h)]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = colorlog.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        log_format or '%(log_color)s%(levelname)-8s%(reset)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        log_colors=LOG_COLORS,
    ))
    logger.addHandler(console_handler)

    # 文件记录所有级别
    if log_file:
        add_file_handler(log_file, level=logging.DEBUG)

    return logger
