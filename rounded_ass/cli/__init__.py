"""
命令行接口模块
"""
from .commands import cli
from .logger import setup_logger

__all__ = ['cli', 'setup_logger']
