"""测试公共夹具"""
import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI 会给 rounded_ass 日志器挂载处理器并关闭传播，测试结束后恢复，保证 caplog 可用"""
    logger = logging.getLogger("rounded_ass")
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
