import logging

import pytest


@pytest.fixture(autouse=True)
def reset_app_logger():
    """每个测试结束后移除应用日志处理器，避免引用已关闭的输出流"""
    yield
    logger = logging.getLogger("site-hosts")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
