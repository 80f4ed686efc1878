"""
日志配置模块

根据 LogSettings 配置 taskflow 的根日志记录器。
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from .formatters import FormatterFactory


ROOT_LOGGER_NAME = "taskflow"
EXECUTION_LOGGER_NAME = "taskflow.execution"


class LogFormat(Enum):
    """日志格式"""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


def setup_logging(
    level: str = "INFO",
    format: LogFormat = LogFormat.SIMPLE,
    fmt: Optional[str] = None,
    date_format: Optional[str] = None,
    file_path: Optional[str] = None,
) -> logging.Logger:
    """
    配置日志记录器

    重复调用时会替换之前安装的处理器，不会重复输出。

    Args:
        level: 日志级别名称
        format: 日志格式
        fmt: SIMPLE 格式使用的格式串
        date_format: SIMPLE 格式使用的时间格式
        file_path: 日志文件路径（可选）

    Returns:
        配置好的 taskflow 根日志记录器
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_taskflow_handler", False):
            logger.removeHandler(handler)
            handler.close()

    if format == LogFormat.SIMPLE:
        formatter = FormatterFactory.create("simple", fmt=fmt, datefmt=date_format)
    else:
        formatter = FormatterFactory.create(format.value)

    handlers = [logging.StreamHandler()]
    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._taskflow_handler = True
        logger.addHandler(handler)

    return logger


def configure_from_settings(settings) -> logging.Logger:
    """从 config.LogSettings 配置日志"""
    return setup_logging(
        level=settings.level.value,
        fmt=settings.format,
        date_format=settings.date_format,
        file_path=settings.file_path,
    )


__all__ = [
    "ROOT_LOGGER_NAME",
    "EXECUTION_LOGGER_NAME",
    "LogFormat",
    "setup_logging",
    "configure_from_settings",
]
