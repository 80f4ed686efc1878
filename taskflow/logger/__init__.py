"""
日志系统模块

基于标准库 logging，提供日志配置与格式化器。

使用示例:
```python
from taskflow.logger import setup_logging, LogFormat

setup_logging(level="DEBUG", format=LogFormat.DETAILED)
```

执行日志（每次运行的步骤记录）写入 `taskflow.execution` 记录器，
并带有 run_id 字段。
"""

from .config import (
    ROOT_LOGGER_NAME,
    EXECUTION_LOGGER_NAME,
    LogFormat,
    setup_logging,
    configure_from_settings,
)

from .formatters import (
    BaseFormatter,
    SimpleFormatter,
    DetailedFormatter,
    JSONFormatter,
    FormatterFactory,
    get_formatter,
)

__all__ = [
    # Config
    "ROOT_LOGGER_NAME",
    "EXECUTION_LOGGER_NAME",
    "LogFormat",
    "setup_logging",
    "configure_from_settings",
    # Formatters
    "BaseFormatter",
    "SimpleFormatter",
    "DetailedFormatter",
    "JSONFormatter",
    "FormatterFactory",
    "get_formatter",
]
