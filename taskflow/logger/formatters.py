"""
日志格式化模块

控制台使用 simple / detailed，需要被采集时使用 json。
执行日志记录会带有 run_id，三种格式都会把它带上。
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict


def _run_id(record: logging.LogRecord) -> str:
    return getattr(record, "run_id", "") or ""


class BaseFormatter(ABC):
    """日志格式化器基类"""

    @abstractmethod
    def format(self, record: logging.LogRecord) -> str:
        ...


class SimpleFormatter(BaseFormatter):
    """格式串格式化器，格式串与时间格式取自 LogSettings"""

    def __init__(self, fmt: str = None, datefmt: str = None):
        self._formatter = logging.Formatter(fmt or "%(message)s", datefmt)

    def format(self, record: logging.LogRecord) -> str:
        return self._formatter.format(record)


class DetailedFormatter(BaseFormatter):
    """带毫秒时间、记录器名与行号的格式化器"""

    def __init__(self, include_logger: bool = True, include_line: bool = True):
        self.include_logger = include_logger
        self.include_line = include_line
        self._exc_formatter = logging.Formatter()

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        head = f"{stamp} [{record.levelname:8}]"
        if self.include_logger:
            head += f" [{record.name}]"
        if self.include_line:
            head += f" [line {record.lineno}]"

        text = f"{head} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self._exc_formatter.formatException(record.exc_info)
        return text


class JSONFormatter(BaseFormatter):
    """每行一个 JSON 对象"""

    def __init__(self, extra_fields: Dict[str, Any] = None):
        self.extra_fields = dict(extra_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        run_id = _run_id(record)
        if run_id:
            entry["run_id"] = run_id
        entry.update(self.extra_fields)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry["error"] = f"{exc_type.__name__}: {exc_value}"

        return json.dumps(entry, ensure_ascii=False)


# ========== 格式化器工厂 ==========

class FormatterFactory:
    """按名称创建格式化器"""

    _formatters = {
        "simple": SimpleFormatter,
        "detailed": DetailedFormatter,
        "json": JSONFormatter,
    }

    @classmethod
    def create(cls, name: str, **kwargs) -> BaseFormatter:
        try:
            formatter_class = cls._formatters[name]
        except KeyError:
            raise ValueError(f"未知的日志格式: {name}") from None
        return formatter_class(**kwargs)


def get_formatter(name: str = "simple", **kwargs) -> BaseFormatter:
    """便捷函数：获取格式化器"""
    return FormatterFactory.create(name, **kwargs)


__all__ = [
    "BaseFormatter",
    "SimpleFormatter",
    "DetailedFormatter",
    "JSONFormatter",
    "FormatterFactory",
    "get_formatter",
]
