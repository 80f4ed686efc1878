"""
统一返回结果模块

宿主命令（run_workflow 等）不向调用方抛出引擎异常，
而是返回 Result：成功时带数据，失败时带错误码与错误信息。
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from .errors import (
    EngineError,
    DecodeError,
    GrammarError,
    FlowGraphError,
    FlowLimitError,
)


T = TypeVar('T')


class ErrorCode(str, Enum):
    """错误码"""
    SUCCESS = "success"
    UNKNOWN = "unknown"

    # 脚本与流程图
    DECODE_ERROR = "decode_error"
    GRAMMAR_ERROR = "grammar_error"
    FLOW_GRAPH_ERROR = "flow_graph_error"
    FLOW_LIMIT = "flow_limit"

    # 外部抓取
    FETCH_ERROR = "fetch_error"


_ENGINE_ERROR_CODES = {
    DecodeError: ErrorCode.DECODE_ERROR,
    GrammarError: ErrorCode.GRAMMAR_ERROR,
    FlowGraphError: ErrorCode.FLOW_GRAPH_ERROR,
    FlowLimitError: ErrorCode.FLOW_LIMIT,
}


@dataclass
class Error:
    """
    错误信息

    Attributes:
        code: ErrorCode 的值
        message: 可读的错误描述
        details: 附加信息（如入口候选步骤）
        exception_type: 原始异常类名
    """
    code: str
    message: str
    details: Optional[dict] = None
    exception_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "exception_type": self.exception_type,
        }

    @classmethod
    def from_exception(cls, exc: Exception, code: ErrorCode = None) -> 'Error':
        """由异常构建，未指定错误码时按异常类型推断"""
        if code is None:
            code = _ENGINE_ERROR_CODES.get(type(exc), ErrorCode.UNKNOWN)
        details = exc.details if isinstance(exc, EngineError) else None
        return cls(
            code=code.value,
            message=getattr(exc, "message", None) or str(exc),
            details=details or None,
            exception_type=type(exc).__name__,
        )


@dataclass
class Result(Generic[T]):
    """
    宿主命令返回值

    Attributes:
        success: 是否成功
        data: 返回数据（成功时）
        error: 错误信息（失败时）
    """
    success: bool
    data: Optional[T] = None
    error: Optional[Error] = None

    @classmethod
    def ok(cls, data: T = None) -> 'Result[T]':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: Error) -> 'Result[T]':
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        """转换为字典，省略为空的字段"""
        payload = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        return payload

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent, default=str)

    def is_error(self, code: ErrorCode = None) -> bool:
        """是否失败（可选地要求特定错误码）"""
        if self.success:
            return False
        if code is not None and self.error is not None:
            return self.error.code == code.value
        return True


# 流程执行结果，data 为 RunSummary.to_dict()
FlowResult = Result[dict]


__all__ = [
    "Result",
    "Error",
    "ErrorCode",
    "FlowResult",
]
