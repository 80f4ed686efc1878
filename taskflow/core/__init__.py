"""
核心模块

提供引擎异常与统一返回结果类型。
"""

from .errors import (
    EngineError,
    DecodeError,
    GrammarError,
    FlowGraphError,
    FlowLimitError,
)

from .result import (
    Result,
    Error,
    ErrorCode,
    FlowResult,
)

__all__ = [
    "EngineError",
    "DecodeError",
    "GrammarError",
    "FlowGraphError",
    "FlowLimitError",
    "Result",
    "Error",
    "ErrorCode",
    "FlowResult",
]
