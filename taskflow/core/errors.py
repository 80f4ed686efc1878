"""
引擎异常模块

定义会中止整个运行的异常类型。步骤级别的问题不在此列，
它们以 Outcome.FAILURE 的形式交给脚本中的边去处理。
"""


class EngineError(Exception):
    """引擎基础异常"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DecodeError(EngineError):
    """脚本传输编码无法解码"""

    def __init__(self, message: str = "脚本解码失败", details: dict = None):
        super().__init__(message, details)


class GrammarError(EngineError):
    """语法模式编译失败"""

    def __init__(self, pattern: str, details: dict = None):
        super().__init__(f"语法模式编译失败: {pattern}", details)
        self.pattern = pattern


class FlowGraphError(EngineError):
    """流程图结构不合法（入口节点缺失或不唯一）"""

    def __init__(self, message: str, candidates: list = None, details: dict = None):
        details = dict(details or {})
        if candidates is not None:
            details.setdefault("candidates", list(candidates))
        super().__init__(message, details)
        self.candidates = list(candidates or [])


class FlowLimitError(EngineError):
    """运行步数超过上限"""

    def __init__(self, max_steps: int, details: dict = None):
        super().__init__(f"运行步数超过上限: {max_steps}", details)
        self.max_steps = max_steps


__all__ = [
    "EngineError",
    "DecodeError",
    "GrammarError",
    "FlowGraphError",
    "FlowLimitError",
]
