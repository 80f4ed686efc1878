"""
流程执行上下文

管理单次运行中的变量、执行日志与自动化会话。
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from taskflow.browser.base import AutomationSession
from taskflow.logger.config import EXECUTION_LOGGER_NAME

logger = logging.getLogger(__name__)
execution_logger = logging.getLogger(EXECUTION_LOGGER_NAME)


class FlowExecutionState(Enum):
    """流程执行状态"""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Workspace:
    """
    流程执行上下文

    每次运行创建一个。会话由 init_web 步骤放入、end 步骤关闭；
    作为异步上下文管理器使用时，退出时会关闭仍被持有的会话。

    Attributes:
        run_id: 运行 ID
        variables: 流程变量（字符串到字符串）
        execution_log: 执行日志（只追加，仅 end 步骤清空）
        transcript: 本次运行的全部日志（不会被清空）
        state: 执行状态
    """

    def __init__(self, run_id: str = None):
        self.run_id = run_id or f"run-{uuid.uuid4().hex[:8]}"
        self.variables: Dict[str, str] = {}
        self.execution_log: List[str] = []
        self.transcript: List[str] = []
        self.state = FlowExecutionState.IDLE
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.error: Optional[Dict[str, Any]] = None
        self._session: Optional[AutomationSession] = None

    # ========== 变量 ==========

    def get_variable(self, name: str, default: str = None) -> Optional[str]:
        """获取变量"""
        return self.variables.get(name, default)

    def set_variable(self, name: str, value: str) -> None:
        """设置变量"""
        self.variables[name] = str(value)

    def has_variable(self, name: str) -> bool:
        """检查变量是否存在"""
        return name in self.variables

    # ========== 执行日志 ==========

    def log(self, message: str) -> None:
        """追加一条执行日志"""
        self.execution_log.append(message)
        self.transcript.append(message)
        execution_logger.info(f"[{self.run_id}] {message}", extra={"run_id": self.run_id})

    def clear(self) -> None:
        """清空变量与执行日志（transcript 保留）"""
        self.variables.clear()
        self.execution_log.clear()

    # ========== 会话 ==========

    @property
    def session(self) -> Optional[AutomationSession]:
        return self._session

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def set_session(self, session: AutomationSession) -> None:
        """
        持有新的会话

        已持有会话时不允许替换，旧会话必须先关闭。
        """
        if self._session is not None and self._session is not session:
            raise RuntimeError("Workspace 已持有会话，请先关闭")
        self._session = session

    async def close_session(self) -> bool:
        """关闭并释放会话，返回是否确实关闭了会话"""
        session, self._session = self._session, None
        if session is None:
            return False
        try:
            await session.close()
        except Exception as e:
            logger.warning(f"[{self.run_id}] 关闭会话失败: {e}")
        return True

    async def __aenter__(self) -> "Workspace":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if await self.close_session():
            logger.info(f"[{self.run_id}] 运行结束时释放了未关闭的会话")

    # ========== 状态 ==========

    @property
    def is_running(self) -> bool:
        return self.state is FlowExecutionState.RUNNING

    @property
    def duration_ms(self) -> int:
        """已运行时间（毫秒），运行结束后固定"""
        if not self.start_time:
            return 0
        delta = (self.end_time or datetime.now(timezone.utc)) - self.start_time
        return int(delta.total_seconds() * 1000)

    def start(self) -> None:
        self.start_time = datetime.now(timezone.utc)
        self.end_time = None
        self.state = FlowExecutionState.RUNNING

    def _finish(self, state: FlowExecutionState) -> None:
        self.end_time = datetime.now(timezone.utc)
        self.state = state

    def complete(self) -> None:
        self._finish(FlowExecutionState.COMPLETED)

    def fail(self, error: Exception) -> None:
        self._finish(FlowExecutionState.FAILED)
        self.error = {"type": type(error).__name__, "message": str(error)}

    def snapshot(self) -> Dict[str, Any]:
        """获取上下文快照"""
        return {
            "run_id": self.run_id,
            "state": self.state.value,
            "variables": self.variables.copy(),
            "log": list(self.execution_log),
            "transcript": list(self.transcript),
            "has_session": self.has_session,
            "duration_ms": self.duration_ms,
            "error": self.error,
        }

    def __repr__(self) -> str:
        return (
            f"Workspace(run_id={self.run_id}, "
            f"state={self.state.value}, "
            f"log={len(self.execution_log)})"
        )


__all__ = ["FlowExecutionState", "Workspace"]
