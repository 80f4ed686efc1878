"""
装饰类步骤

delay / concurrent 目前是独立节点，只记录日志并返回成功，
不会改变相邻步骤的执行方式。
"""

from taskflow.config import EngineSettings
from taskflow.flows.context import Workspace
from taskflow.flows.parsers.params import extract_int
from .base import FlowStep, Outcome, StepCategory, StepFactory


class DecorateStep(FlowStep):
    """装饰类步骤基类"""

    category = StepCategory.DECORATE.value


@StepFactory.register
class DelayStep(DecorateStep):
    """
    延迟装饰

    Attributes:
        front_time: 前置延迟（毫秒）
        back_time: 后置延迟（毫秒）
    """

    kind = "delay"

    def __init__(self, step_id: str, front_time: int = 0, back_time: int = 0):
        super().__init__(step_id)
        self.front_time = front_time
        self.back_time = back_time

    @classmethod
    def from_parameters(cls, step_id: str, raw_parameters: str, settings: EngineSettings) -> "DelayStep":
        return cls(
            step_id,
            front_time=extract_int(raw_parameters, "front_time") or 0,
            back_time=extract_int(raw_parameters, "back_time") or 0,
        )

    async def execute(self, workspace: Workspace) -> Outcome:
        workspace.log(f"执行 delay: front={self.front_time}ms, back={self.back_time}ms")
        return Outcome.SUCCESS


@StepFactory.register
class ConcurrentStep(DecorateStep):
    """并发装饰（占位，步骤仍按顺序执行）"""

    kind = "concurrent"

    async def execute(self, workspace: Workspace) -> Outcome:
        workspace.log("执行 concurrent")
        return Outcome.SUCCESS


__all__ = ["DecorateStep", "DelayStep", "ConcurrentStep"]
