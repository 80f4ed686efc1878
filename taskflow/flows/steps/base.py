"""
流程步骤基类模块

定义步骤结果、步骤抽象基类、步骤工厂与步骤注册表。
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type

from taskflow.config import EngineSettings
from taskflow.flows.context import Workspace

logger = logging.getLogger(__name__)


class StepCategory(str, Enum):
    """步骤类别"""
    CONTROL = "control"
    OPERATE = "operate"
    DECORATE = "decorate"


class Outcome(str, Enum):
    """步骤执行结果，值即路由时匹配的边标签"""
    SUCCESS = "success"
    FAILURE = "fail"
    DECORATE = "decorate"

    @property
    def edge_label(self) -> str:
        return self.value


@dataclass
class StepResult:
    """步骤执行记录"""
    step_id: str
    kind: str
    outcome: Outcome
    start_time: datetime
    duration_ms: int = 0
    next_step: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step_id,
            "kind": self.kind,
            "outcome": self.outcome.value,
            "start_time": self.start_time.isoformat(),
            "duration_ms": self.duration_ms,
            "next_step": self.next_step,
        }


class FlowStep(ABC):
    """
    流程步骤抽象基类

    每个步骤 ID 对应一个实例，解析时创建，运行中每次访问都复用。
    子类通过 category / kind 声明自己在工厂中的键。

    Attributes:
        id: 步骤 ID
    """

    category: str = ""
    kind: str = ""

    def __init__(self, step_id: str):
        self.id = step_id

    @classmethod
    def from_parameters(
        cls,
        step_id: str,
        raw_parameters: str,
        settings: EngineSettings,
    ) -> "FlowStep":
        """
        由参数文本构建步骤，需要参数的子类覆盖此方法

        Args:
            step_id: 步骤 ID
            raw_parameters: 原始参数文本
            settings: 引擎设置（参数缺省值）
        """
        return cls(step_id)

    @abstractmethod
    async def execute(self, workspace: Workspace) -> Outcome:
        """
        执行步骤

        Args:
            workspace: 流程上下文

        Returns:
            Outcome: 步骤结果
        """
        ...

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.id}, "
            f"category={self.category}, kind={self.kind})"
        )


class PassThroughStep(FlowStep):
    """
    未识别步骤

    记录自身的类别与名称后直接成功，保证未知步骤不会中断解析。
    """

    def __init__(self, step_id: str, category: str, kind: str):
        super().__init__(step_id)
        self.category = category
        self.kind = kind

    async def execute(self, workspace: Workspace) -> Outcome:
        workspace.log(f"执行未识别步骤 {self.id}: name={self.kind}, type={self.category}")
        return Outcome.SUCCESS


# ========== 步骤工厂 ==========

class StepFactory:
    """步骤工厂，按 (category, kind) 查找步骤类"""

    _step_classes: Dict[Tuple[str, str], Type[FlowStep]] = {}

    @classmethod
    def register(cls, step_class: Type[FlowStep]) -> Type[FlowStep]:
        """注册步骤类（可用作类装饰器）"""
        cls._step_classes[(step_class.category, step_class.kind)] = step_class
        return step_class

    @classmethod
    def get_class(cls, category: str, kind: str) -> Optional[Type[FlowStep]]:
        """获取步骤类"""
        return cls._step_classes.get((category, kind))

    @classmethod
    def create(
        cls,
        step_id: str,
        category: str,
        kind: str,
        raw_parameters: str = "",
        settings: EngineSettings = None,
    ) -> FlowStep:
        """创建步骤实例，未识别的组合返回 PassThroughStep"""
        step_class = cls.get_class(category, kind)
        if step_class is None:
            logger.debug(f"未识别的步骤 {category}:{kind}，使用 PassThroughStep")
            return PassThroughStep(step_id, category, kind)
        return step_class.from_parameters(step_id, raw_parameters or "", settings or EngineSettings())


# ========== 步骤注册表 ==========

class StepRegistry:
    """
    步骤注册表

    按步骤 ID 保存步骤实例。解析阶段填充，运行阶段只读。
    """

    def __init__(self, settings: EngineSettings = None):
        self.settings = settings or EngineSettings()
        self._steps: Dict[str, FlowStep] = {}

    def register(
        self,
        step_id: str,
        category: str,
        kind: str,
        raw_parameters: str = "",
    ) -> FlowStep:
        """构建并保存步骤，同一 ID 重复注册时后者覆盖前者"""
        if step_id in self._steps:
            logger.warning(f"步骤 ID 重复，覆盖之前的声明: {step_id}")
        step = StepFactory.create(step_id, category, kind, raw_parameters, self.settings)
        self._steps[step_id] = step
        return step

    def get(self, step_id: str) -> Optional[FlowStep]:
        return self._steps.get(step_id)

    def ids(self) -> List[str]:
        return list(self._steps)

    def __contains__(self, step_id: str) -> bool:
        return step_id in self._steps

    def __len__(self) -> int:
        return len(self._steps)


# ========== 步骤实现注册 ==========

# 导入具体步骤实现（模块导入时通过 StepFactory.register 完成注册）
from . import control, operate, decorate  # noqa: E402,F401


__all__ = [
    "StepCategory",
    "Outcome",
    "StepResult",
    "FlowStep",
    "PassThroughStep",
    "StepFactory",
    "StepRegistry",
]
