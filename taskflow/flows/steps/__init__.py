"""
流程步骤模块

提供各类流程步骤的实现。
"""

from .base import (
    StepCategory,
    Outcome,
    StepResult,
    FlowStep,
    PassThroughStep,
    StepFactory,
    StepRegistry,
)

from .control import HeadStep, EndStep, SleepStep, TimingStep, ScheduleError
from .operate import (
    LAST_COMPONENT_VARIABLE,
    InitWebStep,
    OpenWebStep,
    InputStringStep,
    PressButtonStep,
    SummitStep,
)
from .decorate import DelayStep, ConcurrentStep

__all__ = [
    # Base
    "StepCategory",
    "Outcome",
    "StepResult",
    "FlowStep",
    "PassThroughStep",
    "StepFactory",
    "StepRegistry",
    # Control
    "HeadStep",
    "EndStep",
    "SleepStep",
    "TimingStep",
    "ScheduleError",
    # Operate
    "LAST_COMPONENT_VARIABLE",
    "InitWebStep",
    "OpenWebStep",
    "InputStringStep",
    "PressButtonStep",
    "SummitStep",
    # Decorate
    "DelayStep",
    "ConcurrentStep",
]
