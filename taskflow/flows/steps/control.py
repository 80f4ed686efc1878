"""
控制类步骤

head / end / sleep / timing。
"""

import asyncio
import logging
import re
from datetime import datetime
from typing import Optional

from apscheduler.triggers.cron import CronTrigger

from taskflow.config import EngineSettings
from taskflow.flows.context import Workspace
from taskflow.flows.parsers.params import extract_int, extract_param
from .base import FlowStep, Outcome, StepCategory, StepFactory

logger = logging.getLogger(__name__)


class ScheduleError(Exception):
    """cron 表达式非法或没有下一次触发时间"""
    pass


# 6/7 段表达式各字段含义（秒在最前，年在最后）
CRON_FIELDS = ("second", "minute", "hour", "day", "month", "day_of_week", "year")

# 星期名，下标 0 为周日
DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

_NUMERIC_WEEKDAY = re.compile(r"(\*|\d+(?:-\d+)?)(?:/(\d+))?")


def weekday_field(field: str, sunday: int) -> str:
    """
    把星期字段中的数字改写为星期名

    APScheduler 的数字星期从周一 0 开始，这里按 cron 习惯解释：
    5 段 crontab 为 0-7（0 与 7 都是周日），6/7 段为 1-7（1 是周日）。
    已经是星期名的项原样保留。

    Args:
        field: 星期字段，如 "1-5"、"0,6"、"*/2"
        sunday: 代表周日的最小数字（0 或 1）

    Raises:
        ValueError: 数字超出范围或范围颠倒
    """
    highest = 7
    tokens = []
    for token in field.split(","):
        match = _NUMERIC_WEEKDAY.fullmatch(token)
        if match is None or (match.group(1) == "*" and match.group(2) is None):
            tokens.append(token)
            continue

        body, step = match.group(1), int(match.group(2) or 1)
        if body == "*":
            start, end = sunday, sunday + 6
        elif "-" in body:
            start, end = (int(value) for value in body.split("-"))
        else:
            start = int(body)
            end = highest if match.group(2) else start

        if step < 1 or not sunday <= start <= end <= highest:
            raise ValueError(f"星期字段超出范围: {token}")

        for value in range(start, end + 1, step):
            name = DAY_NAMES[(value - sunday) % 7]
            if name not in tokens:
                tokens.append(name)
    return ",".join(tokens)


def build_trigger(expression: str, timezone=None) -> CronTrigger:
    """
    解析 cron 表达式

    支持 5 段（标准 crontab）、6 段（带秒）与 7 段（带秒和年）。

    Raises:
        ScheduleError: 表达式非法
    """
    parts = (expression or "").split()
    try:
        if len(parts) == 5:
            parts[4] = weekday_field(parts[4], sunday=0)
            return CronTrigger.from_crontab(" ".join(parts), timezone=timezone)
        if len(parts) in (6, 7):
            parts[5] = weekday_field(parts[5], sunday=1)
            return CronTrigger(timezone=timezone, **dict(zip(CRON_FIELDS, parts)))
    except (ValueError, TypeError) as e:
        raise ScheduleError(f"非法的 cron 表达式: {expression} ({e})") from e
    raise ScheduleError(f"非法的 cron 表达式: {expression}")


def next_fire_time(expression: str, now: Optional[datetime] = None, timezone=None) -> datetime:
    """
    计算下一次触发时间

    Raises:
        ScheduleError: 表达式非法或已没有未来的触发时间
    """
    trigger = build_trigger(expression, timezone=timezone)
    now = now or datetime.now(trigger.timezone)
    fire_time = trigger.get_next_fire_time(None, now)
    if fire_time is None:
        raise ScheduleError(f"cron 表达式没有下一次触发时间: {expression}")
    return fire_time


@StepFactory.register
class HeadStep(FlowStep):
    """起始步骤"""

    category = StepCategory.CONTROL.value
    kind = "head"

    async def execute(self, workspace: Workspace) -> Outcome:
        workspace.log(f"执行 head: {self.id}")
        return Outcome.SUCCESS


@StepFactory.register
class EndStep(FlowStep):
    """结束步骤：关闭会话，清空变量与执行日志"""

    category = StepCategory.CONTROL.value
    kind = "end"

    async def execute(self, workspace: Workspace) -> Outcome:
        workspace.log(f"执行 end: {self.id}，清理工作区")
        await workspace.close_session()
        workspace.clear()
        return Outcome.SUCCESS


@StepFactory.register
class SleepStep(FlowStep):
    """
    等待步骤

    Attributes:
        ms: 等待时间（毫秒）
    """

    category = StepCategory.CONTROL.value
    kind = "sleep"

    def __init__(self, step_id: str, ms: int = 0):
        super().__init__(step_id)
        self.ms = ms

    @classmethod
    def from_parameters(cls, step_id: str, raw_parameters: str, settings: EngineSettings) -> "SleepStep":
        ms = extract_int(raw_parameters, "ms")
        return cls(step_id, ms if ms is not None else 0)

    async def execute(self, workspace: Workspace) -> Outcome:
        workspace.log(f"执行 sleep: {self.ms}ms")
        await asyncio.sleep(self.ms / 1000)
        return Outcome.SUCCESS


@StepFactory.register
class TimingStep(FlowStep):
    """
    定时步骤

    等待到 cron 表达式的下一次触发时间。表达式非法或
    没有未来的触发时间时立即失败。

    Attributes:
        cron: cron 表达式
    """

    category = StepCategory.CONTROL.value
    kind = "timing"

    def __init__(self, step_id: str, cron: str = "* * * * * *"):
        super().__init__(step_id)
        self.cron = cron

    @classmethod
    def from_parameters(cls, step_id: str, raw_parameters: str, settings: EngineSettings) -> "TimingStep":
        cron = extract_param(raw_parameters, "cron")
        return cls(step_id, cron if cron is not None else settings.default_cron)

    async def execute(self, workspace: Workspace) -> Outcome:
        try:
            fire_time = next_fire_time(self.cron)
        except ScheduleError as e:
            workspace.log(f"执行 timing 失败: {e}")
            return Outcome.FAILURE

        delay = (fire_time - datetime.now(fire_time.tzinfo)).total_seconds()
        workspace.log(f"执行 timing: {self.cron}，下一次触发 {fire_time.isoformat()}")
        await asyncio.sleep(max(delay, 0))
        return Outcome.SUCCESS


__all__ = [
    "ScheduleError",
    "DAY_NAMES",
    "weekday_field",
    "build_trigger",
    "next_fire_time",
    "HeadStep",
    "EndStep",
    "SleepStep",
    "TimingStep",
]
