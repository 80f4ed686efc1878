"""
流程引擎核心模块

负责加载脚本、构建步骤注册表与流程图，并从唯一的入口步骤开始，
按每一步的结果沿带标签的边逐步执行。
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from taskflow.config import EngineSettings, get_config
from taskflow.core.errors import EngineError, FlowLimitError
from taskflow.core.result import Error, FlowResult, Result
from .context import Workspace
from .graph import FlowGraph
from .parsers import ParsedScript, parse_script, parse_text
from .steps import StepRegistry, StepResult

logger = logging.getLogger(__name__)


@dataclass
class Flow:
    """已加载的流程：步骤注册表 + 流程图 + 入口"""
    script: ParsedScript
    registry: StepRegistry
    graph: FlowGraph
    entry: str

    def describe(self) -> Dict[str, Any]:
        return {
            "entry": self.entry,
            "steps": len(self.registry),
            "edges": self.graph.edge_count(),
            "step_ids": self.graph.nodes,
        }


@dataclass
class RunSummary:
    """
    运行摘要

    Attributes:
        run_id: 运行 ID
        entry: 入口步骤
        results: 每一步的执行记录（按执行顺序）
        log: 本次运行的全部执行日志
        variables: 运行结束时的变量
        duration_ms: 总耗时
    """
    run_id: str
    entry: str
    results: List[StepResult] = field(default_factory=list)
    log: List[str] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)
    duration_ms: int = 0

    @property
    def visited(self) -> List[str]:
        return [result.step_id for result in self.results]

    @property
    def last_step(self) -> Optional[str]:
        return self.results[-1].step_id if self.results else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "entry": self.entry,
            "visited": self.visited,
            "results": [result.to_dict() for result in self.results],
            "log": list(self.log),
            "variables": dict(self.variables),
            "duration_ms": self.duration_ms,
        }


class FlowEngine:
    """
    流程引擎

    Attributes:
        settings: 引擎设置
    """

    def __init__(self, settings: EngineSettings = None):
        self.settings = settings or get_config().engine
        self._running: Dict[str, Workspace] = {}

    @property
    def running_flows(self) -> Dict[str, Workspace]:
        """获取运行中的流程"""
        return {k: v for k, v in self._running.items() if v.is_running}

    # ========== 加载 ==========

    def load(self, script: str) -> Flow:
        """
        解码并加载流程脚本

        Raises:
            DecodeError: 脚本无法解码
            FlowGraphError: 入口步骤缺失或不唯一
        """
        return self.build(parse_script(script))

    def load_text(self, text: str) -> Flow:
        """加载未编码的流程文本"""
        return self.build(parse_text(text))

    def build(self, parsed: ParsedScript) -> Flow:
        """由解析结果构建步骤注册表与流程图"""
        registry = StepRegistry(self.settings)
        for record in parsed.steps:
            registry.register(record.id, record.category, record.kind, record.raw_parameters)

        graph = FlowGraph.from_records(parsed.step_ids, parsed.edges)
        entry = graph.entry_node()

        logger.info(
            f"流程加载完成: {len(registry)} 个步骤, {graph.edge_count()} 条边, 入口 {entry}"
        )
        return Flow(script=parsed, registry=registry, graph=graph, entry=entry)

    # ========== 执行 ==========

    async def execute(self, flow: Flow, workspace: Workspace = None) -> RunSummary:
        """
        执行流程

        每次只有一条活动路径：执行当前步骤，按结果选出至多一个后继步骤，
        没有匹配的边时路径结束。

        Args:
            flow: 已加载的流程
            workspace: 流程上下文（可选，不传时新建）

        Returns:
            RunSummary: 运行摘要

        Raises:
            FlowLimitError: 执行步数超过 max_steps
        """
        workspace = workspace or Workspace()
        summary = RunSummary(run_id=workspace.run_id, entry=flow.entry)
        queue = deque([flow.entry])

        workspace.start()
        self._running[workspace.run_id] = workspace
        logger.info(f"[{workspace.run_id}] 开始执行流程，入口 {flow.entry}")

        try:
            while queue:
                if len(summary.results) >= self.settings.max_steps:
                    raise FlowLimitError(
                        self.settings.max_steps,
                        {"last_step": summary.last_step},
                    )

                step_id = queue.popleft()
                step = flow.registry.get(step_id)
                if step is None:
                    continue

                logger.debug(f"[{workspace.run_id}] 执行步骤: {step_id}")
                start_time = datetime.now(timezone.utc)
                started = time.monotonic()

                outcome = await step.execute(workspace)
                next_step = flow.graph.route(step_id, outcome.edge_label)

                summary.results.append(StepResult(
                    step_id=step_id,
                    kind=step.kind,
                    outcome=outcome,
                    start_time=start_time,
                    duration_ms=int((time.monotonic() - started) * 1000),
                    next_step=next_step,
                ))

                if next_step is not None:
                    queue.append(next_step)

            workspace.complete()

        except Exception as e:
            workspace.fail(e)
            raise
        finally:
            self._running.pop(workspace.run_id, None)
            summary.log = list(workspace.transcript)
            summary.variables = dict(workspace.variables)
            summary.duration_ms = workspace.duration_ms

        logger.info(
            f"[{workspace.run_id}] 流程执行完成: {len(summary.results)} 步, "
            f"最后一步 {summary.last_step}"
        )
        return summary

    async def run(self, script: str) -> RunSummary:
        """加载并执行脚本，运行结束时释放会话"""
        flow = self.load(script)
        async with Workspace() as workspace:
            return await self.execute(flow, workspace)

    def list_running(self) -> List[Dict[str, Any]]:
        """列出运行中的执行"""
        return [ws.snapshot() for ws in self.running_flows.values()]


# ========== 便捷函数 ==========

async def run_flow(script: str, settings: EngineSettings = None) -> RunSummary:
    """
    执行流程（异步便捷函数）

    Args:
        script: Base64 编码的流程脚本
        settings: 引擎设置

    Returns:
        RunSummary: 运行摘要
    """
    engine = FlowEngine(settings)
    return await engine.run(script)


def run(script: str, settings: EngineSettings = None) -> RunSummary:
    """
    执行流程（同步入口，阻塞调用线程直到运行结束）

    Raises:
        EngineError: 解码失败、流程图不合法或超过步数上限
    """
    return asyncio.run(run_flow(script, settings))


def run_workflow(script: str, settings: EngineSettings = None) -> FlowResult:
    """
    宿主命令入口，不抛出引擎异常

    Returns:
        Result: 成功时 data 为运行摘要字典
    """
    try:
        summary = run(script, settings)
    except EngineError as e:
        logger.error(f"流程执行失败: {e}")
        return Result.fail(Error.from_exception(e))
    return Result.ok(summary.to_dict())


__all__ = [
    "Flow",
    "RunSummary",
    "FlowEngine",
    "run_flow",
    "run",
    "run_workflow",
]
