"""
流程引擎模块

解析 Base64 编码的流程图脚本并按步骤结果路由执行。

主要组件:
- FlowEngine: 流程执行引擎
- Workspace: 流程执行上下文
- FlowGraph: 带结果标签的流程图
- StepFactory / StepRegistry: 步骤创建与保存

使用示例:
    ```python
    from taskflow.flows import encode_script, run

    script = encode_script('''
        flowchart TD
            ct001["name: head, type: control"]
            ct002["name: sleep, type: control, para: { ms:'500' }"]
            ct003["name: end, type: control"]
            ct001 -->|always| ct002
            ct002 -->|success| ct003
    ''')
    summary = run(script)
    print(summary.visited)
    ```
"""

from .context import FlowExecutionState, Workspace
from .graph import ALWAYS_LABEL, FlowGraph
from .parsers import (
    StepRecord,
    EdgeRecord,
    ParsedScript,
    encode_script,
    decode_script,
    parse_script,
    parse_text,
    extract_param,
)
from .steps import (
    Outcome,
    StepCategory,
    StepResult,
    FlowStep,
    PassThroughStep,
    StepFactory,
    StepRegistry,
)
from .engine import Flow, FlowEngine, RunSummary, run_flow, run, run_workflow

__all__ = [
    # Context
    "FlowExecutionState",
    "Workspace",
    # Graph
    "ALWAYS_LABEL",
    "FlowGraph",
    # Parsers
    "StepRecord",
    "EdgeRecord",
    "ParsedScript",
    "encode_script",
    "decode_script",
    "parse_script",
    "parse_text",
    "extract_param",
    # Steps
    "Outcome",
    "StepCategory",
    "StepResult",
    "FlowStep",
    "PassThroughStep",
    "StepFactory",
    "StepRegistry",
    # Engine
    "Flow",
    "FlowEngine",
    "RunSummary",
    "run_flow",
    "run",
    "run_workflow",
]
