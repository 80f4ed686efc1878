"""
流程脚本解析器

脚本是 Base64 编码的 Mermaid 风格流程图文本，包含两类声明：

    ct001["name: head, type: control"]
    op001["name: init_web, type: operate, para: { url:'http://localhost:9222' }"]
    ct001 -->|success| op001

解析不是完整的语法分析：两个模式各自在全文中匹配，
未匹配的文本直接跳过。
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import List, Tuple

from taskflow.core.errors import DecodeError, GrammarError

logger = logging.getLogger(__name__)


STEP_PATTERN_TEXT = (
    r'(\w+)\["\s*name:\s*([\w\s]+?)\s*,\s*type:\s*(\w+)'
    r'(?:\s*,\s*para:\s*(\{[^"]*\}))?\s*"\]'
)
# 目标节点使用前瞻匹配，链式写法 A --> B --> C 中的 B 仍可作为下一条边的起点
EDGE_PATTERN_TEXT = (
    r'(\w+)(?:\["[^"]*"\])?\s*-->\s*\|\s*(\w+)\s*\|\s*(?=(\w+))'
)


def _compile(pattern: str) -> "re.Pattern":
    try:
        return re.compile(pattern)
    except re.error as e:
        raise GrammarError(pattern, {"error": str(e)}) from e


STEP_PATTERN = _compile(STEP_PATTERN_TEXT)
EDGE_PATTERN = _compile(EDGE_PATTERN_TEXT)


@dataclass(frozen=True)
class StepRecord:
    """步骤声明"""
    id: str
    category: str
    kind: str
    raw_parameters: str = ""


@dataclass(frozen=True)
class EdgeRecord:
    """边声明"""
    source_id: str
    target_id: str
    outcome_label: str


@dataclass
class ParsedScript:
    """解析结果"""
    steps: List[StepRecord] = field(default_factory=list)
    edges: List[EdgeRecord] = field(default_factory=list)

    @property
    def step_ids(self) -> List[str]:
        return [step.id for step in self.steps]


def encode_script(text: str) -> str:
    """将流程文本编码为传输格式"""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_script(raw: str) -> str:
    """
    解码传输格式的脚本

    Raises:
        DecodeError: Base64 格式错误或内容不是 UTF-8
    """
    if raw is None:
        raise DecodeError("脚本为空")
    try:
        data = base64.b64decode("".join(raw.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("脚本不是合法的 Base64", {"error": str(e)}) from e
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError("脚本内容不是 UTF-8 文本", {"error": str(e)}) from e


def match_steps(text: str) -> List[StepRecord]:
    """匹配全部步骤声明"""
    steps = []
    for match in STEP_PATTERN.finditer(text):
        step_id, kind, category, para = match.groups()
        steps.append(StepRecord(
            id=step_id,
            category=category,
            kind=kind.strip(),
            raw_parameters=para or "",
        ))
    return steps


def match_edges(text: str) -> List[Tuple[str, str, str]]:
    """匹配全部边声明，返回 (source, label, target)"""
    return [match.groups() for match in EDGE_PATTERN.finditer(text)]


def parse_text(text: str) -> ParsedScript:
    """
    解析已解码的流程文本

    引用了未声明步骤的边会被丢弃。

    Args:
        text: 流程文本

    Returns:
        ParsedScript: 步骤与边
    """
    steps = match_steps(text)
    known_ids = {step.id for step in steps}

    edges = []
    for source, label, target in match_edges(text):
        if source not in known_ids or target not in known_ids:
            logger.debug(f"丢弃引用未知步骤的边: {source} -->|{label}| {target}")
            continue
        edges.append(EdgeRecord(source_id=source, target_id=target, outcome_label=label))

    return ParsedScript(steps=steps, edges=edges)


def parse_script(raw: str) -> ParsedScript:
    """解码并解析流程脚本"""
    return parse_text(decode_script(raw))


__all__ = [
    "STEP_PATTERN",
    "EDGE_PATTERN",
    "StepRecord",
    "EdgeRecord",
    "ParsedScript",
    "encode_script",
    "decode_script",
    "match_steps",
    "match_edges",
    "parse_text",
    "parse_script",
]
