"""
流程解析器模块

提供脚本解码、声明匹配与参数提取功能。
"""

from .params import extract_param, extract_int
from .script import (
    StepRecord,
    EdgeRecord,
    ParsedScript,
    encode_script,
    decode_script,
    parse_text,
    parse_script,
)

__all__ = [
    "extract_param",
    "extract_int",
    "StepRecord",
    "EdgeRecord",
    "ParsedScript",
    "encode_script",
    "decode_script",
    "parse_text",
    "parse_script",
]
