"""
步骤参数提取

从步骤声明的 para 文本中提取 `key: 'value'` 形式的参数。
"""

import re
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=64)
def _key_pattern(key: str) -> "re.Pattern":
    return re.compile(rf"(?<!\w){re.escape(key)}:\s*'([^']*)'")


def extract_param(blob: Optional[str], key: str) -> Optional[str]:
    """
    提取参数值

    Args:
        blob: 步骤的原始参数文本，如 "{ ms:'1000', url:'http://x' }"
        key: 参数名

    Returns:
        引号内的值；参数缺失、文本为空或格式不正确时返回 None
    """
    if not blob or not key:
        return None
    match = _key_pattern(key).search(blob)
    if match is None:
        return None
    return match.group(1)


def extract_int(blob: Optional[str], key: str) -> Optional[int]:
    """
    提取非负整数参数

    非数字文本视为缺失，由调用方回退到默认值。
    """
    value = extract_param(blob, key)
    if value is None:
        return None
    value = value.strip()
    if not value.isdigit():
        return None
    return int(value)


__all__ = ["extract_param", "extract_int"]
