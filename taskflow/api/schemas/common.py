"""
通用 API 数据模型

提供错误与健康检查的数据模型。
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorResponse(BaseModel):
    """错误响应"""
    error: str = Field(..., description="错误类型")
    message: str = Field(..., description="错误信息")
    details: Optional[Dict[str, Any]] = None
    code: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utc_now)


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = "healthy"
    version: str
    running_flows: int = 0
    timestamp: datetime = Field(default_factory=_utc_now)
