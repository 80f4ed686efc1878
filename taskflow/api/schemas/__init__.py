"""
API Schemas 模块

提供 API 请求和响应的数据模型定义。
"""

from .common import ErrorResponse, HealthResponse
from .workflows import (
    WorkflowRequest,
    StepResultModel,
    WorkflowRunResponse,
    WorkflowValidateResponse,
    WorkflowSnapshot,
    RunningWorkflowsResponse,
    WebPageResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "HealthResponse",
    # Workflows
    "WorkflowRequest",
    "StepResultModel",
    "WorkflowRunResponse",
    "WorkflowValidateResponse",
    "WorkflowSnapshot",
    "RunningWorkflowsResponse",
    "WebPageResponse",
]
