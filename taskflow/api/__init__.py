"""
API 模块

提供流程引擎的 HTTP 接口。

包含:
- FastAPI 应用
- 流程相关接口 (workflows)
- 网页抓取接口 (web)
"""

from .app import app, create_app, get_engine, serve
from .schemas import (
    ErrorResponse,
    HealthResponse,
    WorkflowRequest,
    WorkflowRunResponse,
    WorkflowValidateResponse,
    WebPageResponse,
)

__all__ = [
    # App
    "app",
    "create_app",
    "get_engine",
    "serve",
    # Schemas
    "ErrorResponse",
    "HealthResponse",
    "WorkflowRequest",
    "WorkflowRunResponse",
    "WorkflowValidateResponse",
    "WebPageResponse",
]
