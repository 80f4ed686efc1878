"""
流程相关 API 数据模型

提供流程运行、校验与网页抓取的数据模型。
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class WorkflowRequest(BaseModel):
    """流程请求"""
    script: str = Field(..., min_length=1, description="流程脚本")
    encoded: bool = Field(True, description="脚本是否为 Base64 编码")


class StepResultModel(BaseModel):
    """单个步骤的执行记录"""
    step_id: str
    kind: str
    outcome: str
    start_time: datetime
    duration_ms: int
    next_step: Optional[str] = None


class WorkflowRunResponse(BaseModel):
    """流程运行响应"""
    run_id: str
    entry: str
    visited: List[str] = Field(default_factory=list)
    results: List[StepResultModel] = Field(default_factory=list)
    log: List[str] = Field(default_factory=list)
    variables: Dict[str, str] = Field(default_factory=dict)
    duration_ms: int


class WorkflowSnapshot(BaseModel):
    """运行中流程的快照"""
    run_id: str
    state: str
    variables: Dict[str, str] = Field(default_factory=dict)
    log: List[str] = Field(default_factory=list)
    transcript: List[str] = Field(default_factory=list)
    has_session: bool = False
    duration_ms: int = 0
    error: Optional[Dict[str, str]] = None


class RunningWorkflowsResponse(BaseModel):
    """运行中流程列表"""
    total: int
    flows: List[WorkflowSnapshot] = Field(default_factory=list)


class WorkflowValidateResponse(BaseModel):
    """流程校验响应"""
    entry: str
    steps: int
    edges: int
    step_ids: List[str] = Field(default_factory=list)


class WebPageResponse(BaseModel):
    """网页抓取响应"""
    url: str
    body: str
