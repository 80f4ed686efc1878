"""
流程相关 API 路由

提供流程运行与校验接口。
"""

import logging
from fastapi import APIRouter

from taskflow.api.schemas import (
    ErrorResponse,
    RunningWorkflowsResponse,
    WorkflowRequest,
    WorkflowRunResponse,
    WorkflowValidateResponse,
)
from taskflow.flows import FlowEngine, Workspace


logger = logging.getLogger(__name__)
router = APIRouter()


def _load(engine: FlowEngine, request: WorkflowRequest):
    if request.encoded:
        return engine.load(request.script)
    return engine.load_text(request.script)


@router.post(
    "/run",
    response_model=WorkflowRunResponse,
    responses={
        400: {"model": ErrorResponse, "description": "脚本无法解码或流程图不合法"},
    },
    summary="运行流程",
    description="解析脚本并从入口步骤开始执行，返回运行摘要",
)
async def run_workflow(request: WorkflowRequest):
    """
    运行流程

    - **script**: 流程脚本
    - **encoded**: 脚本是否为 Base64 编码
    """
    from taskflow.api.app import get_engine

    engine = get_engine()
    flow = _load(engine, request)
    logger.info(f"[API] 收到流程运行请求: entry={flow.entry}, steps={len(flow.registry)}")

    async with Workspace() as workspace:
        summary = await engine.execute(flow, workspace)

    logger.info(f"[API] 流程运行完成: run_id={summary.run_id}, steps={len(summary.results)}")
    return WorkflowRunResponse(**summary.to_dict())


@router.post(
    "/validate",
    response_model=WorkflowValidateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "脚本无法解码或流程图不合法"},
    },
    summary="校验流程",
    description="只解析脚本并检查入口步骤，不执行",
)
async def validate_workflow(request: WorkflowRequest):
    """校验流程"""
    from taskflow.api.app import get_engine

    flow = _load(get_engine(), request)
    return WorkflowValidateResponse(**flow.describe())


@router.get(
    "/running",
    response_model=RunningWorkflowsResponse,
    summary="运行中的流程",
    description="列出当前正在执行的流程快照",
)
async def list_running_workflows():
    """列出运行中的流程"""
    from taskflow.api.app import get_engine

    flows = get_engine().list_running()
    return RunningWorkflowsResponse(total=len(flows), flows=flows)
