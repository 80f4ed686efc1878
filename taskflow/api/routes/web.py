"""
网页抓取 API 路由
"""

import logging
from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from taskflow.api.schemas import ErrorResponse, WebPageResponse
from taskflow.config import get_config
from taskflow.core.result import Error, ErrorCode
from taskflow.fetch import FetchError, fetch_text


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/web-page",
    response_model=WebPageResponse,
    responses={
        502: {"model": ErrorResponse, "description": "抓取失败"},
    },
    summary="获取网页内容",
)
async def get_web_page(url: str = Query(..., min_length=1, description="网页地址")):
    """获取网页内容"""
    try:
        body = await fetch_text(url, timeout=get_config().engine.fetch_timeout)
    except FetchError as e:
        logger.warning(f"[API] 网页抓取失败: {url}, error: {e}")
        error = Error.from_exception(e, ErrorCode.FETCH_ERROR)
        payload = ErrorResponse(
            error=error.code,
            message=error.message,
            details={"url": e.url, "status": e.status},
            code=error.exception_type,
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=payload.model_dump(mode="json"),
        )
    return WebPageResponse(url=url, body=body)
