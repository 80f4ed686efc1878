"""
FastAPI 应用模块

宿主进程通过 HTTP 调用流程引擎的入口。
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from taskflow import __version__
from taskflow.api.schemas import HealthResponse
from taskflow.api.routes import workflows, web
from taskflow.core.errors import EngineError
from taskflow.core.result import Error

logger = logging.getLogger(__name__)

# 全局引擎实例
_engine = None


def get_engine():
    """获取全局流程引擎实例"""
    global _engine
    if _engine is None:
        from taskflow.config import get_config
        from taskflow.flows import FlowEngine

        _engine = FlowEngine(get_config().engine)
    return _engine


def reset_engine() -> None:
    """重置全局引擎（配置变更后调用）"""
    global _engine
    _engine = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    from taskflow.config import get_config
    from taskflow.logger import configure_from_settings

    config = get_config()
    configure_from_settings(config.log)
    logger.info(f"taskflow 服务启动中... 会话端点: {config.engine.webdriver_url}")

    yield

    logger.info("taskflow 服务关闭中...")
    reset_engine()


# 创建 FastAPI 应用
app = FastAPI(
    title="taskflow",
    description="流程图脚本执行引擎",
    version=__version__,
    lifespan=lifespan,
)

# 配置 CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(workflows.router, prefix="/api/v1/workflows", tags=["Workflows"])
app.include_router(web.router, prefix="/api/v1", tags=["Web"])


# ==================== 健康检查 ====================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """健康检查"""
    return HealthResponse(
        status="healthy",
        version=__version__,
        running_flows=len(get_engine().running_flows),
    )


# ==================== 错误处理 ====================

@app.exception_handler(EngineError)
async def engine_exception_handler(request: Request, exc: EngineError):
    """引擎异常：脚本或流程图问题，返回 400"""
    error = Error.from_exception(exc)
    logger.warning(f"流程请求失败: {error.code} {error.message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": error.code,
            "message": error.message,
            "details": error.details,
            "code": error.exception_type,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """全局异常处理器"""
    logger.error(f"未处理的异常: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "服务器内部错误",
            "details": {"type": type(exc).__name__},
        },
    )


# ==================== 启动 ====================

def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    return app


def serve(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """启动 HTTP 服务"""
    import uvicorn
    from taskflow.config import get_config

    server = get_config().server
    uvicorn.run(
        "taskflow.api.app:app",
        host=host or server.host,
        port=port or server.port,
        reload=server.reload,
    )


if __name__ == "__main__":
    serve()
