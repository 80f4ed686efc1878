"""
API 路由模块

提供各功能模块的路由定义。
"""

from .workflows import router as workflows_router
from .web import router as web_router

__all__ = [
    "workflows_router",
    "web_router",
]
