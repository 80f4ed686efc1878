"""
浏览器模块

提供流程步骤使用的自动化会话：
- AutomationSession / Element: 会话与元素接口
- PlaywrightSession: 基于 Playwright（CDP）的实现
- SessionFactory: 会话创建入口
"""

from .base import (
    AutomationSession,
    BrowserClientError,
    Element,
    ElementNotFoundError,
    LOCATOR_STRATEGIES,
    SessionError,
)
from .client_factory import SessionFactory, open_session

__all__ = [
    "AutomationSession",
    "BrowserClientError",
    "Element",
    "ElementNotFoundError",
    "LOCATOR_STRATEGIES",
    "SessionError",
    "SessionFactory",
    "open_session",
]
