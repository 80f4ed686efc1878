"""
自动化会话工厂

负责按端点创建新的自动化会话。每次调用都创建独立的会话，
会话的所有权交给调用方（Workspace）。
"""

from typing import Awaitable, Callable, Optional

from .base import AutomationSession

SessionOpener = Callable[[str], Awaitable[AutomationSession]]


async def _open_playwright_session(endpoint: str) -> AutomationSession:
    from .playwright_client import PlaywrightSession
    return await PlaywrightSession.connect(endpoint)


class SessionFactory:
    """
    会话工厂

    默认通过 Playwright 连接浏览器，可替换为其他实现（如测试桩）。
    """

    _opener: Optional[SessionOpener] = None

    @classmethod
    def set_opener(cls, opener: Optional[SessionOpener]) -> None:
        """设置会话创建函数，传入 None 恢复默认"""
        cls._opener = opener

    @classmethod
    async def open(cls, endpoint: str) -> AutomationSession:
        """
        打开新的自动化会话

        Args:
            endpoint: 会话端点

        Returns:
            自动化会话

        Raises:
            SessionError: 会话创建失败
        """
        opener = cls._opener or _open_playwright_session
        return await opener(endpoint)


async def open_session(endpoint: str) -> AutomationSession:
    """打开自动化会话（便捷函数）"""
    return await SessionFactory.open(endpoint)


__all__ = [
    "SessionOpener",
    "SessionFactory",
    "open_session",
]
