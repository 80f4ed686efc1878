"""
自动化会话抽象基类

定义流程步骤所使用的浏览器会话与页面元素的统一接口。
"""

from abc import ABC, abstractmethod
from typing import Tuple


class BrowserClientError(Exception):
    """浏览器客户端错误"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SessionError(BrowserClientError):
    """会话创建或会话操作失败"""
    pass


class ElementNotFoundError(BrowserClientError):
    """所有定位策略都未找到元素"""

    def __init__(self, selector: str, details: dict = None):
        super().__init__(f"元素未找到: {selector}", details)
        self.selector = selector


# 元素定位策略，按优先级排列
LOCATOR_STRATEGIES: Tuple[str, ...] = ("id", "name", "css")


class Element(ABC):
    """页面元素"""

    @abstractmethod
    async def fill(self, text: str) -> None:
        """清空后填入文本"""
        pass

    @abstractmethod
    async def click(self) -> None:
        """点击元素"""
        pass

    @abstractmethod
    async def submit_key(self) -> None:
        """在元素上按下回车（提交）"""
        pass


class AutomationSession(ABC):
    """
    自动化会话

    由 init_web 步骤创建并交给 Workspace 持有，由 end 步骤
    或 Workspace 退出时关闭。
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """是否已连接"""
        pass

    @abstractmethod
    async def navigate(self, url: str) -> None:
        """
        导航到 URL

        Args:
            url: 目标 URL
        """
        pass

    @abstractmethod
    async def maximize(self) -> None:
        """最大化视口"""
        pass

    @abstractmethod
    async def find(self, selector: str) -> Element:
        """
        按 id、name、css 的顺序定位元素，首个命中的策略生效

        Args:
            selector: 元素标识（id / name / CSS 选择器）

        Returns:
            定位到的元素

        Raises:
            ElementNotFoundError: 所有策略都未命中
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """关闭会话"""
        pass


__all__ = [
    "BrowserClientError",
    "SessionError",
    "ElementNotFoundError",
    "LOCATOR_STRATEGIES",
    "Element",
    "AutomationSession",
]
