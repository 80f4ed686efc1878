"""
Playwright 会话实现

通过 CDP 连接到已启动的浏览器（如 `chrome --remote-debugging-port=9222`），
为流程步骤提供导航、定位与输入能力。
"""

import json
import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from .base import (
    AutomationSession,
    Element,
    ElementNotFoundError,
    LOCATOR_STRATEGIES,
    SessionError,
)

logger = logging.getLogger(__name__)


def build_selector(strategy: str, selector: str) -> str:
    """将定位策略转换为 Playwright 选择器"""
    if strategy == "id":
        return f"id={selector}"
    if strategy == "name":
        return f"[name={json.dumps(selector)}]"
    if strategy == "css":
        return f"css={selector}"
    raise ValueError(f"Unknown locator strategy: {strategy}")


class PlaywrightElement(Element):
    """Playwright 元素句柄包装"""

    def __init__(self, handle, selector: str, strategy: str):
        self._handle = handle
        self.selector = selector
        self.strategy = strategy

    async def fill(self, text: str) -> None:
        # fill 会先清空输入框
        await self._handle.fill(text)

    async def click(self) -> None:
        await self._handle.click()

    async def submit_key(self) -> None:
        await self._handle.press("Enter")

    def __repr__(self) -> str:
        return f"PlaywrightElement(strategy={self.strategy}, selector={self.selector})"


class PlaywrightSession(AutomationSession):
    """
    Playwright 自动化会话

    Attributes:
        endpoint: 浏览器 CDP 端点
    """

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self._playwright = None
        self._browser = None
        self._page = None

    @property
    def is_connected(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    @classmethod
    async def connect(cls, endpoint: str) -> "PlaywrightSession":
        """连接到浏览器并准备一个页面"""
        session = cls(endpoint)
        try:
            session._playwright = await async_playwright().start()
            session._browser = await session._playwright.chromium.connect_over_cdp(endpoint)

            contexts = session._browser.contexts
            context = contexts[0] if contexts else await session._browser.new_context()
            pages = context.pages
            session._page = pages[-1] if pages else await context.new_page()
        except PlaywrightError as e:
            await session.close()
            raise SessionError(f"无法连接到浏览器: {endpoint}", {"error": str(e)}) from e

        logger.info(f"已连接自动化会话: {endpoint}")
        return session

    def _require_page(self):
        if self._page is None:
            raise SessionError("会话未连接", {"endpoint": self.endpoint})
        return self._page

    async def navigate(self, url: str) -> None:
        page = self._require_page()
        try:
            await page.goto(url)
        except PlaywrightError as e:
            raise SessionError(f"导航失败: {url}", {"error": str(e)}) from e

    async def maximize(self) -> None:
        page = self._require_page()
        try:
            width, height = await page.evaluate(
                "() => [window.screen.availWidth, window.screen.availHeight]"
            )
            await page.set_viewport_size({"width": int(width), "height": int(height)})
        except PlaywrightError as e:
            raise SessionError("最大化视口失败", {"error": str(e)}) from e

    async def find(self, selector: str) -> Element:
        page = self._require_page()
        if not selector:
            raise ElementNotFoundError(selector)

        for strategy in LOCATOR_STRATEGIES:
            handle = await self._query(page, build_selector(strategy, selector))
            if handle is not None:
                return PlaywrightElement(handle, selector, strategy)

        raise ElementNotFoundError(selector, {"strategies": list(LOCATOR_STRATEGIES)})

    async def _query(self, page, playwright_selector: str) -> Optional[object]:
        try:
            return await page.query_selector(playwright_selector)
        except PlaywrightError as e:
            # 非法 CSS 选择器等，视为该策略未命中
            logger.debug(f"选择器查询失败: {playwright_selector}, error: {e}")
            return None

    async def close(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"关闭浏览器连接失败: {e}")
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self._page = None

    def __repr__(self) -> str:
        return f"PlaywrightSession(endpoint={self.endpoint}, connected={self.is_connected})"


__all__ = ["PlaywrightSession", "PlaywrightElement", "build_selector"]
