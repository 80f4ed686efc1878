from __future__ import annotations

import logging

import pytest

from taskflow.browser.base import (
    AutomationSession,
    Element,
    ElementNotFoundError,
    LOCATOR_STRATEGIES,
    SessionError,
)
from taskflow.browser.client_factory import SessionFactory
from taskflow.config import reset_config
from taskflow.logger import ROOT_LOGGER_NAME


class FakeElement(Element):
    """Records every interaction instead of driving a page."""

    def __init__(self, selector: str, strategy: str):
        self.selector = selector
        self.strategy = strategy
        self.actions: list[tuple] = []

    async def fill(self, text: str) -> None:
        self.actions.append(("fill", text))

    async def click(self) -> None:
        self.actions.append(("click",))

    async def submit_key(self) -> None:
        self.actions.append(("submit",))


class FakeSession(AutomationSession):
    """In-memory session; `elements` maps selector -> strategy that resolves it."""

    def __init__(self, endpoint: str, elements: dict[str, str], fail_navigate: bool = False):
        self.endpoint = endpoint
        self.elements = elements
        self.fail_navigate = fail_navigate
        self.visited: list[str] = []
        self.found: list[FakeElement] = []
        self.maximized = False
        self.closed = False

    @property
    def is_connected(self) -> bool:
        return not self.closed

    async def navigate(self, url: str) -> None:
        if self.fail_navigate:
            raise SessionError(f"导航失败: {url}")
        self.visited.append(url)

    async def maximize(self) -> None:
        self.maximized = True

    async def find(self, selector: str) -> Element:
        strategy = self.elements.get(selector)
        if strategy not in LOCATOR_STRATEGIES:
            raise ElementNotFoundError(selector)
        element = FakeElement(selector, strategy)
        self.found.append(element)
        return element

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    """Session opener installed into SessionFactory for the duration of a test."""

    def __init__(self):
        self.sessions: list[FakeSession] = []
        self.elements = {"searchInput": "id", "q": "name", "button.submit": "css"}
        self.fail_open = False
        self.fail_navigate = False

    async def open(self, endpoint: str) -> FakeSession:
        if self.fail_open:
            raise SessionError(f"无法连接到浏览器: {endpoint}")
        session = FakeSession(endpoint, self.elements, fail_navigate=self.fail_navigate)
        self.sessions.append(session)
        return session


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch: pytest.MonkeyPatch):
    for name in ("TASKFLOW_MAX_STEPS", "TASKFLOW_WEBDRIVER_URL", "TASKFLOW_DEFAULT_CRON"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_browser():
    browser = FakeBrowser()
    SessionFactory.set_opener(browser.open)
    yield browser
    SessionFactory.set_opener(None)


@pytest.fixture(autouse=True)
def _drop_log_handlers():
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if getattr(handler, "_taskflow_handler", False):
            root.removeHandler(handler)
            handler.close()
