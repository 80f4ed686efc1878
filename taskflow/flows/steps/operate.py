"""
操作类步骤

通过 Workspace 持有的自动化会话操作浏览器。除 init_web 外，
所有步骤都要求已有会话，没有会话或操作出错时返回 FAILURE。
"""

import logging
from abc import abstractmethod
from typing import Optional

from taskflow.browser.base import AutomationSession, Element
from taskflow.browser.client_factory import SessionFactory
from taskflow.config import EngineSettings
from taskflow.flows.context import Workspace
from taskflow.flows.parsers.params import extract_param
from .base import FlowStep, Outcome, StepCategory, StepFactory

logger = logging.getLogger(__name__)


# 最近一次操作的元素标识
LAST_COMPONENT_VARIABLE = "last_option_component"


class OperateStep(FlowStep):
    """操作类步骤基类"""

    category = StepCategory.OPERATE.value

    def _require_session(self, workspace: Workspace) -> Optional[AutomationSession]:
        session = workspace.session
        if session is None:
            workspace.log(f"执行 {self.kind} 失败: 没有可用的会话")
        return session

    def _fail(self, workspace: Workspace, error: Exception) -> Outcome:
        logger.debug(f"步骤 {self.id} ({self.kind}) 失败", exc_info=True)
        workspace.log(f"执行 {self.kind} 失败: {error}")
        return Outcome.FAILURE


@StepFactory.register
class InitWebStep(OperateStep):
    """
    创建自动化会话

    Attributes:
        url: 会话端点
    """

    kind = "init_web"

    def __init__(self, step_id: str, url: str):
        super().__init__(step_id)
        self.url = url

    @classmethod
    def from_parameters(cls, step_id: str, raw_parameters: str, settings: EngineSettings) -> "InitWebStep":
        return cls(step_id, extract_param(raw_parameters, "url") or settings.webdriver_url)

    async def execute(self, workspace: Workspace) -> Outcome:
        # 同一时间只持有一个会话
        if workspace.has_session:
            await workspace.close_session()

        try:
            session = await SessionFactory.open(self.url)
        except Exception as e:
            return self._fail(workspace, e)

        workspace.set_session(session)
        workspace.log(f"执行 init_web: {self.url}")
        return Outcome.SUCCESS


@StepFactory.register
class OpenWebStep(OperateStep):
    """
    打开网页并最大化视口

    Attributes:
        url: 目标 URL
    """

    kind = "open_web"

    def __init__(self, step_id: str, url: str):
        super().__init__(step_id)
        self.url = url

    @classmethod
    def from_parameters(cls, step_id: str, raw_parameters: str, settings: EngineSettings) -> "OpenWebStep":
        return cls(step_id, extract_param(raw_parameters, "url") or settings.default_page_url)

    async def execute(self, workspace: Workspace) -> Outcome:
        session = self._require_session(workspace)
        if session is None:
            return Outcome.FAILURE

        try:
            await session.navigate(self.url)
            await session.maximize()
        except Exception as e:
            return self._fail(workspace, e)

        workspace.log(f"执行 open_web: {self.url}")
        return Outcome.SUCCESS


class ComponentStep(OperateStep):
    """
    操作单个页面元素的步骤

    元素按 id、name、css 的顺序定位。

    Attributes:
        component: 元素标识
    """

    def __init__(self, step_id: str, component: str = ""):
        super().__init__(step_id)
        self.component = component

    @classmethod
    def from_parameters(cls, step_id: str, raw_parameters: str, settings: EngineSettings) -> "ComponentStep":
        return cls(step_id, extract_param(raw_parameters, "component") or "")

    @abstractmethod
    async def apply(self, element: Element) -> None:
        """对定位到的元素执行操作"""
        ...

    async def execute(self, workspace: Workspace) -> Outcome:
        session = self._require_session(workspace)
        if session is None:
            return Outcome.FAILURE

        try:
            element = await session.find(self.component)
            await self.apply(element)
        except Exception as e:
            return self._fail(workspace, e)

        self.after_success(workspace)
        workspace.log(f"执行 {self.kind}: {self.component}")
        return Outcome.SUCCESS

    def after_success(self, workspace: Workspace) -> None:
        pass


@StepFactory.register
class InputStringStep(ComponentStep):
    """
    向输入框填入文本

    Attributes:
        input: 填入的文本
    """

    kind = "input_string"

    def __init__(self, step_id: str, component: str = "", input: str = ""):
        super().__init__(step_id, component)
        self.input = input

    @classmethod
    def from_parameters(cls, step_id: str, raw_parameters: str, settings: EngineSettings) -> "InputStringStep":
        text = extract_param(raw_parameters, "input")
        return cls(
            step_id,
            component=extract_param(raw_parameters, "component") or "",
            input=text if text is not None else settings.default_input_text,
        )

    async def apply(self, element) -> None:
        await element.fill(self.input)

    def after_success(self, workspace: Workspace) -> None:
        workspace.set_variable(LAST_COMPONENT_VARIABLE, self.component)


@StepFactory.register
class PressButtonStep(ComponentStep):
    """点击按钮"""

    kind = "press_button"

    async def apply(self, element) -> None:
        await element.click()


@StepFactory.register
class SummitStep(ComponentStep):
    """在元素上按回车提交"""

    kind = "summit"

    async def apply(self, element) -> None:
        await element.submit_key()

    def after_success(self, workspace: Workspace) -> None:
        workspace.set_variable(LAST_COMPONENT_VARIABLE, self.component)


__all__ = [
    "LAST_COMPONENT_VARIABLE",
    "OperateStep",
    "InitWebStep",
    "OpenWebStep",
    "ComponentStep",
    "InputStringStep",
    "PressButtonStep",
    "SummitStep",
]
