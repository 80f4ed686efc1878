from __future__ import annotations

from datetime import datetime, timezone

import pytest

from taskflow.config import EngineSettings
from taskflow.flows import Workspace
from taskflow.flows.steps import (
    LAST_COMPONENT_VARIABLE,
    ConcurrentStep,
    DelayStep,
    EndStep,
    HeadStep,
    InitWebStep,
    InputStringStep,
    OpenWebStep,
    Outcome,
    PassThroughStep,
    PressButtonStep,
    ScheduleError,
    SleepStep,
    StepFactory,
    StepRegistry,
    SummitStep,
    TimingStep,
)
from taskflow.flows.steps import control
from taskflow.flows.steps.operate import ComponentStep
from taskflow.flows.steps.control import build_trigger, next_fire_time, weekday_field


SETTINGS = EngineSettings()


def _create(kind: str, category: str, para: str = ""):
    return StepFactory.create("s1", category, kind, para, SETTINGS)


# ========== 工厂 ==========

@pytest.mark.parametrize(
    ("category", "kind", "expected"),
    [
        ("control", "head", HeadStep),
        ("control", "end", EndStep),
        ("control", "sleep", SleepStep),
        ("control", "timing", TimingStep),
        ("operate", "init_web", InitWebStep),
        ("operate", "open_web", OpenWebStep),
        ("operate", "input_string", InputStringStep),
        ("operate", "press_button", PressButtonStep),
        ("operate", "summit", SummitStep),
        ("decorate", "delay", DelayStep),
        ("decorate", "concurrent", ConcurrentStep),
    ],
)
def test_factory_builds_recognized_kinds(category: str, kind: str, expected: type) -> None:
    step = _create(kind, category)
    assert type(step) is expected
    assert step.id == "s1"


def test_factory_falls_back_to_pass_through() -> None:
    step = _create("teleport", "operate")
    assert isinstance(step, PassThroughStep)
    assert step.kind == "teleport"
    assert step.category == "operate"

    # 类别与名称必须同时匹配
    assert isinstance(_create("head", "operate"), PassThroughStep)


def test_parameter_defaults_come_from_settings() -> None:
    settings = EngineSettings(
        webdriver_url="http://driver:1",
        default_page_url="https://example.org/",
        default_input_text="hello",
        default_cron="0 * * * * *",
    )
    assert StepFactory.create("a", "operate", "init_web", "", settings).url == "http://driver:1"
    assert StepFactory.create("b", "operate", "open_web", "", settings).url == "https://example.org/"
    assert StepFactory.create("c", "operate", "input_string", "", settings).input == "hello"
    assert StepFactory.create("d", "control", "timing", "", settings).cron == "0 * * * * *"


def test_parameters_override_defaults() -> None:
    sleep = _create("sleep", "control", "{ ms:'250' }")
    assert sleep.ms == 250

    typed = _create("input_string", "operate", "{ component:'q', input:'x' }")
    assert (typed.component, typed.input) == ("q", "x")

    delay = _create("delay", "decorate", "{ front_time:'10', back_time:'20' }")
    assert (delay.front_time, delay.back_time) == (10, 20)


def test_non_numeric_sleep_falls_back_to_zero() -> None:
    assert _create("sleep", "control", "{ ms:'soon' }").ms == 0
    assert _create("sleep", "control").ms == 0


def test_registry_overwrites_duplicate_ids() -> None:
    registry = StepRegistry(SETTINGS)
    registry.register("x", "control", "head")
    registry.register("x", "control", "sleep", "{ ms:'1' }")

    assert len(registry) == 1
    assert isinstance(registry.get("x"), SleepStep)
    assert registry.ids() == ["x"]
    assert "x" in registry
    assert registry.get("missing") is None


# ========== 控制类 ==========

async def test_head_logs_and_succeeds() -> None:
    workspace = Workspace()
    assert await HeadStep("h").execute(workspace) == Outcome.SUCCESS
    assert workspace.execution_log == ["执行 head: h"]


async def test_sleep_logs_one_line() -> None:
    workspace = Workspace()
    assert await SleepStep("s", ms=1).execute(workspace) == Outcome.SUCCESS
    assert workspace.execution_log == ["执行 sleep: 1ms"]


async def test_end_clears_workspace_and_closes_session(fake_browser) -> None:
    workspace = Workspace()
    workspace.set_variable("k", "v")
    workspace.log("earlier")
    session = await fake_browser.open("http://localhost:9222")
    workspace.set_session(session)

    assert await EndStep("e").execute(workspace) == Outcome.SUCCESS

    assert workspace.variables == {}
    assert workspace.execution_log == []
    assert workspace.transcript[-1].startswith("执行 end: e")
    assert session.closed
    assert not workspace.has_session


async def test_end_without_session_still_succeeds() -> None:
    workspace = Workspace()
    assert await EndStep("e").execute(workspace) == Outcome.SUCCESS


@pytest.mark.parametrize("expression", ["not-a-cron", "", "* * *", "61 * * * *", "* * * * * * * *"])
def test_build_trigger_rejects_invalid_expressions(expression: str) -> None:
    with pytest.raises(ScheduleError):
        build_trigger(expression)


@pytest.mark.parametrize("expression", ["*/5 * * * *", "* * * * * *", "0 0 12 * * * 2099"])
def test_build_trigger_accepts_five_six_and_seven_fields(expression: str) -> None:
    build_trigger(expression)


def test_exhausted_expression_has_no_next_fire_time() -> None:
    with pytest.raises(ScheduleError):
        next_fire_time("0 0 0 1 1 * 2000")


# 2026-10-19 是周一
MONDAY_NOON = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        # 5 段 crontab：0 与 7 都是周日
        ("0 9 * * 0", datetime(2026, 10, 25, 9, 0)),
        ("0 9 * * 7", datetime(2026, 10, 25, 9, 0)),
        ("0 9 * * 1-5", datetime(2026, 10, 20, 9, 0)),
        ("0 9 * * 0-6", datetime(2026, 10, 20, 9, 0)),
        ("0 9 * * 6,0", datetime(2026, 10, 24, 9, 0)),
        ("0 9 * * */2", datetime(2026, 10, 20, 9, 0)),
        ("0 9 * * mon", datetime(2026, 10, 26, 9, 0)),
        # 6/7 段：1 是周日，7 是周六
        ("0 0 9 * * 1", datetime(2026, 10, 25, 9, 0)),
        ("0 0 9 * * 7", datetime(2026, 10, 24, 9, 0)),
        ("0 0 9 * * 2-6", datetime(2026, 10, 20, 9, 0)),
        ("0 0 9 * * 1 2026", datetime(2026, 10, 25, 9, 0)),
    ],
)
def test_numeric_day_of_week_follows_cron_convention(expression: str, expected: datetime) -> None:
    fire_time = next_fire_time(expression, MONDAY_NOON, timezone=timezone.utc)
    assert fire_time.replace(tzinfo=None) == expected


@pytest.mark.parametrize("expression", ["0 9 * * 8", "0 9 * * 5-2", "0 0 9 * * 0", "0 0 9 * * 1-8"])
def test_out_of_range_day_of_week_is_rejected(expression: str) -> None:
    with pytest.raises(ScheduleError):
        build_trigger(expression)


def test_weekday_field_rewrites_numbers_only() -> None:
    assert weekday_field("*", sunday=0) == "*"
    assert weekday_field("1-3", sunday=0) == "mon,tue,wed"
    assert weekday_field("fri,0", sunday=0) == "fri,sun"
    assert weekday_field("5/2", sunday=0) == "fri,sun"
    assert weekday_field("1,7", sunday=1) == "sun,sat"


def test_next_fire_time_is_in_the_future() -> None:
    now = datetime.now().astimezone()
    fire_time = next_fire_time("* * * * * *", now)
    assert 0 <= (fire_time - now).total_seconds() <= 1


async def test_timing_with_invalid_cron_fails_without_waiting(monkeypatch: pytest.MonkeyPatch) -> None:
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(control.asyncio, "sleep", fake_sleep)
    workspace = Workspace()

    assert await TimingStep("t", "not-a-cron").execute(workspace) == Outcome.FAILURE
    assert delays == []
    assert len(workspace.execution_log) == 1
    assert workspace.execution_log[0].startswith("执行 timing 失败")


async def test_timing_waits_until_next_fire_time(monkeypatch: pytest.MonkeyPatch) -> None:
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(control.asyncio, "sleep", fake_sleep)
    workspace = Workspace()

    assert await TimingStep("t", "* * * * * *").execute(workspace) == Outcome.SUCCESS
    assert len(delays) == 1
    assert 0 <= delays[0] <= 1
    assert len(workspace.execution_log) == 1


# ========== 操作类 ==========

@pytest.mark.parametrize(
    "step",
    [
        OpenWebStep("o", "https://example.org/"),
        InputStringStep("i", "q", "text"),
        PressButtonStep("p", "q"),
        SummitStep("m", "q"),
    ],
)
async def test_operate_steps_fail_without_session(step) -> None:
    workspace = Workspace()
    assert await step.execute(workspace) == Outcome.FAILURE
    assert len(workspace.execution_log) == 1
    assert "没有可用的会话" in workspace.execution_log[0]


async def test_init_web_opens_session(fake_browser) -> None:
    workspace = Workspace()
    assert await InitWebStep("w", "http://localhost:9222").execute(workspace) == Outcome.SUCCESS
    assert workspace.session is fake_browser.sessions[0]
    assert fake_browser.sessions[0].endpoint == "http://localhost:9222"
    assert workspace.execution_log == ["执行 init_web: http://localhost:9222"]


async def test_init_web_replaces_previous_session(fake_browser) -> None:
    workspace = Workspace()
    step = InitWebStep("w", "http://localhost:9222")
    await step.execute(workspace)
    await step.execute(workspace)

    first, second = fake_browser.sessions
    assert first.closed
    assert workspace.session is second


async def test_init_web_failure_is_an_outcome(fake_browser) -> None:
    fake_browser.fail_open = True
    workspace = Workspace()
    assert await InitWebStep("w", "http://nowhere:1").execute(workspace) == Outcome.FAILURE
    assert not workspace.has_session
    assert "无法连接到浏览器" in workspace.execution_log[0]


async def test_open_web_navigates_and_maximizes(fake_browser) -> None:
    workspace = Workspace()
    await InitWebStep("w", "http://localhost:9222").execute(workspace)

    assert await OpenWebStep("o", "https://example.org/").execute(workspace) == Outcome.SUCCESS
    session = fake_browser.sessions[0]
    assert session.visited == ["https://example.org/"]
    assert session.maximized


async def test_open_web_navigation_error_fails(fake_browser) -> None:
    fake_browser.fail_navigate = True
    workspace = Workspace()
    await InitWebStep("w", "http://localhost:9222").execute(workspace)

    assert await OpenWebStep("o", "https://example.org/").execute(workspace) == Outcome.FAILURE
    assert workspace.execution_log[-1].startswith("执行 open_web 失败")


async def test_input_string_fills_and_records_component(fake_browser) -> None:
    workspace = Workspace()
    await InitWebStep("w", "http://localhost:9222").execute(workspace)

    assert await InputStringStep("i", "searchInput", "red panda").execute(workspace) == Outcome.SUCCESS
    element = fake_browser.sessions[0].found[0]
    assert element.strategy == "id"
    assert element.actions == [("fill", "red panda")]
    assert workspace.get_variable(LAST_COMPONENT_VARIABLE) == "searchInput"


async def test_press_button_clicks_without_recording_component(fake_browser) -> None:
    workspace = Workspace()
    await InitWebStep("w", "http://localhost:9222").execute(workspace)

    assert await PressButtonStep("p", "button.submit").execute(workspace) == Outcome.SUCCESS
    element = fake_browser.sessions[0].found[0]
    assert element.strategy == "css"
    assert element.actions == [("click",)]
    assert not workspace.has_variable(LAST_COMPONENT_VARIABLE)


async def test_summit_presses_enter_and_records_component(fake_browser) -> None:
    workspace = Workspace()
    await InitWebStep("w", "http://localhost:9222").execute(workspace)

    assert await SummitStep("m", "q").execute(workspace) == Outcome.SUCCESS
    element = fake_browser.sessions[0].found[0]
    assert element.strategy == "name"
    assert element.actions == [("submit",)]
    assert workspace.get_variable(LAST_COMPONENT_VARIABLE) == "q"


def test_component_step_requires_an_action() -> None:
    with pytest.raises(TypeError):
        ComponentStep("c", "q")


async def test_missing_element_fails(fake_browser) -> None:
    workspace = Workspace()
    await InitWebStep("w", "http://localhost:9222").execute(workspace)

    assert await PressButtonStep("p", "nope").execute(workspace) == Outcome.FAILURE
    assert "元素未找到: nope" in workspace.execution_log[-1]


# ========== 装饰类与未识别步骤 ==========

async def test_decorators_are_standalone_no_ops() -> None:
    workspace = Workspace()
    assert await DelayStep("d", 10, 20).execute(workspace) == Outcome.SUCCESS
    assert await ConcurrentStep("c").execute(workspace) == Outcome.SUCCESS
    assert workspace.execution_log == ["执行 delay: front=10ms, back=20ms", "执行 concurrent"]


async def test_pass_through_logs_category_and_kind() -> None:
    workspace = Workspace()
    step = PassThroughStep("x9", "operate", "teleport")
    assert await step.execute(workspace) == Outcome.SUCCESS
    assert workspace.execution_log == ["执行未识别步骤 x9: name=teleport, type=operate"]
