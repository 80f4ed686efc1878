from __future__ import annotations

import base64

import pytest

from taskflow.core.errors import DecodeError
from taskflow.flows.parsers import (
    EdgeRecord,
    StepRecord,
    decode_script,
    encode_script,
    parse_script,
    parse_text,
)


LOGIN_FLOW = """
    flowchart TD
        ct001["name: head,  type: control"]
        ct002["name: end,   type: control"]
        op001["name: init_web, type: operate, para: { url:'http://localhost:9222' }"]
        op002["name: open_web, type: operate, para: { url:'https://accounts.google.com/' }"]
        ct003["name: sleep, type: control, para: { ms:'1000' }"]

        ct001 -->|success| op001
        op001 -->|success| op002
        op001 -->|fail| ct002
        op002 -->|always| ct003
        ct003 -->|always| ct002
"""


def test_encode_decode_round_trip() -> None:
    assert decode_script(encode_script(LOGIN_FLOW)) == LOGIN_FLOW
    assert decode_script(encode_script("流程 ✓")) == "流程 ✓"


def test_decode_tolerates_surrounding_whitespace() -> None:
    raw = encode_script("A")
    assert decode_script(f"\n  {raw}\n") == "A"


@pytest.mark.parametrize("raw", ["not base64!!", "abc", "@@@@"])
def test_decode_rejects_malformed_base64(raw: str) -> None:
    with pytest.raises(DecodeError):
        decode_script(raw)


def test_decode_rejects_non_utf8_payload() -> None:
    raw = base64.b64encode(b"\xff\xfe\xfd").decode("ascii")
    with pytest.raises(DecodeError):
        decode_script(raw)


def test_parse_steps_with_and_without_parameters() -> None:
    parsed = parse_text(LOGIN_FLOW)

    assert parsed.step_ids == ["ct001", "ct002", "op001", "op002", "ct003"]
    assert parsed.steps[0] == StepRecord(id="ct001", category="control", kind="head", raw_parameters="")
    assert parsed.steps[2].category == "operate"
    assert parsed.steps[2].kind == "init_web"
    assert "url:'http://localhost:9222'" in parsed.steps[2].raw_parameters


def test_parse_edges_in_script_order() -> None:
    parsed = parse_text(LOGIN_FLOW)

    assert parsed.edges[0] == EdgeRecord(source_id="ct001", target_id="op001", outcome_label="success")
    assert [e.outcome_label for e in parsed.edges] == ["success", "success", "fail", "always", "always"]


def test_kind_may_contain_spaces() -> None:
    parsed = parse_text('x1["name: press button , type: operate"]')
    assert parsed.steps[0].kind == "press button"


def test_edges_to_undeclared_steps_are_dropped() -> None:
    text = """
        a["name: head, type: control"]
        b["name: end, type: control"]
        a -->|success| b
        a -->|fail| ghost
        ghost -->|always| b
    """
    parsed = parse_text(text)
    assert [(e.source_id, e.target_id) for e in parsed.edges] == [("a", "b")]


def test_unmatched_text_is_skipped() -> None:
    text = 'garbage here\na["name: head, type: control"]\n%% comment\nb[broken'
    parsed = parse_text(text)
    assert parsed.step_ids == ["a"]
    assert parsed.edges == []


def test_chained_inline_declarations_yield_every_edge() -> None:
    text = (
        'A["name: head, type: control"] --> |always| '
        'B["name: sleep, type: control, para: {ms:\'5\'}"] --> |success| '
        'C["name: end, type: control"]'
    )
    parsed = parse_text(text)

    assert parsed.step_ids == ["A", "B", "C"]
    assert [(e.source_id, e.outcome_label, e.target_id) for e in parsed.edges] == [
        ("A", "always", "B"),
        ("B", "success", "C"),
    ]
    assert parsed.steps[1].raw_parameters == "{ms:'5'}"


def test_parse_script_decodes_first() -> None:
    parsed = parse_script(encode_script(LOGIN_FLOW))
    assert len(parsed.steps) == 5
    assert len(parsed.edges) == 5
