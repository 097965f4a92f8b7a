from __future__ import annotations

import pytest

from couplet_generator.common.schema import KeywordPair
from couplet_generator.common.templates import (
    DEFAULT_KEYWORD1,
    DEFAULT_KEYWORD2,
    build_prompts,
    render_prompt,
    sanitize_keyword,
)


def test_render_prompt_substitution() -> None:
    tpl = "Hello {{name}} and {{other}}!"
    out = render_prompt(tpl, name="world", other="moon")
    assert out == "Hello world and moon!"


def test_render_prompt_leaves_unknown_placeholders() -> None:
    assert render_prompt("{{a}} {{b}}", a="x") == "x {{b}}"


def test_render_prompt_does_not_expand_inside_values() -> None:
    out = render_prompt("{{a}}|{{b}}", a="{{b}}", b="B")
    assert out == "{{b}}|B"


@pytest.mark.parametrize("value", [None, "", "   ", "\n\t"])
def test_sanitize_keyword_falls_back(value: object) -> None:
    assert sanitize_keyword(value, "默认") == "默认"


def test_sanitize_keyword_trims_and_coerces() -> None:
    assert sanitize_keyword("  早八  ", "x") == "早八"
    assert sanitize_keyword(2026, "x") == "2026"


def test_user_prompt_contains_keywords_verbatim() -> None:
    prompts = build_prompts(KeywordPair(keyword1="马蹄湖", keyword2="绩点"))
    assert "马蹄湖" in prompts.user
    assert "绩点" in prompts.user
    assert "横批" in prompts.user


@pytest.mark.parametrize(
    "pair",
    [KeywordPair(), KeywordPair(keyword1="", keyword2="  "), KeywordPair(keyword1=None, keyword2="")],
)
def test_empty_keywords_use_defaults(pair: KeywordPair) -> None:
    prompts = build_prompts(pair)
    assert prompts.system
    assert prompts.user
    assert DEFAULT_KEYWORD1 in prompts.user
    assert DEFAULT_KEYWORD2 in prompts.user


def test_horizontal_keyword_is_ignored() -> None:
    with_hint = build_prompts(KeywordPair("a", "b", horizontal_keyword="稳拿录用"))
    without = build_prompts(KeywordPair("a", "b"))
    assert with_hint == without
    assert "稳拿录用" not in with_hint.user


def test_system_prompt_describes_output_shape() -> None:
    system = build_prompts(KeywordPair()).system
    assert '"upper"' in system
    assert '"lower"' in system
    assert '"horizontal"' in system
    assert "7-9" in system
