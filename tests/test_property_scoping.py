"""Property-based tests for the stache lexer and context scoping.

Uses hypothesis to check invariants that must hold for every input:

- Plain text round-trips through tokenization and rendering unchanged
- Arbitrary input never crashes the lexer with anything but a syntax error
- ``../`` climbs exactly one narrowing directive per step, whatever mix of
  ``with`` and ``each`` encloses it
- Block params reach the same values as relative addressing
- Every scope stack is back at its starting depth after a render
"""

from __future__ import annotations

import re

from hypothesis import given, settings

from stache import Context, Registry, RenderContext, StringOutput, TemplateSyntaxError, TokenType
from stache.lexer import tokenize

from strategies import (
    arbitrary_template_source,
    narrowing_stack,
    plain_text,
    record,
    template_fragment,
)

_TAG = re.compile(r"\{\{[^}]*\}\}")


def _nested_data(levels: list[str]) -> dict:
    """Level ``i`` holds ``v=i`` and its child under ``n``.

    ``each`` levels wrap the child in a one-element list.
    """
    node: dict = {"v": len(levels)}
    for depth in range(len(levels) - 1, -1, -1):
        child = [node] if levels[depth] == "each" else node
        node = {"v": depth, "n": child}
    return node


def _nested_template(levels: list[str], body: str, named: bool = False) -> str:
    opens = "".join(
        f"{{{{#{kind} n as |l{i + 1}|}}}}" if named else f"{{{{#{kind} n}}}}"
        for i, kind in enumerate(levels)
    )
    closes = "".join(f"{{{{/{kind}}}}}" for kind in reversed(levels))
    return opens + body + closes


class TestLexerProperties:
    @given(source=plain_text)
    @settings(max_examples=200)
    def test_plain_text_roundtrip(self, source: str) -> None:
        tokens = tokenize(source)
        assert [t.type for t in tokens] == [TokenType.DATA, TokenType.EOF]
        assert tokens[0].value == source

    @given(source=plain_text)
    @settings(max_examples=100)
    def test_plain_text_renders_verbatim(self, source: str) -> None:
        assert Registry().render_template(source, {}) == source

    @given(source=arbitrary_template_source)
    @settings(max_examples=300)
    def test_no_unhandled_crash(self, source: str) -> None:
        try:
            tokenize(source)
        except TemplateSyntaxError:
            pass  # malformed input

    @given(source=template_fragment)
    @settings(max_examples=200)
    def test_unresolved_tags_render_empty(self, source: str) -> None:
        assert Registry().render_template(source, {}) == _TAG.sub("", source)

    @given(source=template_fragment, data=record)
    @settings(max_examples=100)
    def test_fragments_render_against_any_record(self, source: str, data: dict) -> None:
        assert isinstance(Registry().render_template(source, data), str)


class TestScopingProperties:
    @given(levels=narrowing_stack)
    @settings(max_examples=100)
    def test_each_parent_step_climbs_one_level(self, levels: list[str]) -> None:
        depth = len(levels)
        body = "".join("{{" + "../" * up + "v}}," for up in range(depth + 1))
        tpl = _nested_template(levels, body)
        expected = "".join(f"{depth - up}," for up in range(depth + 1))
        assert Registry().render_template(tpl, _nested_data(levels)) == expected

    @given(levels=narrowing_stack)
    @settings(max_examples=100)
    def test_root_is_reachable_from_any_depth(self, levels: list[str]) -> None:
        tpl = _nested_template(levels, "{{@root.v}}")
        assert Registry().render_template(tpl, _nested_data(levels)) == "0"

    @given(levels=narrowing_stack)
    @settings(max_examples=100)
    def test_block_params_match_relative_addressing(self, levels: list[str]) -> None:
        depth = len(levels)
        by_name = "".join(f"{{{{l{i}.v}}}}," for i in range(1, depth + 1))
        by_climb = "".join("{{" + "../" * (depth - i) + "v}}," for i in range(1, depth + 1))
        data = _nested_data(levels)
        registry = Registry()
        named = registry.render_template(_nested_template(levels, by_name, named=True), data)
        climbed = registry.render_template(_nested_template(levels, by_climb), data)
        assert named == climbed
        assert named == "".join(f"{i}," for i in range(1, depth + 1))

    @given(levels=narrowing_stack)
    @settings(max_examples=100)
    def test_stacks_balanced_after_render(self, levels: list[str]) -> None:
        registry = Registry()
        tpl = registry.from_string(_nested_template(levels, "{{v}}{{@index}}", named=True))
        rc = RenderContext()
        before = rc.depth_snapshot()
        out = StringOutput()
        tpl.render(registry, Context(_nested_data(levels)), rc, out)
        assert rc.depth_snapshot() == before
        assert out.getvalue().startswith(str(len(levels)))
