"""Tests for the ``with`` directive: narrowing, else branch, block params.

Key behaviors:
1. The body sees the parameter's value as its context
2. A falsy parameter renders the else branch (0 counts as present)
3. ``../`` climbs exactly one narrowing level per step
4. ``as |x|`` addresses the same data as the narrowed context
5. All scope state is restored afterwards, also after an error
"""

from __future__ import annotations

import pytest

from stache import (
    Context,
    MissingParameterError,
    ParameterRedefinitionError,
    Registry,
    RenderContext,
    RenderError,
    StringOutput,
)


class TestNarrowing:
    """The literal address scenarios."""

    def test_renders_field_of_narrowed_value(self, registry, address_data):
        assert registry.render_template("{{#with addr}}{{city}}{{/with}}", address_data) == "Beijing"

    def test_missing_value_renders_else(self, registry, address_data):
        tpl = "{{#with notfound}}hello{{else}}world{{/with}}"
        assert registry.render_template(tpl, address_data) == "world"

    def test_this_is_the_narrowed_value(self, registry, address_data):
        tpl = "{{#with addr/country}}{{this}}{{/with}}"
        assert registry.render_template(tpl, address_data) == "China"

    def test_dot_path_and_slash_path_agree(self, registry, address_data):
        dotted = registry.render_template("{{#with addr.country}}{{.}}{{/with}}", address_data)
        slashed = registry.render_template("{{#with addr/country}}{{.}}{{/with}}", address_data)
        assert dotted == slashed == "China"

    def test_nested_with_climbs_two_levels(self, registry):
        data = {"a": {"b": [{"c": 0}]}, "d": 1}
        tpl = "{{#with a}}{{#with b}}{{../../d}}{{/with}}{{/with}}"
        assert registry.render_template(tpl, data) == "1"

    def test_single_climb_reaches_enclosing_context(self, registry):
        data = {"a": {"label": "outer", "b": {"label": "inner"}}}
        tpl = "{{#with a}}{{#with b}}{{label}}/{{../label}}{{/with}}{{/with}}"
        assert registry.render_template(tpl, data) == "inner/outer"

    def test_climbing_past_the_root_stays_at_root(self, registry):
        data = {"a": {"b": {}}, "d": "root"}
        tpl = "{{#with a}}{{#with b}}{{../../../../d}}{{/with}}{{/with}}"
        assert registry.render_template(tpl, data) == "root"

    def test_root_reference_ignores_narrowing(self, registry):
        data = {"a": {"b": {"d": "near"}}, "d": "far"}
        tpl = "{{#with a}}{{#with b}}{{d}} {{@root.d}}{{/with}}{{/with}}"
        assert registry.render_template(tpl, data) == "near far"

    def test_object_attributes_are_addressable(self, registry):
        from dataclasses import dataclass

        @dataclass
        class Address:
            city: str

        @dataclass
        class Person:
            name: str
            addr: Address

        data = {"person": Person("Ada", Address("London"))}
        tpl = "{{#with person}}{{name}}: {{#with addr}}{{city}}{{/with}}{{/with}}"
        assert registry.render_template(tpl, data) == "Ada: London"


class TestPresence:
    """Branch selection uses presence semantics."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "main"),
            (0.0, "main"),
            (1, "main"),
            ("x", "main"),
            ([1], "main"),
            ({"k": 1}, "main"),
            (True, "main"),
            (False, "else"),
            (None, "else"),
            ("", "else"),
            ([], "else"),
            ({}, "else"),
        ],
    )
    def test_branch(self, registry, value, expected):
        tpl = "{{#with v}}main{{else}}else{{/with}}"
        assert registry.render_template(tpl, {"v": value}) == expected

    def test_zero_is_rendered_as_context(self, registry):
        assert registry.render_template("{{#with n}}[{{this}}]{{/with}}", {"n": 0}) == "[0]"

    def test_missing_else_renders_nothing(self, registry):
        assert registry.render_template("a{{#with nope}}x{{/with}}b", {}) == "ab"

    def test_falsy_branch_still_climbs_from_narrowed_root(self, registry):
        # The path root is pushed even when the else branch renders
        data = {"outer": {"empty": [], "label": "L"}}
        tpl = "{{#with outer}}{{#with empty}}x{{else}}{{../label}}{{/with}}{{/with}}"
        assert registry.render_template(tpl, data) == "L"


class TestBlockParams:
    """``as |name|`` bindings."""

    def test_block_param_equals_direct_addressing(self, registry, address_data):
        direct = registry.render_template("{{#with addr}}{{city}}{{/with}}", address_data)
        bound = registry.render_template("{{#with addr as |a|}}{{a.city}}{{/with}}", address_data)
        assert direct == bound == "Beijing"

    def test_block_param_visible_in_nested_blocks(self, registry, address_data):
        tpl = "{{#with addr as |a|}}{{#with country}}{{a.city}}-{{this}}{{/with}}{{/with}}"
        assert registry.render_template(tpl, address_data) == "Beijing-China"

    def test_block_param_alone_is_the_value(self, registry):
        tpl = "{{#with n as |x|}}{{x}}{{/with}}"
        assert registry.render_template(tpl, {"n": 42}) == "42"

    def test_inner_binding_shadows_outer(self, registry):
        data = {"a": {"v": "outer", "b": {"v": "inner"}}}
        tpl = "{{#with a as |x|}}{{#with b as |x|}}{{x.v}}{{/with}}{{x.v}}{{/with}}"
        assert registry.render_template(tpl, data) == "innerouter"

    def test_computed_value_binds_by_value(self, registry):
        registry.register_helper("make", lambda: {"city": "Paris"})
        tpl = "{{#with (make) as |m|}}{{m.city}}{{/with}}"
        assert registry.render_template(tpl, {}) == "Paris"

    def test_computed_value_becomes_current_without_a_path_root(self, registry):
        registry.register_helper("make", lambda: {"city": "Paris"})
        tpl = "{{#with (make)}}[{{city}}|{{../city}}]{{/with}}"
        assert registry.render_template(tpl, {"city": "Rome"}) == "[Paris|Rome]"

    def test_climbing_reaches_outer_block_param(self, registry):
        data = {"a": {"v": "A", "b": {"w": "B"}}}
        tpl = "{{#with a as |x|}}{{#with b}}[{{../x.v}}{{w}}]{{/with}}{{/with}}"
        assert registry.render_template(tpl, data) == "[AB]"

    def test_climbing_past_binding_level_misses_it(self, registry):
        data = {"a": {"x": "ax", "b": {"n": "B", "c": {"k": 1}}}}
        tpl = (
            "{{#with a}}{{#with b as |x|}}{{#with c}}"
            "{{../x.n}},{{../../x}}"
            "{{/with}}{{/with}}{{/with}}"
        )
        assert registry.render_template(tpl, data) == "B,ax"

    def test_binding_disappears_after_block(self, registry, address_data):
        tpl = "{{#with addr as |a|}}{{/with}}[{{a.city}}]"
        assert registry.render_template(tpl, address_data) == "[]"


class TestErrors:
    def test_missing_parameter(self, registry):
        with pytest.raises(MissingParameterError) as exc_info:
            registry.render_template("{{#with}}x{{/with}}", {})
        assert "Parameter 0 not found for directive 'with'" in str(exc_info.value)

    def test_two_parameters_rejected(self, registry):
        with pytest.raises(RenderError, match="exactly one parameter"):
            registry.render_template("{{#with a b}}x{{/with}}", {"a": 1, "b": 2})

    def test_redefinition_inside_each_frame(self, registry):
        with pytest.raises(ParameterRedefinitionError) as exc_info:
            registry.render_template("{{#each items as |x x|}}{{/each}}", {"items": [1]})
        assert exc_info.value.name == "x"


class TestUnwinding:
    """Scope stacks are balanced after every render."""

    def _render(self, registry: Registry, source: str, data, rc: RenderContext) -> str:
        out = StringOutput()
        registry.from_string(source).render(registry, Context(data), rc, out)
        return out.getvalue()

    def test_stacks_balanced_after_success(self, registry, address_data):
        rc = RenderContext()
        before = rc.depth_snapshot()
        self._render(registry, "{{#with addr as |a|}}{{a.city}}{{/with}}", address_data, rc)
        assert rc.depth_snapshot() == before
        assert rc.get_path() == ""

    def test_stacks_balanced_after_error(self, registry, address_data):
        def boom():
            raise ValueError("boom")

        registry.register_helper("boom", boom)
        rc = RenderContext()
        before = rc.depth_snapshot()
        with pytest.raises(RenderError):
            self._render(registry, "{{#with addr as |a|}}{{boom}}{{/with}}", address_data, rc)
        assert rc.depth_snapshot() == before
        assert rc.local_vars == [{}]

    def test_reused_context_has_no_residual_depth(self, registry, address_data):
        rc = RenderContext()
        for _ in range(3):
            assert self._render(registry, "{{#with addr}}{{city}}{{/with}}", address_data, rc) == "Beijing"
        assert rc.depth == 0
