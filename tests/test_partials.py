"""Tests for partials and the recursion bound."""

from __future__ import annotations

import pytest

from stache import (
    Context,
    DictLoader,
    RecursionLimitError,
    Registry,
    RenderContext,
    StringOutput,
    TemplateNotFoundError,
    TemplateSyntaxError,
)


class TestPartials:
    def test_registered_partial_in_current_scope(self, registry):
        registry.register_partial("greet", "Hi {{name}}")
        assert registry.render_template("{{> greet}}!", {"name": "Ada"}) == "Hi Ada!"

    def test_partial_with_context_narrows(self, registry_with_loader, address_data):
        out = registry_with_loader.render_template("{{> address addr}}", address_data)
        assert out == "Beijing, China"

    def test_partial_context_climbs_one_level(self, registry_with_loader):
        data = {"name": "outer", "inner": {"name": "inner"}}
        assert registry_with_loader.render_template("{{> owner inner}}", data) == "outer"

    def test_partial_with_computed_context(self, registry_with_loader):
        registry_with_loader.register_helper("pick", lambda: {"city": "Oslo", "country": "Norway"})
        out = registry_with_loader.render_template("{{> address (pick)}}", {"city": "Rome"})
        assert out == "Oslo, Norway"

    def test_partial_inside_each(self, registry_with_loader, people_data):
        tpl = "{{#each people}}{{> card}}{{/each}}"
        out = registry_with_loader.render_template(tpl, people_data)
        assert out == "<div>Ada</div><div>Grace</div>"

    def test_quoted_partial_name(self, registry):
        registry.register_partial("my-card", "[{{this}}]")
        assert registry.render_template('{{> "my-card" v}}', {"v": 3}) == "[3]"

    def test_registered_template_wins_over_loader(self, registry_with_loader):
        registry_with_loader.register_partial("card", "registered")
        assert registry_with_loader.render_template("{{> card}}", {}) == "registered"

    def test_unknown_partial(self, registry):
        with pytest.raises(TemplateNotFoundError, match="Template 'nope' not found"):
            registry.render_template("{{> nope}}", {})

    def test_hash_params_rejected(self, registry):
        with pytest.raises(TemplateSyntaxError, match="Hash parameters are not supported"):
            registry.render_template("{{> card name=x}}", {})


class TestRecursionLimit:
    def test_self_including_partial(self, registry_with_loader):
        with pytest.raises(RecursionLimitError) as exc_info:
            registry_with_loader.render_template("{{> loop}}", {})
        assert exc_info.value.limit == 50

    def test_mutual_recursion(self):
        registry = Registry(
            loader=DictLoader({"a": "{{> b}}", "b": "{{> a}}"}),
            max_recursion_depth=10,
        )
        with pytest.raises(RecursionLimitError, match=r"Maximum render depth exceeded \(10\)"):
            registry.render("a", {})

    def test_bounded_recursion_over_data(self, registry):
        registry.register_partial("node", "{{name}}{{#each children}}({{> node}}){{/each}}")
        data = {"name": "a", "children": [{"name": "b", "children": [{"name": "c"}]}]}
        assert registry.render("node", data) == "a(b(c))"

    def test_depth_restored_after_limit(self, registry_with_loader):
        rc = RenderContext()
        with pytest.raises(RecursionLimitError):
            registry_with_loader.render_with_context("loop", Context({}), rc, StringOutput())
        assert rc.depth == 0
        assert rc.template_name is None
