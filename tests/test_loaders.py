"""Tests for template loaders and loader-backed partial lookup."""

from __future__ import annotations

import pytest

from stache import ChoiceLoader, DictLoader, FileSystemLoader, Registry, TemplateNotFoundError


class TestDictLoader:
    def test_get_source(self):
        loader = DictLoader({"card": "<div>{{name}}</div>"})
        assert loader.get_source("card") == ("<div>{{name}}</div>", None)
        assert loader.list_templates() == ["card"]

    def test_not_found_suggests(self):
        loader = DictLoader({"header": "", "footer": ""})
        with pytest.raises(TemplateNotFoundError, match="Did you mean 'header'"):
            loader.get_source("headr")

    def test_not_found_lists_available(self):
        loader = DictLoader({"a": "", "b": ""})
        with pytest.raises(TemplateNotFoundError, match="Available: a, b"):
            loader.get_source("zzzzzz")


class TestFileSystemLoader:
    @pytest.fixture
    def template_dir(self, tmp_path):
        (tmp_path / "partials").mkdir()
        (tmp_path / "page.hbs").write_text("<h1>{{title}}</h1>{{> partials/card person}}")
        (tmp_path / "partials" / "card.hbs").write_text("<p>{{name}}</p>")
        (tmp_path / "notes.txt").write_text("ignored")
        return tmp_path

    def test_get_source(self, template_dir):
        source, filename = FileSystemLoader(template_dir).get_source("partials/card")
        assert source == "<p>{{name}}</p>"
        assert filename.endswith("card.hbs")

    def test_list_templates(self, template_dir):
        assert FileSystemLoader(template_dir).list_templates() == ["page", "partials/card"]

    def test_custom_extension(self, template_dir):
        loader = FileSystemLoader(template_dir, extension=".txt")
        assert loader.get_source("notes")[0] == "ignored"

    def test_search_order(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (first / "t.hbs").write_text("first")
        (second / "t.hbs").write_text("second")
        (second / "only.hbs").write_text("only-second")
        loader = FileSystemLoader([first, second])
        assert loader.get_source("t")[0] == "first"
        assert loader.get_source("only")[0] == "only-second"

    def test_not_found_names_directories(self, template_dir):
        with pytest.raises(TemplateNotFoundError, match="not found in:"):
            FileSystemLoader(template_dir).get_source("missing")

    def test_render_through_registry(self, template_dir):
        registry = Registry(loader=FileSystemLoader(template_dir))
        data = {"title": "Team", "person": {"name": "Ada"}}
        assert registry.render("page", data) == "<h1>Team</h1><p>Ada</p>"


class TestChoiceLoader:
    def test_first_match_wins(self):
        loader = ChoiceLoader([DictLoader({"t": "custom"}), DictLoader({"t": "default", "u": "u"})])
        assert loader.get_source("t")[0] == "custom"
        assert loader.get_source("u")[0] == "u"
        assert loader.list_templates() == ["t", "u"]

    def test_not_found(self):
        loader = ChoiceLoader([DictLoader({}), DictLoader({})])
        with pytest.raises(TemplateNotFoundError, match="any of 2 loaders"):
            loader.get_source("x")


class TestRegistryLookup:
    def test_registered_template_wins_over_loader(self):
        registry = Registry(loader=DictLoader({"t": "from loader"}))
        registry.register_template_string("t", "registered")
        assert registry.render("t") == "registered"

    def test_loader_templates_are_not_cached(self):
        mapping = {"t": "one"}
        registry = Registry(loader=DictLoader(mapping))
        assert registry.render("t") == "one"
        mapping["t"] = "two"
        assert registry.render("t") == "two"
        assert not registry.has_template("t")

    def test_loader_partial(self, registry_with_loader, people_data):
        tpl = "{{#each people}}{{> card}};{{/each}}"
        assert registry_with_loader.render_template(tpl, people_data) == (
            "<div>Ada</div>;<div>Grace</div>;"
        )

    def test_missing_partial_raises(self, registry):
        with pytest.raises(TemplateNotFoundError):
            registry.render_template("{{> nowhere}}", {})
