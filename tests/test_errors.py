"""Tests for error codes, messages and source snippets."""

from __future__ import annotations

from pathlib import Path

import pytest

from stache import (
    DirectiveError,
    ErrorCode,
    MissingParameterError,
    PathNotFoundError,
    RecursionLimitError,
    RenderError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    build_source_snippet,
)


class TestErrorCodes:
    def test_codes_are_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))

    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.PATH_NOT_FOUND, "runtime"),
            (ErrorCode.MISSING_PARAMETER, "runtime"),
            (ErrorCode.TEMPLATE_NOT_FOUND, "template"),
            (ErrorCode.SYNTAX_ERROR, "template"),
        ],
    )
    def test_category(self, code, category):
        assert code.category == category

    def test_docs_url(self):
        assert ErrorCode.PATH_NOT_FOUND.docs_url == "docs/errors.md#s-run-002"

    def test_every_code_is_documented(self):
        reference = (Path(__file__).parents[1] / "docs" / "errors.md").read_text(encoding="utf-8")
        headings = {line[3:].strip() for line in reference.splitlines() if line.startswith("## ")}
        assert headings == {code.value for code in ErrorCode}

    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (TemplateNotFoundError, ErrorCode.TEMPLATE_NOT_FOUND),
            (TemplateSyntaxError, ErrorCode.SYNTAX_ERROR),
            (RenderError, ErrorCode.RENDER_ERROR),
            (PathNotFoundError, ErrorCode.PATH_NOT_FOUND),
            (RecursionLimitError, ErrorCode.RECURSION_LIMIT),
            (DirectiveError, ErrorCode.DIRECTIVE_FAILURE),
        ],
    )
    def test_class_codes(self, exc_type, code):
        assert exc_type.code is code
        assert issubclass(exc_type, TemplateError)


class TestMessages:
    def test_missing_parameter(self):
        err = MissingParameterError("with", 0, template_name="page.hbs", lineno=4)
        message = str(err)
        assert "Parameter 0 not found for directive 'with'" in message
        assert "page.hbs:4" in message
        assert "{{#with value}}" in message

    def test_missing_parameter_from_template(self, registry):
        with pytest.raises(MissingParameterError) as exc_info:
            registry.render_template("{{#with}}x{{/with}}", {})
        assert exc_info.value.directive == "with"
        assert exc_info.value.index == 0

    def test_recursion_limit(self):
        err = RecursionLimitError(50, "loop")
        assert "Maximum render depth exceeded (50) when entering 'loop'" in str(err)
        assert "circular" in err.suggestion

    def test_path_not_found_without_candidates(self):
        err = PathNotFoundError("title")
        assert "strict_mode" in err.suggestion

    def test_template_not_found_compact(self):
        err = TemplateNotFoundError("Template 'x' not found")
        compact = err.format_compact()
        assert compact.startswith("S-TPL-001: Template 'x' not found")
        assert "Docs:" in compact


class TestSnippets:
    SOURCE = "one\ntwo\nthree\nfour\nfive\nsix"

    def test_window(self):
        snippet = build_source_snippet(self.SOURCE, 4)
        assert [n for n, _ in snippet.lines] == [2, 3, 4, 5, 6]
        assert snippet.error_line == 4

    def test_window_clipped_at_start(self):
        snippet = build_source_snippet(self.SOURCE, 1, context_lines=1)
        assert snippet.lines == ((1, "one"), (2, "two"))

    def test_format_marks_error_line(self):
        text = build_source_snippet(self.SOURCE, 3, context_lines=0, column=2).format()
        assert ">  3 | three" in text
        assert "  ^" in text

    def test_render_error_compact(self):
        err = PathNotFoundError(
            "nmae",
            available_names=frozenset({"name"}),
            template_name="page.hbs",
            lineno=2,
            source_snippet=build_source_snippet("a\n{{nmae}}", 2),
        )
        compact = err.format_compact()
        assert compact.splitlines()[0] == "S-RUN-002: Path 'nmae' not found"
        assert "Location: page.hbs:2" in compact
        assert ">  2 | {{nmae}}" in compact
        assert "Hint: Did you mean 'name'?" in compact
        assert ErrorCode.PATH_NOT_FOUND.docs_url in compact

    def test_syntax_error_compact(self):
        err = TemplateSyntaxError("Unclosed tag", lineno=1, name="t.hbs", source="{{x", col_offset=0)
        compact = err.format_compact()
        assert compact.startswith("S-TPL-002: Unclosed tag")
        assert "--> t.hbs:1:0" in compact
        assert "^" in compact
