"""Tests for template rendering and placeholder helpers."""

import pytest

from richtext_docx.exceptions import TemplateRenderError
from richtext_docx.templating import (
    PlaceholderDefinition,
    RenderResult,
    build_initial_values,
    format_section_token,
    format_value_token,
    render_preview,
    render_template,
    strip_placeholder_spans,
)


class TestRenderTemplate:
    def test_value_substitution(self):
        assert render_template("Hello {{name}}", {"name": "World"}) == "Hello World"

    def test_missing_value_renders_empty(self):
        assert render_template("Hello {{name}}!", {}) == "Hello !"

    def test_section_false(self):
        assert render_template("{{#flag}}Yes{{/flag}}", {"flag": False}) == ""

    def test_section_true(self):
        assert render_template("{{#flag}}Yes{{/flag}}", {"flag": True}) == "Yes"

    def test_section_repeats_for_sequence(self):
        template = "<ul>{{#items}}<li>{{name}}</li>{{/items}}</ul>"
        values = {"items": [{"name": "a"}, {"name": "b"}]}
        assert render_template(template, values) == "<ul><li>a</li><li>b</li></ul>"

    def test_empty_sequence_renders_nothing(self):
        assert render_template("{{#items}}x{{/items}}", {"items": []}) == ""

    def test_values_are_html_escaped(self):
        assert render_template("{{v}}", {"v": "<b>"}) == "&lt;b&gt;"

    def test_mismatched_section_raises(self):
        with pytest.raises(TemplateRenderError):
            render_template("{{#a}}x{{/b}}", {"a": True})

    def test_none_values(self):
        assert render_template("plain", None) == "plain"


class TestRenderPreview:
    def test_success(self):
        result = render_preview("Hi {{who}}", {"who": "there"})
        assert result == RenderResult(html="Hi there", is_error=False)

    def test_failure_becomes_diagnostic_text(self):
        result = render_preview("{{#a}}x{{/b}}", {"a": True})
        assert result.is_error is True
        assert result.html.startswith("Rendering error:")


class TestPlaceholders:
    def test_supports_section_explicit(self):
        assert PlaceholderDefinition(key="k", label="K", allow_section=False, kind="section").supports_section is False

    def test_supports_section_from_kind(self):
        assert PlaceholderDefinition(key="k", label="K", kind="section").supports_section is True

    def test_supports_section_from_content(self):
        assert PlaceholderDefinition(key="k", label="K", section_content="x").supports_section is True

    def test_value_placeholder_has_no_section(self):
        assert PlaceholderDefinition(key="k", label="K").supports_section is False

    def test_build_initial_values(self):
        placeholders = [
            PlaceholderDefinition(key="name", label="Name", sample_value="Ada"),
            PlaceholderDefinition(key="show", label="Show", kind="section"),
            PlaceholderDefinition(key="city", label="City"),
            PlaceholderDefinition(key="age", label="Age", sample_value=3),
        ]
        values = build_initial_values(placeholders, {"age": 42})
        assert values == {"name": "Ada", "show": True, "city": "", "age": 42}

    def test_format_section_token(self):
        placeholder = PlaceholderDefinition(key="vip", label="VIP", section_content="  Welcome back  ")
        assert format_section_token(placeholder) == "{{#vip}}Welcome back{{/vip}}"

    def test_format_section_token_default_content(self):
        placeholder = PlaceholderDefinition(key="vip", label="VIP")
        assert format_section_token(placeholder) == "{{#vip}}Conditional content here.{{/vip}}"
        assert format_section_token(placeholder, "Other") == "{{#vip}}Other{{/vip}}"

    def test_format_value_token(self):
        assert format_value_token(PlaceholderDefinition(key="name", label="Name")) == "{{name}}"

    def test_strip_placeholder_spans(self):
        html = (
            '<p>Hi <span class="template-placeholder" data-placeholder="name">{{name}}</span>'
            '<span class="template-section" data-section="vip">{{#vip}}!{{/vip}}</span></p>'
        )
        assert strip_placeholder_spans(html) == "<p>Hi {{name}}{{#vip}}!{{/vip}}</p>"

    def test_strip_keeps_other_spans(self):
        html = '<p><span style="color:red">x</span></p>'
        assert strip_placeholder_spans(html) == html
