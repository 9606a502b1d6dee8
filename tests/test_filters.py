"""Tests for Jinja2 template filters."""

from __future__ import annotations

from markupsafe import Markup

from ci_maker.renderer.filters import emphasis, role_class, setup_jinja_env
from ci_maker.renderer.letter_text import LineRole


class TestEmphasis:
    def test_marker_becomes_strong(self):
        assert emphasis("em favor de **Ana**, no valor") == \
            "em favor de <strong>Ana</strong>, no valor"

    def test_escapes_html(self):
        result = emphasis("<script>x</script>")
        assert "<script>" not in result
        assert "&lt;script&gt;" in result

    def test_escapes_inside_emphasis(self):
        assert emphasis("**A & B**") == "<strong>A &amp; B</strong>"

    def test_multiple_runs(self):
        assert emphasis("**a** e **b**").count("<strong>") == 2

    def test_unpaired_marker_kept(self):
        assert emphasis("**sozinho") == "**sozinho"

    def test_returns_markup(self):
        assert isinstance(emphasis("x"), Markup)

    def test_empty(self):
        assert emphasis("") == ""

    def test_none(self):
        assert emphasis(None) == ""


class TestRoleClass:
    def test_enum(self):
        assert role_class(LineRole.DIRECTIVE) == "role-directive-centered-bold"

    def test_string(self):
        assert role_class("blank-spacer") == "role-blank-spacer"

    def test_empty(self):
        assert role_class(None) == ""


class TestSetupJinjaEnv:
    def test_env_has_filters(self):
        env = setup_jinja_env()
        assert "emphasis" in env.filters
        assert "role_class" in env.filters

    def test_env_loads_templates(self):
        env = setup_jinja_env()
        assert "letter.html" in env.loader.list_templates()

    def test_autoescape_enabled(self):
        env = setup_jinja_env()
        assert env.from_string("{{ x }}").render(x="<b>") == "&lt;b&gt;"
