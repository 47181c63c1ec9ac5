"""
Tests for the Jinja renderer.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from viewcache.exceptions import RenderError
from viewcache.renderer import JinjaRenderer


class TestJinjaRenderer:
    """Test JinjaRenderer."""

    def test_renders_variables(self, template_dir: Path) -> None:
        renderer = JinjaRenderer()
        output = renderer.render(template_dir / "greeting.txt", {"name": "Ada"})
        assert output == "Hello Ada!"

    def test_keeps_trailing_newline(self, template_dir: Path) -> None:
        output = JinjaRenderer().render(template_dir / "home.tmpl", {"title": "Home"})
        assert output == "<h1>Home</h1>\n"

    def test_missing_variable_renders_empty(self, template_dir: Path) -> None:
        assert JinjaRenderer().render(template_dir / "greeting.txt", {}) == "Hello !"

    def test_strict_undefined_raises(self, template_dir: Path) -> None:
        renderer = JinjaRenderer(strict_undefined=True)
        with pytest.raises(RenderError):
            renderer.render(template_dir / "greeting.txt", {})

    def test_autoescape(self, template_dir: Path) -> None:
        renderer = JinjaRenderer(autoescape=True)
        output = renderer.render(template_dir / "greeting.txt", {"name": "<b>"})
        assert output == "Hello &lt;b&gt;!"

    def test_missing_template_raises(self, template_dir: Path) -> None:
        with pytest.raises(RenderError, match="does not exist") as exc_info:
            JinjaRenderer().render(template_dir / "nope.tmpl", {})
        assert exc_info.value.context["template"] == str(template_dir / "nope.tmpl")

    def test_syntax_error_raises(self, template_dir: Path) -> None:
        with pytest.raises(RenderError, match="rendering failed"):
            JinjaRenderer().render(template_dir / "broken.tmpl", {})

    def test_reuses_environment_per_directory(self, template_dir: Path) -> None:
        renderer = JinjaRenderer()
        renderer.render(template_dir / "greeting.txt", {"name": "a"})
        renderer.render(template_dir / "home.tmpl", {"title": "b"})
        assert len(renderer._environments) == 1

    def test_variable_named_self(self, template_dir: Path) -> None:
        template = template_dir / "self.txt"
        template.write_text("name={{ name }}", encoding="utf-8")

        output = JinjaRenderer().render(template, {"self": 1, "name": "x"})
        assert output == "name=x"

    def test_missing_include_names_included_file(self, template_dir: Path) -> None:
        outer = template_dir / "outer.tmpl"
        outer.write_text('{% include "partial.tmpl" %}', encoding="utf-8")

        with pytest.raises(RenderError, match="partial.tmpl") as exc_info:
            JinjaRenderer().render(outer, {})
        assert exc_info.value.context["missing"] == "partial.tmpl"
        assert exc_info.value.context["template"] == str(outer)
