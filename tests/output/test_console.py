"""Tests for Rich Console factory and theme."""

from __future__ import annotations

from io import StringIO

from wikiweave.output.console import WIKI_THEME, create_console, get_output, style_for_kind


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        assert isinstance(create_console().file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[bold red]hello[/bold red]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80

    def test_default_width(self) -> None:
        assert create_console().width == 120


class TestStyleForKind:
    def test_known_kinds(self) -> None:
        assert style_for_kind("heading") == "wiki.kind.heading"
        assert style_for_kind("embed") == "wiki.kind.embed"

    def test_unknown_kind(self) -> None:
        assert style_for_kind("mystery") == ""

    def test_theme_has_status_styles(self) -> None:
        for name in ("wiki.ok", "wiki.error", "wiki.path"):
            assert name in WIKI_THEME.styles
