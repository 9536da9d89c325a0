"""Tests for Rich Console factory and theme."""

from io import StringIO

from archmap.output.console import (
    ARCH_THEME,
    create_console,
    get_output,
    style_for_progress,
    style_for_type,
)


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[bold red]hello[/bold red]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    def test_custom_width(self) -> None:
        console = create_console(width=80)
        assert console.width == 80

    def test_default_width(self) -> None:
        console = create_console()
        assert console.width == 120

    def test_highlight_disabled(self) -> None:
        console = create_console()
        console.print("value=42")
        assert "\x1b" not in get_output(console)


class TestGetOutput:
    def test_extracts_printed_text(self) -> None:
        console = create_console(no_color=True)
        console.print("hello world")
        assert "hello world" in get_output(console)

    def test_empty_console(self) -> None:
        assert get_output(create_console()) == ""


class TestStyles:
    def test_known_types(self) -> None:
        assert style_for_type("layer") == "arch.type.layer"
        assert style_for_type("component") == "arch.type.component"
        assert style_for_type("store") == "arch.type.store"
        assert style_for_type("external") == "arch.type.external"
        assert style_for_type("app") == "arch.type.app"

    def test_unknown_type_returns_empty(self) -> None:
        assert style_for_type("unknown") == ""

    def test_progress_styles(self) -> None:
        assert style_for_progress(100) == "arch.progress.done"
        assert style_for_progress(40) == "arch.progress.partial"
        assert style_for_progress(0) == "arch.progress.none"

    def test_theme_has_expected_styles(self) -> None:
        expected = [
            "arch.ok",
            "arch.error",
            "arch.warning",
            "arch.op",
            "arch.key",
            "arch.id",
            "arch.path",
            "arch.title",
            "arch.type.layer",
            "arch.progress.done",
        ]
        for name in expected:
            assert name in ARCH_THEME.styles, f"Missing theme style: {name}"
