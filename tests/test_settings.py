from __future__ import annotations

from pathlib import Path

from termdeck.settings import (
    TerminalSettings,
    WindowGeometry,
    dump_terminal_settings,
    load_terminal_settings,
    load_theme_name,
    load_window_geometry,
    save_terminal_settings,
    save_theme_name,
    save_window_geometry,
)
from termdeck.themes import BUILTIN_THEMES, DEFAULT_THEME, next_theme, resolve_theme


def test_window_geometry_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "window.conf"

    save_window_geometry(path, WindowGeometry(width=1200, height=800, maximized=True))

    assert path.read_text(encoding="utf-8") == "1200\n800\n1\n"
    assert load_window_geometry(path) == WindowGeometry(1200, 800, True)


def test_window_geometry_rejects_non_positive_sizes(tmp_path: Path) -> None:
    path = tmp_path / "window.conf"

    save_window_geometry(path, WindowGeometry(width=0, height=800))
    assert not path.exists()

    path.write_text("-5\n800\n0\n", encoding="utf-8")
    assert load_window_geometry(path) is None

    path.write_text("1200\n800\n", encoding="utf-8")
    assert load_window_geometry(path) is None

    path.write_text("wide\n800\n0\n", encoding="utf-8")
    assert load_window_geometry(path) is None


def test_missing_files_mean_defaults(tmp_path: Path) -> None:
    assert load_window_geometry(tmp_path / "window.conf") is None
    assert load_theme_name(tmp_path / "theme.conf") is None
    assert load_terminal_settings(tmp_path / "settings.conf") == TerminalSettings()


def test_theme_name_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "theme.conf"

    save_theme_name(path, "Nord")

    assert load_theme_name(path) == "Nord"


def test_terminal_settings_parsing(tmp_path: Path) -> None:
    path = tmp_path / "settings.conf"
    path.write_text(
        "font_family=JetBrains Mono\n"
        "font_size=big\n"
        "opacity=1.7\n"
        "cursor_shape=1\n"
        "cursor_blink=2\n"
        "colour=red\n"
        "garbage line\n",
        encoding="utf-8",
    )

    settings = load_terminal_settings(path)

    assert settings.font_family == "JetBrains Mono"
    assert settings.font_size is None
    assert settings.opacity == 1.0
    assert settings.cursor_shape == 1
    assert settings.cursor_blink == 2


def test_terminal_settings_dump_formats(tmp_path: Path) -> None:
    settings = TerminalSettings(font_size=11, opacity=0.5, cursor_blink=0)

    assert dump_terminal_settings(settings) == "font_size=11.0\nopacity=0.50\ncursor_blink=0\n"
    assert dump_terminal_settings(TerminalSettings()) == ""

    path = tmp_path / "settings.conf"
    save_terminal_settings(path, settings)
    reloaded = load_terminal_settings(path)
    assert reloaded.font_size == 11.0
    assert reloaded.opacity == 0.5


def test_unknown_theme_falls_back_to_default() -> None:
    assert DEFAULT_THEME == "Dracula"
    assert resolve_theme("No Such Theme").name == "Dracula"
    assert resolve_theme(None) is BUILTIN_THEMES[0]


def test_theme_cycle_wraps() -> None:
    last = BUILTIN_THEMES[-1]

    assert next_theme(last.name) is BUILTIN_THEMES[0]
    assert next_theme(BUILTIN_THEMES[0].name) is BUILTIN_THEMES[1]
    assert all(len(preset.palette) == 16 for preset in BUILTIN_THEMES)
