"""Small line-oriented settings files: window geometry, theme, appearance.

Each file is optional. A missing or unreadable file means "no prior
state" and defaults apply.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class WindowGeometry:
    width: int
    height: int
    maximized: bool = False


@dataclass(slots=True)
class TerminalSettings:
    """Appearance overrides; ``None`` means "inherit from the theme"."""

    font_family: str | None = None
    font_size: float | None = None
    opacity: float = 1.0
    cursor_shape: int | None = None
    cursor_blink: int | None = None


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        LOG.warning("Cannot read %s: %s", path, exc)
        return None


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        LOG.error("Cannot write %s: %s", path, exc)


# ----------------------------------------------------------------------
# Window geometry
# ----------------------------------------------------------------------
def load_window_geometry(path: Path) -> WindowGeometry | None:
    """Read width, height and the maximized flag, one per line."""

    text = _read_text(path)
    if text is None:
        return None
    lines = text.split()
    if len(lines) < 3:
        return None
    try:
        width, height, maximized = (int(value) for value in lines[:3])
    except ValueError:
        LOG.debug("Ignoring malformed window geometry in %s", path)
        return None
    if width <= 0 or height <= 0:
        return None
    return WindowGeometry(width=width, height=height, maximized=bool(maximized))


def save_window_geometry(path: Path, geometry: WindowGeometry) -> None:
    if geometry.width <= 0 or geometry.height <= 0:
        return
    flag = 1 if geometry.maximized else 0
    _write_text(path, f"{geometry.width}\n{geometry.height}\n{flag}\n")


# ----------------------------------------------------------------------
# Theme selection
# ----------------------------------------------------------------------
def load_theme_name(path: Path) -> str | None:
    text = _read_text(path)
    if not text:
        return None
    name = text.splitlines()[0]
    return name or None


def save_theme_name(path: Path, name: str) -> None:
    _write_text(path, f"{name}\n")


# ----------------------------------------------------------------------
# Terminal appearance overrides
# ----------------------------------------------------------------------
def load_terminal_settings(path: Path) -> TerminalSettings:
    """Parse ``key=value`` lines; unknown keys and bad values are skipped."""

    settings = TerminalSettings()
    text = _read_text(path)
    if text is None:
        return settings

    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if not sep:
            continue
        try:
            if key == "font_family":
                settings.font_family = value
            elif key == "font_size":
                settings.font_size = float(value)
            elif key == "opacity":
                settings.opacity = min(1.0, max(0.0, float(value)))
            elif key == "cursor_shape":
                settings.cursor_shape = int(value)
            elif key == "cursor_blink":
                settings.cursor_blink = int(value)
        except ValueError:
            LOG.debug("Ignoring bad value for %s in %s: %r", key, path, value)
    return settings


def dump_terminal_settings(settings: TerminalSettings) -> str:
    lines: list[str] = []
    if settings.font_family:
        lines.append(f"font_family={settings.font_family}")
    if settings.font_size is not None and settings.font_size > 0:
        lines.append(f"font_size={settings.font_size:.1f}")
    if settings.opacity < 1.0:
        lines.append(f"opacity={settings.opacity:.2f}")
    if settings.cursor_shape is not None and settings.cursor_shape >= 0:
        lines.append(f"cursor_shape={settings.cursor_shape}")
    if settings.cursor_blink is not None and settings.cursor_blink >= 0:
        lines.append(f"cursor_blink={settings.cursor_blink}")
    return "".join(f"{line}\n" for line in lines)


def save_terminal_settings(path: Path, settings: TerminalSettings) -> None:
    _write_text(path, dump_terminal_settings(settings))
