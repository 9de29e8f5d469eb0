"""UI widgets for the termdeck Textual TUI."""

from __future__ import annotations

import codecs
from collections.abc import Iterable
from typing import Any

from rich.color import Color, ColorType
from rich.style import Style
from rich.text import Span, Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Input, Label, ListItem, RichLog, Static

from ..drag import TabDragController, TabSlot
from ..themes import ThemePreset

CLOSE_GLYPH = "×"
# Trailing cells of a tab label that count as its close button.
CLOSE_WIDTH = 2


class ProjectRow(ListItem):
    """Sidebar entry: project name plus its open-terminal count."""

    def __init__(self, key: str, name: str, path: str, tab_count: int) -> None:
        super().__init__(classes="project-row")
        self.project_key = key
        self._name = name
        self._tab_count = tab_count
        self.tooltip = path

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Label(self._name, classes="project-name", markup=False)
            yield Label(self.badge_text(self._tab_count), classes="project-badge")

    @staticmethod
    def badge_text(count: int) -> str:
        return str(count) if count else ""


class SubTabLabel(Static):
    """One tab in the strip, rendered as `` name × ``."""

    def __init__(self, key: str, name: str) -> None:
        super().__init__(self.format_label(name), classes="subtab", markup=False)
        self.tab_key = key

    @staticmethod
    def format_label(name: str) -> str:
        return f" {name} {CLOSE_GLYPH} "

    def set_name(self, name: str) -> None:
        self.update(self.format_label(name))

    def set_active(self, active: bool) -> None:
        self.set_class(active, "subtab--active")


class SubTabStrip(Horizontal):
    """Horizontal strip of sub-tab labels with click, close and drag."""

    class TabActivated(Message):
        def __init__(self, key: str) -> None:
            super().__init__()
            self.key = key

    class TabCloseRequested(Message):
        def __init__(self, key: str) -> None:
            super().__init__()
            self.key = key

    class Reordered(Message):
        """Emitted once a drag gesture ends with the strip's final order."""

        def __init__(self, keys: list[str]) -> None:
            super().__init__()
            self.keys = keys

    def __init__(self) -> None:
        super().__init__(id="subtab-strip")
        self._drag = TabDragController()
        self._press_screen_x = 0
        self._pressed_close: str | None = None

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    def labels(self) -> list[SubTabLabel]:
        return [child for child in self.children if isinstance(child, SubTabLabel)]

    def show_tabs(self, tabs: Iterable[tuple[str, str]], active_key: str | None) -> None:
        """Sync labels with ``(key, name)`` pairs, reusing existing widgets."""

        tabs = list(tabs)
        existing = {label.tab_key: label for label in self.labels()}
        wanted = {key for key, _ in tabs}
        for key, label in existing.items():
            if key not in wanted:
                label.remove()

        for key, name in tabs:
            label = existing.get(key)
            if label is None:
                label = SubTabLabel(key, name)
                self.mount(label)
                existing[key] = label
            else:
                label.set_name(name)
            label.set_active(key == active_key)
        self.call_after_refresh(self._apply_order, [key for key, _ in tabs])

    def _apply_order(self, keys: list[str]) -> None:
        by_key = {label.tab_key: label for label in self.labels()}
        for index, key in enumerate(keys):
            label = by_key.get(key)
            if label is None:
                continue
            current = self.labels()
            if index < len(current) and current[index] is not label:
                self.move_child(label, before=current[index])

    def _slots(self) -> list[TabSlot]:
        return [TabSlot(label.tab_key, label.outer_size.width) for label in self.labels()]

    def _hit(self, x: int) -> tuple[str | None, bool]:
        """Return the tab key under ``x`` and whether ``x`` is on its close glyph."""

        left = 0
        for slot in self._slots():
            right = left + slot.width
            if left <= x < right:
                return slot.key, x >= right - CLOSE_WIDTH
            left = right
        return None, False

    # ------------------------------------------------------------------
    # Mouse
    # ------------------------------------------------------------------
    def on_mouse_down(self, event: events.MouseDown) -> None:
        if event.button != 1:
            return
        x = event.screen_x - self.region.x
        key, on_close = self._hit(x)
        self._pressed_close = key if on_close else None
        if self._drag.press(self._slots(), x, on_close=on_close):
            self._press_screen_x = event.screen_x
            self.capture_mouse()
        event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if not self._drag.dragging:
            return
        if self._drag.motion(event.screen_x - self._press_screen_x):
            self._apply_order(self._drag.order)
        anchor = self._drag.anchor
        for label in self.labels():
            label.set_class(self._drag.claimed and label.tab_key == anchor, "subtab--dragging")

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self._pressed_close is not None:
            key, on_close = self._hit(event.screen_x - self.region.x)
            if on_close and key == self._pressed_close:
                self.post_message(self.TabCloseRequested(key))
            self._pressed_close = None
            return

        anchor = self._drag.anchor
        if anchor is None:
            return
        self.release_mouse()
        for label in self.labels():
            label.remove_class("subtab--dragging")
        order = self._drag.release()
        if order is None:
            self.post_message(self.TabActivated(anchor))
        else:
            self.post_message(self.Reordered(order))
        event.stop()


def _palette_color(color: Color | None, palette: tuple[str, ...]) -> Color | None:
    if color is None or color.type not in (ColorType.STANDARD, ColorType.EIGHT_BIT):
        return color
    if color.number is None or color.number >= len(palette):
        return color
    return Color.parse(palette[color.number])


def themed_ansi(line: str, theme: ThemePreset | None) -> Text:
    """Decode ANSI escapes, drawing colours 0-15 from the theme palette."""

    text = Text.from_ansi(line)
    if theme is None:
        return text
    spans = []
    for span in text.spans:
        style = span.style
        if isinstance(style, Style):
            color = _palette_color(style.color, theme.palette)
            bgcolor = _palette_color(style.bgcolor, theme.palette)
            if color is not style.color or bgcolor is not style.bgcolor:
                style = style + Style(color=color, bgcolor=bgcolor)
        spans.append(Span(span.start, span.end, style))
    text.spans = spans
    return text


class TerminalInput(Input):
    """Input whose cursor takes its colours from the terminal theme."""

    cursor_style: Style | None = None

    def get_component_rich_style(self, *names: str, **kwargs: Any) -> Style:
        style = super().get_component_rich_style(*names, **kwargs)
        if self.cursor_style is not None and names == ("input--cursor",):
            return style + self.cursor_style
        return style


class TerminalView(Vertical):
    """Line-oriented view of one terminal: scrollback, pending line, input."""

    class Resized(Message):
        def __init__(self, view: TerminalView, rows: int, cols: int) -> None:
            super().__init__()
            self.view = view
            self.rows = rows
            self.cols = cols

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(id=key, classes="terminal-view", **kwargs)
        self.tab_key = key
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._partial = ""
        self._scrollback = RichLog(classes="terminal-log", wrap=True, max_lines=5000)
        self._pending_line = Static("", classes="terminal-pending", markup=False)
        self._line_input = TerminalInput(placeholder="", classes="terminal-input")
        self._theme: ThemePreset | None = None

    def compose(self) -> ComposeResult:
        yield self._scrollback
        yield self._pending_line
        yield self._line_input

    def write_output(self, data: bytes) -> None:
        """Append raw pty output; complete lines go to the scrollback."""

        text = self._decoder.decode(data).replace("\r\n", "\n").replace("\r", "")
        text = self._partial + text
        *lines, self._partial = text.split("\n")
        for line in lines:
            self._scrollback.write(themed_ansi(line, self._theme))
        self._pending_line.update(themed_ansi(self._partial, self._theme))

    def apply_theme(self, theme: ThemePreset) -> None:
        """Recolour the view; only output written afterwards uses the new palette."""

        self._theme = theme
        self.styles.background = theme.background
        self.styles.color = theme.foreground
        self._line_input.styles.background = theme.background
        self._line_input.cursor_style = Style(color=theme.background, bgcolor=theme.cursor)
        self._line_input.refresh()

    def apply_cursor_blink(self, blink: bool) -> None:
        self._line_input.cursor_blink = blink

    def focus_input(self) -> None:
        self._line_input.focus()

    def on_resize(self, event: events.Resize) -> None:
        rows = max(1, event.size.height - 2)
        cols = max(1, event.size.width)
        self.post_message(self.Resized(self, rows, cols))
