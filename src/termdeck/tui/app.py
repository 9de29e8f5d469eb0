"""Textual TUI for the termdeck terminal workspace."""

from __future__ import annotations

import io
import itertools
import logging
import sys
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import ContentSwitcher, Footer, Input, ListView, Log, Static

from ..backend import ExitCallback, OutputCallback, TerminalBackend, TerminalFactory, TitleCallback
from ..events import ChangeKind, WorkspaceChange
from ..models import Project, SubTab
from ..paths import AppPaths, migrate_config_to_data
from ..pty_backend import PtyBackendFactory
from ..session_store import SessionStore
from ..settings import (
    WindowGeometry,
    load_terminal_settings,
    load_theme_name,
    load_window_geometry,
    save_terminal_settings,
    save_theme_name,
    save_window_geometry,
)
from ..sorting import SORT_LABELS
from ..themes import ThemePreset, next_theme, resolve_theme
from ..workspace import Workspace
from .screens import AddProjectScreen, RenameSubTabScreen
from .widgets import ProjectRow, SubTabStrip, TerminalView

LOG = logging.getLogger(__name__)

# settings.conf cursor_blink values: 0 follows the system, 1 on, 2 off.
CURSOR_BLINK_OFF = 2


@dataclass(slots=True)
class AppConfig:
    paths: AppPaths
    show_log_panel: bool = False
    # Terminal factory override; the pty backend is used when unset.
    backends: TerminalFactory | None = None


class BackendEvent(Message):
    """A terminal backend callback, re-delivered on the UI loop."""

    def __init__(self, callback: Callable[..., None], args: tuple[Any, ...]) -> None:
        super().__init__()
        self.callback = callback
        self.args = args


class _UiLoopFactory:
    """Wraps a factory so backend callbacks arrive as app messages.

    ``post_message`` is safe to call from the pty reader threads.
    """

    def __init__(self, app: TermdeckApp, inner: TerminalFactory) -> None:
        self._app = app
        self._inner = inner

    def spawn(
        self,
        working_dir: str,
        argv: list[str],
        *,
        on_title: TitleCallback,
        on_exit: ExitCallback,
        on_output: OutputCallback | None = None,
    ) -> TerminalBackend:
        return self._inner.spawn(
            working_dir,
            argv,
            on_title=self._bind(on_title),
            on_exit=self._bind(on_exit),
            on_output=None if on_output is None else self._bind(on_output),
        )

    def _bind(self, callback: Callable[..., None]) -> Callable[..., None]:
        def deliver(*args: Any) -> None:
            self._app.post_message(BackendEvent(callback, args))

        return deliver


class _TextualLogHandler(logging.Handler):
    """Logging handler that forwards records into a Textual Log widget."""

    def __init__(self, app: TermdeckApp) -> None:
        super().__init__()
        self._app = app

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            message = self.format(record)
        except Exception:  # pragma: no cover - formatting errors
            self.handleError(record)
            return
        self._app._submit_dev_log_line(message)


class _TextualStreamTap(io.TextIOBase):
    """Mirror stdout/stderr writes into the in-app log panel."""

    def __init__(
        self,
        app: TermdeckApp,
        stream: TextIO | None,
        *,
        label: str,
    ) -> None:
        super().__init__()
        self._app = app
        self._stream = stream
        self._label = label
        self._buffer: str = ""

    def write(self, data: str) -> int:  # type: ignore[override]
        if not data:
            return 0
        if self._stream is not None:
            self._stream.write(data)

        text = data.replace("\r\n", "\n").replace("\r", "\n")
        self._buffer += text

        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)
            self._emit(line)
        return len(data)

    def flush(self) -> None:  # type: ignore[override]
        if self._stream is not None:
            self._stream.flush()
        if self._buffer:
            self._emit(self._buffer)
            self._buffer = ""

    @property
    def encoding(self) -> str:  # pragma: no cover - passthrough
        if self._stream is not None and getattr(self._stream, "encoding", None):
            return self._stream.encoding  # type: ignore[return-value]
        return "utf-8"

    def fileno(self) -> int:  # pragma: no cover - passthrough
        if self._stream is not None and hasattr(self._stream, "fileno"):
            return self._stream.fileno()  # type: ignore[return-value]
        raise OSError("Stream has no file descriptor")

    def isatty(self) -> bool:  # pragma: no cover - passthrough
        if self._stream is not None and hasattr(self._stream, "isatty"):
            return self._stream.isatty()
        return False

    def _emit(self, line: str) -> None:
        if not line:
            return

        message = f"[{self._label}] {line}"
        self._app._submit_dev_log_line(message)


class TermdeckApp(App[None]):
    """Main Textual application."""

    CSS = """
    Screen {
        layout: vertical;
        background: #050301;
    }

    #body {
        height: 1fr;
    }

    #sidebar {
        width: 32;
        border-right: solid #2c1c0c;
        background: #080503;
    }

    #sort-indicator {
        height: 1;
        padding: 0 1;
        color: #d0b089;
    }

    #project-list {
        height: 1fr;
        background: #080503;
    }

    .project-row Horizontal {
        height: 1;
        padding: 0 1;
    }

    .project-name {
        width: 1fr;
    }

    .project-badge {
        width: auto;
        color: #f28c28;
    }

    #main {
        width: 1fr;
    }

    #subtab-strip {
        height: 1;
        background: #050301;
    }

    .subtab {
        width: auto;
        height: 1;
        background: #0d0804;
        color: #d0b089;
    }

    .subtab--active {
        background: #201105;
        color: #f28c28;
        text-style: bold;
    }

    .subtab--dragging {
        opacity: 0.5;
    }

    #terminals {
        height: 1fr;
    }

    #empty-state {
        padding: 1 2;
        color: #d0b089;
    }

    .terminal-view {
        height: 1fr;
    }

    .terminal-log {
        height: 1fr;
        padding: 0 1;
    }

    .terminal-pending {
        height: 1;
        padding: 0 1;
    }

    .terminal-input {
        height: 3;
        border: solid #f28c28;
        padding: 0 1;
        margin: 0 1;
    }

    #dev-log {
        height: 8;
        border: solid #2c1c0c;
        background: #050301;
        margin: 0 1 1 1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+o", "add_project", "Add project", priority=True),
        Binding("f8", "remove_project", "Remove project", priority=True),
        Binding("ctrl+t", "new_tab", "New tab", priority=True),
        Binding("ctrl+w", "close_tab", "Close tab", priority=True),
        Binding("ctrl+pageup", "previous_tab", "Prev tab", show=False, priority=True),
        Binding("ctrl+pagedown", "next_tab", "Next tab", show=False, priority=True),
        Binding("alt+left", "move_tab(-1)", "Move tab left", show=False, priority=True),
        Binding("alt+right", "move_tab(1)", "Move tab right", show=False, priority=True),
        Binding("f2", "rename_tab", "Rename tab", priority=True),
        Binding("f6", "cycle_sort", "Sort", priority=True),
        Binding("f7", "cycle_theme", "Theme", priority=True),
        Binding("f9", "toggle_cursor_blink", "Cursor blink", show=False, priority=True),
    ]

    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        self._config = config
        paths = config.paths
        geometry = load_window_geometry(paths.window)
        inner = config.backends
        if inner is None:
            if geometry is not None:
                inner = PtyBackendFactory(rows=geometry.height, cols=geometry.width)
            else:
                inner = PtyBackendFactory()
        self.workspace = Workspace(_UiLoopFactory(self, inner), SessionStore(paths))
        self.workspace.subtabs.output_sink = self._on_terminal_output
        self._theme: ThemePreset = resolve_theme(None)
        self._settings = load_terminal_settings(paths.settings)
        # Widget keys <-> domain objects; domain objects never see widgets.
        self._keys: dict[SubTab, str] = {}
        self._subtabs_by_key: dict[str, SubTab] = {}
        self._projects_by_key: dict[str, Project] = {}
        self._views: dict[str, TerminalView] = {}
        self._key_counter = itertools.count(1)
        self._torn_down = False
        self._log_handler: _TextualLogHandler | None = None
        self._stdout_tap: _TextualStreamTap | None = None
        self._stderr_tap: _TextualStreamTap | None = None
        self._original_stdout: TextIO | None = None
        self._original_stderr: TextIO | None = None
        self._dev_log_widget: Log | None = None
        self._dev_log_buffer: deque[str] = deque(maxlen=2000)
        self._ui_thread_id: int | None = None

    # ------------------------------------------------------------------
    # Textual lifecycle
    # ------------------------------------------------------------------
    async def on_mount(self) -> None:
        self._ui_thread_id = threading.get_ident()
        # Optionally mirror Python logs into the in-app dev log panel.
        if self._config.show_log_panel:
            self._enable_dev_console()

        paths = self._config.paths
        migrate_config_to_data(paths)
        self._theme = resolve_theme(load_theme_name(paths.theme))
        self._settings = load_terminal_settings(paths.settings)

        self.workspace.add_listener(self._on_workspace_change)
        self.workspace.load()
        active = self.workspace.active
        if active is not None:
            # Restores only the active project's tabs; the rest stay lazy.
            self.workspace.select_project(active)
        self._refresh_sidebar()
        self._refresh_tabs()

    async def on_ready(self) -> None:
        if not self._config.show_log_panel:
            return
        try:
            self._dev_log_widget = self.query_one("#dev-log", Log)
        except NoMatches:
            self._dev_log_widget = None
        else:
            self._flush_dev_log_buffer()

    def on_unmount(self) -> None:
        self.teardown()

    def teardown(self) -> None:
        """Record the window size, final save, stop every terminal."""

        if self._torn_down:
            return
        self._torn_down = True
        width, height = self.console.size
        save_window_geometry(
            self._config.paths.window, WindowGeometry(width=width, height=height)
        )
        self.workspace.remove_listener(self._on_workspace_change)
        if self._config.show_log_panel:
            self._disable_dev_console()
        self.workspace.shutdown()

    def compose(self) -> ComposeResult:
        with Vertical():
            with Horizontal(id="body"):
                with Vertical(id="sidebar"):
                    yield Static(SORT_LABELS[self.workspace.sort_mode], id="sort-indicator")
                    yield ListView(id="project-list")
                with Vertical(id="main"):
                    yield SubTabStrip()
                    with ContentSwitcher(id="terminals", initial="empty-state"):
                        yield Static(
                            "No project selected. Press Ctrl+O to add one.", id="empty-state"
                        )
            if self._config.show_log_panel:
                log_widget = Log(id="dev-log")
                log_widget.border_title = "Logs"
                yield log_widget
        yield Footer()

    def _attach_log_handler(self) -> None:
        """Attach a single shared handler that writes into the dev Log widget."""

        if self._log_handler is not None:
            return

        handler = _TextualLogHandler(self)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
        )

        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        self._log_handler = handler

    def _enable_dev_console(self) -> None:
        logging.getLogger().setLevel(logging.DEBUG)
        self._attach_log_handler()
        self._redirect_standard_streams()
        self._write_dev_log_line("[dev] Log console capturing logging + stdout/stderr")

    def _disable_dev_console(self) -> None:
        self._restore_standard_streams()
        if self._log_handler is not None:
            root_logger = logging.getLogger()
            root_logger.removeHandler(self._log_handler)
            self._log_handler = None
        self._dev_log_widget = None

    def _redirect_standard_streams(self) -> None:
        if self._stdout_tap is not None or self._stderr_tap is not None:
            return

        self._original_stdout = sys.stdout
        self._original_stderr = sys.stderr
        self._stdout_tap = _TextualStreamTap(self, self._original_stdout, label="stdout")
        self._stderr_tap = _TextualStreamTap(self, self._original_stderr, label="stderr")
        sys.stdout = self._stdout_tap  # type: ignore[assignment]
        sys.stderr = self._stderr_tap  # type: ignore[assignment]

    def _restore_standard_streams(self) -> None:
        if self._stdout_tap is not None:
            self._stdout_tap.flush()

        if self._stderr_tap is not None:
            self._stderr_tap.flush()

        if self._original_stdout is not None:
            sys.stdout = self._original_stdout  # type: ignore[assignment]
            self._original_stdout = None

        if self._original_stderr is not None:
            sys.stderr = self._original_stderr  # type: ignore[assignment]
            self._original_stderr = None

        self._stdout_tap = None
        self._stderr_tap = None

    def _submit_dev_log_line(self, line: str) -> None:
        if not self._config.show_log_panel:
            return

        # call_from_thread refuses the app's own thread.
        if threading.get_ident() == self._ui_thread_id:
            self._write_dev_log_line(line)
            return

        def _deliver() -> None:
            self._write_dev_log_line(line)

        try:
            self.call_from_thread(_deliver)
        except RuntimeError:
            self._dev_log_buffer.append(line)

    def _write_dev_log_line(self, line: str) -> None:
        if not line:
            return
        widget = self._dev_log_widget
        if widget is None:
            self._dev_log_buffer.append(line)
            return
        widget.write_line(line)

    def _flush_dev_log_buffer(self) -> None:
        widget = self._dev_log_widget
        if widget is None:
            return
        while self._dev_log_buffer:
            widget.write_line(self._dev_log_buffer.popleft())

    # ------------------------------------------------------------------
    # Workspace -> widgets
    # ------------------------------------------------------------------
    def _on_workspace_change(self, change: WorkspaceChange) -> None:
        if change.kind in (
            ChangeKind.PROJECTS,
            ChangeKind.ACTIVE_PROJECT,
            ChangeKind.SUBTABS,
            ChangeKind.SORT,
        ):
            self._refresh_sidebar()
        self._refresh_tabs()

    @staticmethod
    def _project_key(project: Project) -> str:
        return f"project-{project.insert_order}"

    def _refresh_sidebar(self) -> None:
        try:
            list_view = self.query_one("#project-list", ListView)
            indicator = self.query_one("#sort-indicator", Static)
        except NoMatches:
            return
        indicator.update(SORT_LABELS[self.workspace.sort_mode])

        ordered = self.workspace.display_order()
        self._projects_by_key = {self._project_key(project): project for project in ordered}
        list_view.clear()
        list_view.extend(
            ProjectRow(self._project_key(project), project.name, project.path, project.tab_count)
            for project in ordered
        )
        active = self.workspace.active
        if active is not None and active in ordered:
            self.call_after_refresh(self._highlight_row, ordered.index(active))

    def _highlight_row(self, index: int) -> None:
        try:
            self.query_one("#project-list", ListView).index = index
        except NoMatches:
            return

    def _key_for(self, subtab: SubTab) -> str:
        key = self._keys.get(subtab)
        if key is None:
            key = f"term-{next(self._key_counter)}"
            self._keys[subtab] = key
            self._subtabs_by_key[key] = subtab
        return key

    def _view_for(self, subtab: SubTab) -> TerminalView:
        key = self._key_for(subtab)
        view = self._views.get(key)
        if view is None:
            view = TerminalView(key)
            view.apply_theme(self._theme)
            view.apply_cursor_blink(self._settings.cursor_blink != CURSOR_BLINK_OFF)
            self._views[key] = view
            self.query_one("#terminals", ContentSwitcher).mount(view)
        return view

    def _forget(self, subtab: SubTab) -> None:
        key = self._keys.pop(subtab, None)
        if key is None:
            return
        self._subtabs_by_key.pop(key, None)
        view = self._views.pop(key, None)
        if view is not None:
            view.remove()

    def _refresh_tabs(self) -> None:
        try:
            strip = self.query_one(SubTabStrip)
        except NoMatches:
            return

        for subtab in list(self._keys):
            if not self.workspace.is_live(subtab):
                self._forget(subtab)

        project = self.workspace.active
        subtabs = project.subtabs if project is not None else []
        for subtab in subtabs:
            self._view_for(subtab)

        active = project.active_subtab if project is not None else None
        active_key = self._keys.get(active) if active is not None else None
        strip.show_tabs(((self._keys[s], s.name) for s in subtabs), active_key)
        self.call_after_refresh(self._show_terminal, active_key)

    def _show_terminal(self, key: str | None) -> None:
        try:
            switcher = self.query_one("#terminals", ContentSwitcher)
        except NoMatches:
            return
        if key is None or key not in self._views:
            switcher.current = "empty-state"
            return
        switcher.current = key
        self._views[key].focus_input()

    # ------------------------------------------------------------------
    # Backend events
    # ------------------------------------------------------------------
    def on_backend_event(self, message: BackendEvent) -> None:
        message.callback(*message.args)

    def _on_terminal_output(self, subtab: SubTab, data: bytes) -> None:
        if not self.workspace.is_live(subtab):
            return
        self._view_for(subtab).write_output(data)

    def on_terminal_view_resized(self, message: TerminalView.Resized) -> None:
        subtab = self._subtabs_by_key.get(message.view.tab_key)
        if subtab is None or subtab.backend is None:
            return
        subtab.backend.resize(message.rows, message.cols)

    @on(Input.Submitted, ".terminal-input")
    def _on_terminal_input(self, event: Input.Submitted) -> None:
        text = event.value
        event.input.value = ""
        view = event.input.query_ancestor(TerminalView)
        subtab = self._subtabs_by_key.get(view.tab_key)
        if subtab is None or not self.workspace.is_live(subtab) or subtab.backend is None:
            LOG.debug("Dropping input for a terminal that is gone")
            return
        subtab.backend.write(f"{text}\n".encode())

    # ------------------------------------------------------------------
    # Sidebar and strip events
    # ------------------------------------------------------------------
    @on(ListView.Selected, "#project-list")
    def _on_project_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if not isinstance(item, ProjectRow):
            return
        project = self._projects_by_key.get(item.project_key)
        if project is None or not self.workspace.is_live(project):
            LOG.debug("Selected row no longer maps to a project")
            return
        self.workspace.select_project(project)

    @on(SubTabStrip.TabActivated)
    def _on_tab_activated(self, message: SubTabStrip.TabActivated) -> None:
        subtab = self._subtabs_by_key.get(message.key)
        if subtab is not None:
            self.workspace.subtabs.activate(subtab)

    @on(SubTabStrip.TabCloseRequested)
    def _on_tab_close_requested(self, message: SubTabStrip.TabCloseRequested) -> None:
        subtab = self._subtabs_by_key.get(message.key)
        if subtab is not None and self.workspace.is_live(subtab):
            self.workspace.subtabs.close(subtab)

    @on(SubTabStrip.Reordered)
    def _on_tabs_reordered(self, message: SubTabStrip.Reordered) -> None:
        project = self.workspace.active
        if project is None:
            return
        ordered = [self._subtabs_by_key[key] for key in message.keys if key in self._subtabs_by_key]
        try:
            self.workspace.reorder_subtabs(project, ordered)
        except ValueError as exc:
            # A tab closed mid-gesture; fall back to the model's order.
            LOG.debug("Discarding drag result: %s", exc)
            self._refresh_tabs()

    # ------------------------------------------------------------------
    # Actions / key bindings
    # ------------------------------------------------------------------
    def action_add_project(self) -> None:
        def _on_path(value: str | None) -> None:
            if not value:
                return
            path = Path(value).expanduser()
            if not path.is_dir():
                self.notify(f"Not a directory: {value}", severity="error")
                return
            path = path.resolve()
            self.workspace.add_project(path.name or str(path), str(path))

        self.push_screen(AddProjectScreen(str(Path.cwd())), _on_path)

    def action_remove_project(self) -> None:
        removed = self.workspace.remove_active_project()
        if removed is not None:
            self.notify(f"Removed {removed.name}")

    def action_new_tab(self) -> None:
        project = self.workspace.active
        if project is not None:
            self.workspace.add_subtab(project)

    def action_close_tab(self) -> None:
        project = self.workspace.active
        subtab = project.active_subtab if project is not None else None
        if subtab is not None:
            self.workspace.subtabs.close(subtab)

    def _step_tab(self, step: int) -> None:
        project = self.workspace.active
        if project is None or project.active_subtab is None:
            return
        subtabs = project.subtabs
        index = subtabs.index(project.active_subtab)
        self.workspace.subtabs.activate(subtabs[(index + step) % len(subtabs)])

    def action_next_tab(self) -> None:
        self._step_tab(1)

    def action_previous_tab(self) -> None:
        self._step_tab(-1)

    def action_move_tab(self, step: int) -> None:
        project = self.workspace.active
        if project is None or project.active_subtab is None:
            return
        index = project.subtabs.index(project.active_subtab)
        target = index + step
        if 0 <= target < project.tab_count:
            self.workspace.subtabs.reorder(project, index, target)

    def action_rename_tab(self) -> None:
        project = self.workspace.active
        subtab = project.active_subtab if project is not None else None
        if subtab is None:
            return

        def _on_name(value: str | None) -> None:
            if value is None or not self.workspace.is_live(subtab):
                LOG.debug("Rename dismissed or tab already closed")
                return
            self.workspace.subtabs.rename(subtab, value)

        self.push_screen(RenameSubTabScreen(subtab.name), _on_name)

    def action_cycle_sort(self) -> None:
        mode = self.workspace.cycle_sort_mode()
        self.notify(SORT_LABELS[mode])

    def action_cycle_theme(self) -> None:
        self._theme = next_theme(self._theme.name)
        save_theme_name(self._config.paths.theme, self._theme.name)
        for view in self._views.values():
            view.apply_theme(self._theme)
        self.notify(f"Theme: {self._theme.name}")

    def action_toggle_cursor_blink(self) -> None:
        blinking = self._settings.cursor_blink != CURSOR_BLINK_OFF
        self._settings.cursor_blink = CURSOR_BLINK_OFF if blinking else 1
        save_terminal_settings(self._config.paths.settings, self._settings)
        for view in self._views.values():
            view.apply_cursor_blink(not blinking)
