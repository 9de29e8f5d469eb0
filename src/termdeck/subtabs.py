"""Create, close and reorder the terminal sub-tabs of a project."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from functools import partial

from .backend import TerminalBackend, TerminalFactory, default_shell_command
from .errors import TerminalSpawnError
from .events import ChangeKind, Notifier
from .models import Initialized, Project, SubTab, Uninitialized

LOG = logging.getLogger(__name__)

OutputSink = Callable[[SubTab, bytes], None]


class SubTabManager:
    """Owns each project's ordered sub-tab list and its active pointer.

    ``persist`` is invoked after every change that alters the session
    document; ``notify`` lets the UI refresh (tab strip, count badge).
    """

    def __init__(
        self,
        backends: TerminalFactory,
        *,
        persist: Callable[[], None],
        notify: Notifier,
        shell_command: Callable[[], list[str]] = default_shell_command,
    ) -> None:
        self._backends = backends
        self._persist = persist
        self._notify = notify
        self._shell_command = shell_command
        self.output_sink: OutputSink | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @staticmethod
    def is_live(subtab: SubTab) -> bool:
        """True while ``subtab`` is still part of its project and not closing."""

        state = subtab.project.state
        return (
            not subtab.closing
            and isinstance(state, Initialized)
            and any(candidate is subtab for candidate in state.subtabs)
        )

    # ------------------------------------------------------------------
    # Create / close
    # ------------------------------------------------------------------
    def create(self, project: Project, name: str, working_dir: str) -> SubTab:
        state = project.state
        if not isinstance(state, Initialized):
            raise ValueError(f"project {project.name!r} is not initialized")

        subtab = SubTab(name=name, working_dir=working_dir, project=project)
        state.subtabs.append(subtab)
        state.active = subtab
        subtab.backend = self._spawn(subtab)
        LOG.info("Created sub-tab %r in %s (cwd=%s)", name, project.name, working_dir)
        self._notify(ChangeKind.SUBTABS, project)
        return subtab

    def _spawn(self, subtab: SubTab) -> TerminalBackend | None:
        try:
            return self._backends.spawn(
                subtab.working_dir,
                self._shell_command(),
                on_title=partial(self.handle_title_changed, subtab),
                on_exit=partial(self.handle_child_exited, subtab),
                on_output=partial(self._forward_output, subtab),
            )
        except (TerminalSpawnError, OSError) as exc:
            # The tab stays, without a working terminal.
            LOG.warning("Terminal for %r failed to start: %s", subtab.name, exc)
            return None

    def close(self, subtab: SubTab) -> None:
        """Close ``subtab``; calling it again while closing does nothing."""

        if subtab.closing:
            return
        subtab.closing = True

        project = subtab.project
        state = project.state
        if not isinstance(state, Initialized) or subtab not in state.subtabs:
            LOG.debug("Sub-tab %r already detached from %s", subtab.name, project.name)
            return

        index = state.subtabs.index(subtab)
        was_last = len(state.subtabs) == 1
        if state.active is subtab and not was_last:
            if index + 1 < len(state.subtabs):
                state.active = state.subtabs[index + 1]
            else:
                state.active = state.subtabs[index - 1]

        state.subtabs.remove(subtab)
        if state.active is subtab:
            state.active = None
        self._release(subtab)
        LOG.info("Closed sub-tab %r in %s", subtab.name, project.name)

        if was_last:
            # Back to lazy: the next visit creates a fresh default tab.
            project.state = Uninitialized()

        self._notify(ChangeKind.SUBTABS, project)
        self._persist()

    def release_all(self, project: Project) -> None:
        """Terminate every backend of ``project`` without touching its list."""

        for subtab in project.subtabs:
            subtab.closing = True
            self._release(subtab)

    def _release(self, subtab: SubTab) -> None:
        backend = subtab.backend
        subtab.backend = None
        if backend is None:
            return
        try:
            backend.terminate()
        except OSError as exc:
            LOG.debug("Terminating %r failed: %s", subtab.name, exc)

    # ------------------------------------------------------------------
    # Active pointer, names, order
    # ------------------------------------------------------------------
    def activate(self, subtab: SubTab, *, persist: bool = True) -> None:
        if not self.is_live(subtab):
            return
        state = subtab.project.state
        assert isinstance(state, Initialized)
        state.active = subtab
        self._notify(ChangeKind.ACTIVE_SUBTAB, subtab.project)
        if persist:
            self._persist()

    def rename(self, subtab: SubTab, name: str) -> bool:
        """User rename; later title changes no longer override it."""

        name = name.strip()
        if not name or not self.is_live(subtab):
            return False
        subtab.name = name
        subtab.title_locked = True
        self._notify(ChangeKind.TITLE, subtab.project)
        self._persist()
        return True

    def reorder(self, project: Project, from_index: int, to_index: int) -> None:
        """Move one sub-tab; the active sub-tab stays the same object."""

        state = project.state
        if not isinstance(state, Initialized):
            raise ValueError(f"project {project.name!r} is not initialized")
        count = len(state.subtabs)
        if not (0 <= from_index < count and 0 <= to_index < count):
            raise IndexError(f"sub-tab index out of range: {from_index} -> {to_index}")
        if from_index == to_index:
            return
        state.subtabs.insert(to_index, state.subtabs.pop(from_index))
        self._notify(ChangeKind.ORDER, project)
        self._persist()

    def apply_order(self, project: Project, ordered: Sequence[SubTab]) -> None:
        """Replace the order with ``ordered``, a permutation of the live sub-tabs."""

        state = project.state
        if not isinstance(state, Initialized):
            raise ValueError(f"project {project.name!r} is not initialized")
        if len(ordered) != len(state.subtabs) or {id(s) for s in ordered} != {
            id(s) for s in state.subtabs
        }:
            raise ValueError("new order must contain exactly the current sub-tabs")
        state.subtabs[:] = list(ordered)
        self._notify(ChangeKind.ORDER, project)
        self._persist()

    # ------------------------------------------------------------------
    # Backend events (delivered on the UI thread)
    # ------------------------------------------------------------------
    def handle_title_changed(self, subtab: SubTab, title: str) -> None:
        if not title or subtab.title_locked or not self.is_live(subtab):
            return
        subtab.name = title
        self._notify(ChangeKind.TITLE, subtab.project)

    def handle_child_exited(self, subtab: SubTab, status: int | None = None) -> None:
        if subtab.closing:
            return
        LOG.info("Terminal %r exited (status=%s)", subtab.name, status)
        self.close(subtab)

    def _forward_output(self, subtab: SubTab, data: bytes) -> None:
        sink = self.output_sink
        if sink is not None and not subtab.closing:
            sink(subtab, data)
