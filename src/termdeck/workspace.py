"""The workspace: every project, the active one, and the sort mode.

A :class:`Workspace` is constructed explicitly and passed to whoever needs
it. Its lifetime is bracketed by :meth:`Workspace.load` and
:meth:`Workspace.shutdown` (or a ``with`` block doing both).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from types import TracebackType

from . import session_store
from .backend import TerminalFactory, default_shell_command
from .errors import SessionDocumentError
from .events import ChangeKind, Listener, WorkspaceChange
from .lifecycle import ProjectLifecycle, default_subtab_name
from .models import Initialized, Project, SortMode, SubTab, Uninitialized
from .session_store import SessionStore
from .sorting import next_sort_mode, sort_projects
from .subtabs import SubTabManager

LOG = logging.getLogger(__name__)

Clock = Callable[[], int]


def wall_clock_micros() -> int:
    return time.time_ns() // 1000


class Workspace:
    def __init__(
        self,
        backends: TerminalFactory,
        store: SessionStore | None = None,
        *,
        clock: Clock = wall_clock_micros,
        shell_command: Callable[[], list[str]] = default_shell_command,
    ) -> None:
        self._store = store
        self._clock = clock
        self._projects: list[Project] = []
        self._next_insert_order = 0
        self._listeners: list[Listener] = []
        self._closed = False
        self.active: Project | None = None
        self.sort_mode = SortMode.MANUAL
        self.subtabs = SubTabManager(
            backends,
            persist=self.save,
            notify=self._notify,
            shell_command=shell_command,
        )
        self.lifecycle = ProjectLifecycle(self.subtabs)

    def __enter__(self) -> Workspace:
        self.load()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def projects(self) -> list[Project]:
        """Projects in insertion order (not display order)."""

        return list(self._projects)

    def display_order(self) -> list[Project]:
        return sort_projects(self._projects, self.sort_mode)

    def is_live(self, target: Project | SubTab) -> bool:
        if isinstance(target, SubTab):
            return self.is_live(target.project) and self.subtabs.is_live(target)
        return any(project is target for project in self._projects)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, kind: ChangeKind, project: Project | None = None) -> None:
        change = WorkspaceChange(kind=kind, project=project)
        for listener in list(self._listeners):
            listener(change)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    def add_project(self, name: str, path: str) -> Project:
        project = Project(
            name=name,
            path=path,
            insert_order=self._next_insert_order,
            state=Initialized(),
        )
        self._next_insert_order += 1
        self._projects.append(project)
        self.active = project
        self.subtabs.create(project, default_subtab_name(1), path)
        project.subtab_counter = 1
        LOG.info("Added project %s (%s)", name, path)
        self._notify(ChangeKind.PROJECTS, project)
        self.save()
        return project

    def remove_active_project(self) -> Project | None:
        """Drop the active project and its terminals; returns it, if any."""

        project = self.active
        if project is None:
            return None

        self.subtabs.release_all(project)
        project.state = Uninitialized()
        self._projects.remove(project)
        self.active = None
        LOG.info("Removed project %s", project.name)
        self._notify(ChangeKind.PROJECTS, project)

        if self._projects:
            self.select_project(self._projects[0])
        else:
            self._notify(ChangeKind.ACTIVE_PROJECT, None)
            self.save()
        return project

    def select_project(self, project: Project) -> None:
        """User selection: mark it used, materialize its tabs, persist."""

        if not self.is_live(project):
            LOG.debug("Ignoring selection of removed project %s", project.name)
            return
        self.active = project
        project.last_used = self._clock()
        self.lifecycle.ensure_initialized(project)
        self._notify(ChangeKind.ACTIVE_PROJECT, project)
        self.save()

    def cycle_sort_mode(self) -> SortMode:
        self.sort_mode = next_sort_mode(self.sort_mode)
        LOG.info("Sort mode is now %s", self.sort_mode.name)
        self._notify(ChangeKind.SORT, None)
        self.save()
        return self.sort_mode

    # ------------------------------------------------------------------
    # Sub-tabs
    # ------------------------------------------------------------------
    def add_subtab(self, project: Project) -> SubTab | None:
        if not self.is_live(project):
            LOG.debug("Ignoring new tab for removed project %s", project.name)
            return None
        subtab = self.lifecycle.add_subtab(project)
        self.save()
        return subtab

    def reorder_subtabs(self, project: Project, ordered: Sequence[SubTab]) -> None:
        """Commit the final visual order of a drag gesture."""

        if not self.is_live(project):
            return
        self.subtabs.apply_order(project, ordered)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self) -> None:
        if self._store is None:
            return
        document = session_store.serialize(self)
        try:
            self._store.write(document)
        except OSError as exc:
            LOG.error("Failed to save session to %s: %s", self._store.path, exc)

    def load(self) -> bool:
        """Install the stored session; returns whether one was found.

        Loaded projects stay uninitialized, so nothing is spawned here.
        """

        if self._store is None:
            return False
        try:
            document = self._store.load()
        except SessionDocumentError as exc:
            LOG.warning("Ignoring unreadable session %s: %s", self._store.path, exc)
            return False
        if document is None:
            return False

        for project in self._projects:
            self.subtabs.release_all(project)
        self._projects = session_store.deserialize(document)
        self._next_insert_order = len(self._projects)
        self.sort_mode = document.sort_mode
        index = document.active_project_index
        self.active = self._projects[index] if 0 <= index < len(self._projects) else None
        LOG.info("Loaded %d project(s) from %s", len(self._projects), self._store.path)
        self._notify(ChangeKind.PROJECTS, None)
        return True

    def shutdown(self) -> None:
        """Final save, then stop every terminal. Safe to call twice."""

        if self._closed:
            return
        self._closed = True
        self.save()
        for project in self._projects:
            self.subtabs.release_all(project)
        LOG.debug("Workspace shut down")
