"""Data model for the termdeck workspace: projects, sub-tabs and placeholders."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .backend import TerminalBackend


class SortMode(str, Enum):
    """Ordering applied to the project sidebar.

    Values double as the on-disk spelling in the session document.
    """

    MANUAL = "none"
    ALPHABETICAL = "alpha"
    MOST_RECENTLY_USED = "mru"

    @classmethod
    def parse(cls, value: object) -> SortMode:
        """Return the mode spelled ``value``; anything unknown is manual."""

        for mode in cls:
            if mode.value == value:
                return mode
        return cls.MANUAL


class ProjectStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


@dataclass(slots=True, frozen=True)
class SavedSubTab:
    """Metadata standing in for a sub-tab that has not been spawned yet."""

    name: str
    working_dir: str


@dataclass(slots=True, eq=False)
class SubTab:
    """One terminal inside a project."""

    name: str
    working_dir: str
    project: Project = field(repr=False)
    backend: TerminalBackend | None = field(default=None, repr=False)
    # Guards against re-entrant close (exit event racing an explicit close).
    closing: bool = False
    # Set once the user renames the tab; title changes stop renaming it.
    title_locked: bool = False


@dataclass(slots=True)
class Initialized:
    """Live sub-tabs with their active pointer."""

    subtabs: list[SubTab] = field(default_factory=list)
    active: SubTab | None = None

    @property
    def active_index(self) -> int | None:
        if self.active is None:
            return None
        return self.subtabs.index(self.active)


@dataclass(slots=True)
class Uninitialized:
    """Placeholders to restore lazily on first visit (possibly none)."""

    placeholders: list[SavedSubTab] = field(default_factory=list)
    saved_active_index: int = 0


SubTabState = Union[Initialized, Uninitialized]


@dataclass(slots=True, eq=False)
class Project:
    """A user-defined workspace root holding terminal sub-tabs."""

    name: str
    path: str
    insert_order: int
    # Microseconds since the epoch of the last user selection.
    last_used: int = 0
    state: SubTabState = field(default_factory=Uninitialized)
    # Highest "Tab N" number handed out so far.
    subtab_counter: int = 0

    @property
    def status(self) -> ProjectStatus:
        if isinstance(self.state, Initialized):
            return ProjectStatus.INITIALIZED
        return ProjectStatus.UNINITIALIZED

    @property
    def initialized(self) -> bool:
        return isinstance(self.state, Initialized)

    @property
    def subtabs(self) -> list[SubTab]:
        """Live sub-tabs in display order (empty while uninitialized)."""

        if isinstance(self.state, Initialized):
            return list(self.state.subtabs)
        return []

    @property
    def placeholders(self) -> list[SavedSubTab]:
        if isinstance(self.state, Uninitialized):
            return list(self.state.placeholders)
        return []

    @property
    def active_subtab(self) -> SubTab | None:
        if isinstance(self.state, Initialized):
            return self.state.active
        return None

    @property
    def tab_count(self) -> int:
        """Number of open terminals, shown as the sidebar badge."""

        if isinstance(self.state, Initialized):
            return len(self.state.subtabs)
        return 0
