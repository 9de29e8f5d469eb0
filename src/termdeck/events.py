"""Change notifications emitted by the workspace after each mutation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .models import Project


class ChangeKind(str, Enum):
    PROJECTS = "projects"
    ACTIVE_PROJECT = "active_project"
    SUBTABS = "subtabs"
    ACTIVE_SUBTAB = "active_subtab"
    ORDER = "order"
    TITLE = "title"
    SORT = "sort"


@dataclass(slots=True, frozen=True)
class WorkspaceChange:
    kind: ChangeKind
    project: Project | None = None


Listener = Callable[[WorkspaceChange], None]
Notifier = Callable[[ChangeKind, "Project | None"], None]
