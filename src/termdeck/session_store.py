"""Session document codec: ``session.json`` plus the legacy line formats.

The session is rewritten in full on every change. ``serialize`` walks the
workspace in insertion order (never display order); ``deserialize`` only
ever produces uninitialized projects carrying placeholders, so loading a
session spawns no terminals.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .errors import SessionDocumentError
from .models import Initialized, Project, SavedSubTab, SortMode, Uninitialized
from .paths import AppPaths

if TYPE_CHECKING:
    from .workspace import Workspace

LOG = logging.getLogger(__name__)

DEFAULT_SUBTAB_NAME = "Tab"


@dataclass(slots=True)
class ProjectRecord:
    name: str
    path: str
    last_used: int = 0
    active_subtab_index: int = 0
    subtabs: list[SavedSubTab] = field(default_factory=list)


@dataclass(slots=True)
class SessionDocument:
    active_project_index: int = 0
    sort_mode: SortMode = SortMode.MANUAL
    projects: list[ProjectRecord] = field(default_factory=list)


# ----------------------------------------------------------------------
# Workspace <-> document
# ----------------------------------------------------------------------
def serialize(workspace: Workspace) -> SessionDocument:
    """Capture the persistent state of ``workspace``."""

    projects = workspace.projects
    active_index = 0
    if workspace.active is not None and workspace.active in projects:
        active_index = projects.index(workspace.active)

    return SessionDocument(
        active_project_index=active_index,
        sort_mode=workspace.sort_mode,
        projects=[_record_for(project) for project in projects],
    )


def _record_for(project: Project) -> ProjectRecord:
    record = ProjectRecord(name=project.name, path=project.path, last_used=project.last_used)
    state = project.state
    if isinstance(state, Initialized):
        record.active_subtab_index = state.active_index or 0
        record.subtabs = [
            SavedSubTab(name=subtab.name, working_dir=_live_directory(subtab.backend, project.path))
            for subtab in state.subtabs
        ]
    elif state.placeholders:
        record.active_subtab_index = state.saved_active_index
        record.subtabs = list(state.placeholders)
    return record


def _live_directory(backend: Any, fallback: str) -> str:
    if backend is None:
        return fallback
    try:
        current = backend.current_directory()
    except OSError as exc:
        LOG.debug("Could not query terminal directory: %s", exc)
        return fallback
    return current or fallback


def deserialize(document: SessionDocument) -> list[Project]:
    """Build uninitialized projects from ``document``; nothing is spawned."""

    projects: list[Project] = []
    for order, record in enumerate(document.projects):
        state = Uninitialized(
            placeholders=list(record.subtabs),
            saved_active_index=record.active_subtab_index,
        )
        projects.append(
            Project(
                name=record.name,
                path=record.path,
                insert_order=order,
                last_used=record.last_used,
                state=state,
            )
        )
    return projects


# ----------------------------------------------------------------------
# Document <-> JSON
# ----------------------------------------------------------------------
def document_to_dict(document: SessionDocument) -> dict[str, Any]:
    return {
        "active_project_index": document.active_project_index,
        "sort_mode": document.sort_mode.value,
        "projects": [
            {
                "name": record.name,
                "path": record.path,
                "last_used": record.last_used,
                "active_subtab_index": record.active_subtab_index,
                "subtabs": [
                    {"name": saved.name, "working_dir": saved.working_dir}
                    for saved in record.subtabs
                ],
            }
            for record in document.projects
        ],
    }


def document_from_dict(data: Any) -> SessionDocument:
    """Parse a decoded ``session.json``.

    Entries lacking a name or path are skipped; sub-tabs default their name
    to ``"Tab"`` and their directory to the project path.

    Raises:
        SessionDocumentError: if the root is not an object or ``projects``
            is not a list.
    """

    if not isinstance(data, dict):
        raise SessionDocumentError("session document root is not an object")

    document = SessionDocument(
        active_project_index=_as_int(data.get("active_project_index"), 0),
        sort_mode=SortMode.parse(data.get("sort_mode")),
    )

    raw_projects = data.get("projects", [])
    if not isinstance(raw_projects, list):
        raise SessionDocumentError("session document 'projects' is not a list")

    for entry in raw_projects:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        path = entry.get("path")
        if not isinstance(name, str) or not isinstance(path, str):
            LOG.debug("Skipping project entry without name/path: %r", entry)
            continue

        record = ProjectRecord(name=name, path=path, last_used=_as_int(entry.get("last_used"), 0))
        raw_subtabs = entry.get("subtabs")
        if isinstance(raw_subtabs, list):
            for sub in raw_subtabs:
                if not isinstance(sub, dict):
                    continue
                sub_name = sub.get("name")
                working_dir = sub.get("working_dir")
                record.subtabs.append(
                    SavedSubTab(
                        name=sub_name if isinstance(sub_name, str) else DEFAULT_SUBTAB_NAME,
                        working_dir=working_dir if isinstance(working_dir, str) else path,
                    )
                )
            record.active_subtab_index = _as_int(entry.get("active_subtab_index"), 0)
        document.projects.append(record)

    return document


def dumps(document: SessionDocument) -> str:
    return json.dumps(document_to_dict(document), ensure_ascii=False, indent=2) + "\n"


def loads(text: str) -> SessionDocument:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SessionDocumentError(f"session document is not valid JSON: {exc}") from exc
    return document_from_dict(data)


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


# ----------------------------------------------------------------------
# Legacy formats
# ----------------------------------------------------------------------
def parse_legacy_projects(text: str) -> list[ProjectRecord]:
    """Parse ``projects.conf``: ``<unix_timestamp>|<path>`` or bare ``<path>``."""

    records: list[ProjectRecord] = []
    for line in text.splitlines():
        if not line:
            continue
        last_used = 0
        path = line
        stamp, sep, rest = line.partition("|")
        if sep and stamp:
            last_used = _parse_leading_int(stamp)
            path = rest
        records.append(ProjectRecord(name=_basename(path), path=path, last_used=last_used))
    return records


def parse_legacy_sort_mode(text: str) -> SortMode:
    first_line = text.splitlines()[0] if text else ""
    return SortMode.parse(first_line.strip())


def _parse_leading_int(text: str) -> int:
    text = text.strip()
    end = 0
    if text[:1] in ("-", "+"):
        end = 1
    while end < len(text) and text[end].isdigit():
        end += 1
    try:
        return int(text[:end])
    except ValueError:
        return 0


def _basename(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return path
    return os.path.basename(stripped)


# ----------------------------------------------------------------------
# Files
# ----------------------------------------------------------------------
class SessionStore:
    """Reads and writes the session document under the data directory."""

    def __init__(self, paths: AppPaths) -> None:
        self._paths = paths

    @property
    def path(self) -> Path:
        return self._paths.session

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> SessionDocument | None:
        """Return the stored document, or ``None`` when there is none.

        Raises:
            SessionDocumentError: if the file exists but cannot be parsed.
        """

        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SessionDocumentError(f"cannot read {self.path}: {exc}") from exc
        return loads(text)

    def write(self, document: SessionDocument) -> None:
        self._paths.ensure_data_dir()
        self.path.write_text(dumps(document), encoding="utf-8")
        LOG.debug("Session saved to %s (%d project(s))", self.path, len(document.projects))

    def read_legacy(self) -> SessionDocument | None:
        """Read ``projects.conf`` (and ``sort.conf``), or ``None`` if absent."""

        try:
            text = self._paths.legacy_projects.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            LOG.warning("Cannot read legacy project list %s: %s", self._paths.legacy_projects, exc)
            return None

        document = SessionDocument(projects=parse_legacy_projects(text))
        try:
            document.sort_mode = parse_legacy_sort_mode(
                self._paths.legacy_sort.read_text(encoding="utf-8")
            )
        except FileNotFoundError:
            pass
        except OSError as exc:
            LOG.warning("Cannot read legacy sort mode %s: %s", self._paths.legacy_sort, exc)
        return document

    def load(self) -> SessionDocument | None:
        """Return the session, migrating the legacy format on first run.

        A migrated document is written back immediately as ``session.json``,
        so the legacy files are only ever read once.
        """

        if self.exists():
            return self.read()

        legacy = self.read_legacy()
        if legacy is None:
            LOG.debug("No session document at %s", self.path)
            return None

        LOG.info("Migrating %d project(s) from %s", len(legacy.projects), self._paths.legacy_projects)
        try:
            self.write(legacy)
        except OSError as exc:
            LOG.error("Cannot write migrated session to %s: %s", self.path, exc)
        return legacy
