from __future__ import annotations

import json
from pathlib import Path

import pytest

from termdeck.errors import SessionDocumentError
from termdeck.models import SavedSubTab, SortMode
from termdeck.paths import AppPaths
from termdeck.session_store import (
    ProjectRecord,
    SessionDocument,
    SessionStore,
    deserialize,
    document_from_dict,
    dumps,
    loads,
    parse_legacy_projects,
    parse_legacy_sort_mode,
    serialize,
)


def test_save_then_load_reproduces_the_document(make_workspace, factory) -> None:
    first = make_workspace()
    api = first.add_project("api", "/src/api")
    first.add_subtab(api)
    api.subtabs[1].name = "server"
    factory.spawned[1].cwd = "/src/api/cmd"
    first.add_project("web", "/src/web")
    first.select_project(api)
    first.cycle_sort_mode()
    before = serialize(first)

    second = make_workspace()
    assert second.load() is True

    assert serialize(second) == before
    assert before.sort_mode is SortMode.ALPHABETICAL
    assert before.active_project_index == 0
    assert before.projects[0].subtabs == [
        SavedSubTab("Tab 1", "/src/api"),
        SavedSubTab("server", "/src/api/cmd"),
    ]


def test_loading_spawns_nothing(make_workspace, factory) -> None:
    first = make_workspace()
    first.add_project("api", "/src/api")
    first.add_project("web", "/src/web")
    spawned_before = len(factory.spawned)

    second = make_workspace()
    second.load()

    assert len(factory.spawned) == spawned_before
    assert all(not project.initialized for project in second.projects)


def test_live_directory_falls_back_to_project_path(workspace, factory) -> None:
    workspace.add_project("api", "/src/api")
    factory.spawned[0].cwd = None

    document = serialize(workspace)

    assert document.projects[0].subtabs[0].working_dir == "/src/api"


def test_uninitialized_project_without_placeholders_serializes_empty() -> None:
    document = SessionDocument(projects=[ProjectRecord(name="api", path="/src/api")])
    projects = deserialize(document)

    assert projects[0].placeholders == []
    assert projects[0].insert_order == 0


def test_dumps_is_pretty_printed_with_mode_spelling() -> None:
    document = SessionDocument(
        sort_mode=SortMode.MOST_RECENTLY_USED,
        projects=[ProjectRecord(name="api", path="/src/api", last_used=42)],
    )

    text = dumps(document)

    assert text.endswith("\n")
    assert '\n  "sort_mode": "mru"' in text
    assert json.loads(text)["projects"][0] == {
        "name": "api",
        "path": "/src/api",
        "last_used": 42,
        "active_subtab_index": 0,
        "subtabs": [],
    }


def test_missing_fields_get_defaults() -> None:
    document = document_from_dict(
        {
            "sort_mode": "bogus",
            "projects": [
                {"name": "no-path"},
                {
                    "name": "api",
                    "path": "/src/api",
                    "subtabs": [{"working_dir": "/tmp"}, {"name": "logs"}],
                    "active_subtab_index": 1,
                },
            ],
        }
    )

    assert document.sort_mode is SortMode.MANUAL
    assert document.active_project_index == 0
    assert [record.name for record in document.projects] == ["api"]
    record = document.projects[0]
    assert record.last_used == 0
    assert record.active_subtab_index == 1
    assert record.subtabs == [SavedSubTab("Tab", "/tmp"), SavedSubTab("logs", "/src/api")]


@pytest.mark.parametrize("text", ["{not json", "[]", '{"projects": {}}'])
def test_malformed_documents_raise(text: str) -> None:
    with pytest.raises(SessionDocumentError):
        loads(text)


def test_legacy_projects_lines() -> None:
    records = parse_legacy_projects("1700000000|/home/me/api\n\n/home/me/web/\n|/odd\n")

    assert [(r.name, r.path, r.last_used) for r in records] == [
        ("api", "/home/me/api", 1700000000),
        ("web", "/home/me/web/", 0),
        ("odd", "|/odd", 0),
    ]


def test_legacy_sort_mode() -> None:
    assert parse_legacy_sort_mode("alpha\n") is SortMode.ALPHABETICAL
    assert parse_legacy_sort_mode("mru") is SortMode.MOST_RECENTLY_USED
    assert parse_legacy_sort_mode("none") is SortMode.MANUAL
    assert parse_legacy_sort_mode("") is SortMode.MANUAL


def test_migration_writes_session_once(paths: AppPaths) -> None:
    paths.ensure_data_dir()
    paths.legacy_projects.write_text("1700000000|/home/me/api\n/home/me/web\n", encoding="utf-8")
    paths.legacy_sort.write_text("mru\n", encoding="utf-8")
    store = SessionStore(paths)

    migrated = store.load()

    assert migrated is not None
    assert migrated.sort_mode is SortMode.MOST_RECENTLY_USED
    assert [record.name for record in migrated.projects] == ["api", "web"]
    assert all(record.subtabs == [] for record in migrated.projects)
    written = paths.session.read_bytes()

    again = store.load()

    assert again == migrated
    assert paths.session.read_bytes() == written


def test_store_without_any_files_returns_none(store: SessionStore) -> None:
    assert store.load() is None
    assert not store.exists()


def test_unreadable_session_raises(paths: AppPaths) -> None:
    paths.ensure_data_dir()
    paths.session.write_text('{"projects": 3}', encoding="utf-8")

    with pytest.raises(SessionDocumentError):
        SessionStore(paths).read()


def test_write_creates_data_dir(tmp_path: Path) -> None:
    store = SessionStore(AppPaths(data_dir=tmp_path / "nested" / "data"))

    store.write(SessionDocument())

    assert json.loads(store.path.read_text(encoding="utf-8")) == {
        "active_project_index": 0,
        "sort_mode": "none",
        "projects": [],
    }
