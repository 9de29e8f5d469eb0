from __future__ import annotations

from pathlib import Path

import pytest

from termdeck import paths as paths_module
from termdeck.paths import AppPaths, default_paths, migrate_config_to_data


def write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_relocation_copies_forward(paths: AppPaths) -> None:
    assert paths.legacy_config_dir is not None
    write(paths.legacy_config_dir / "projects.conf", "/src/api\n")
    write(paths.legacy_config_dir / "sort.conf", "alpha\n")
    write(paths.legacy_config_dir / "theme.conf", "Nord\n")
    write(paths.legacy_config_dir / "unrelated.conf", "x\n")

    copied = migrate_config_to_data(paths)

    assert sorted(p.name for p in copied) == ["projects.conf", "sort.conf", "theme.conf"]
    assert paths.legacy_projects.read_text(encoding="utf-8") == "/src/api\n"
    assert paths.theme.read_text(encoding="utf-8") == "Nord\n"
    assert not (paths.data_dir / "unrelated.conf").exists()
    # Copied, never moved.
    assert (paths.legacy_config_dir / "projects.conf").exists()


def test_relocation_does_not_overwrite(paths: AppPaths) -> None:
    assert paths.legacy_config_dir is not None
    write(paths.legacy_config_dir / "projects.conf", "/old\n")
    write(paths.legacy_config_dir / "theme.conf", "Nord\n")
    write(paths.theme, "Dracula\n")

    migrate_config_to_data(paths)

    assert paths.theme.read_text(encoding="utf-8") == "Dracula\n"
    assert paths.legacy_projects.read_text(encoding="utf-8") == "/old\n"


def test_relocation_skipped_once_data_dir_has_projects(paths: AppPaths) -> None:
    assert paths.legacy_config_dir is not None
    write(paths.legacy_config_dir / "projects.conf", "/old\n")
    write(paths.legacy_config_dir / "theme.conf", "Nord\n")
    write(paths.legacy_projects, "/new\n")

    assert migrate_config_to_data(paths) == []
    assert not paths.theme.exists()


def test_relocation_needs_a_separate_config_dir(tmp_path: Path) -> None:
    assert migrate_config_to_data(AppPaths(data_dir=tmp_path)) == []
    assert migrate_config_to_data(AppPaths(data_dir=tmp_path, legacy_config_dir=tmp_path)) == []


def test_default_paths_use_platform_directories(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        paths_module.platformdirs, "user_data_dir", lambda app: str(tmp_path / "share" / app)
    )
    monkeypatch.setattr(
        paths_module.platformdirs, "user_config_dir", lambda app: str(tmp_path / "config" / app)
    )

    resolved = default_paths()

    assert resolved.data_dir == tmp_path / "share" / "termdeck"
    assert resolved.legacy_config_dir == tmp_path / "config" / "termdeck"
    assert resolved.session == tmp_path / "share" / "termdeck" / "session.json"
    assert resolved.window.name == "window.conf"
    assert resolved.settings.name == "settings.conf"
