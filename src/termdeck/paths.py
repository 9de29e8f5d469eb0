"""Locations of every file termdeck persists, and the one-time relocation
of files from the old config directory into the data directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

import platformdirs

LOG = logging.getLogger(__name__)

APP_NAME = "termdeck"

SESSION_FILE = "session.json"
LEGACY_PROJECTS_FILE = "projects.conf"
LEGACY_SORT_FILE = "sort.conf"
THEME_FILE = "theme.conf"
WINDOW_FILE = "window.conf"
SETTINGS_FILE = "settings.conf"

# Files an older release kept under the config directory.
RELOCATED_FILES = (LEGACY_PROJECTS_FILE, LEGACY_SORT_FILE, THEME_FILE)


@dataclass(slots=True)
class AppPaths:
    """Per-application data directory plus the pre-relocation config directory."""

    data_dir: Path
    legacy_config_dir: Path | None = None

    @property
    def session(self) -> Path:
        return self.data_dir / SESSION_FILE

    @property
    def legacy_projects(self) -> Path:
        return self.data_dir / LEGACY_PROJECTS_FILE

    @property
    def legacy_sort(self) -> Path:
        return self.data_dir / LEGACY_SORT_FILE

    @property
    def theme(self) -> Path:
        return self.data_dir / THEME_FILE

    @property
    def window(self) -> Path:
        return self.data_dir / WINDOW_FILE

    @property
    def settings(self) -> Path:
        return self.data_dir / SETTINGS_FILE

    def ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)


def default_paths() -> AppPaths:
    return AppPaths(
        data_dir=Path(platformdirs.user_data_dir(APP_NAME)),
        legacy_config_dir=Path(platformdirs.user_config_dir(APP_NAME)),
    )


def migrate_config_to_data(paths: AppPaths) -> list[Path]:
    """Copy files forward from the old config directory, once.

    Runs only while the data directory has no ``projects.conf``; each file is
    copied (never moved) and only when its destination does not exist yet.
    Returns the destinations written.
    """

    old_dir = paths.legacy_config_dir
    if old_dir is None or old_dir == paths.data_dir:
        return []
    if paths.legacy_projects.exists():
        return []

    paths.ensure_data_dir()
    copied: list[Path] = []
    for name in RELOCATED_FILES:
        source = old_dir / name
        target = paths.data_dir / name
        if not source.is_file() or target.exists():
            continue
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            LOG.warning("Could not copy %s to %s: %s", source, target, exc)
            continue
        copied.append(target)

    if copied:
        LOG.info("Copied %d file(s) from %s to %s", len(copied), old_dir, paths.data_dir)
    return copied
