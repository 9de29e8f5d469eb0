from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from termdeck.backend import ExitCallback, OutputCallback, TitleCallback
from termdeck.errors import TerminalSpawnError
from termdeck.paths import AppPaths
from termdeck.session_store import SessionStore
from termdeck.workspace import Workspace


class FakeBackend:
    """In-memory terminal: records writes and lets tests fire events."""

    def __init__(
        self,
        working_dir: str,
        argv: list[str],
        on_title: TitleCallback,
        on_exit: ExitCallback,
        on_output: OutputCallback | None,
    ) -> None:
        self.working_dir = working_dir
        self.argv = argv
        self.cwd: str | None = working_dir
        self.written: list[bytes] = []
        self.size: tuple[int, int] | None = None
        self.terminate_calls = 0
        self._on_title = on_title
        self._on_exit = on_exit
        self._on_output = on_output

    @property
    def terminated(self) -> bool:
        return self.terminate_calls > 0

    def current_directory(self) -> str | None:
        return self.cwd

    def write(self, data: bytes) -> None:
        self.written.append(data)

    def resize(self, rows: int, cols: int) -> None:
        self.size = (rows, cols)

    def terminate(self) -> None:
        self.terminate_calls += 1

    # Test helpers
    def emit_title(self, title: str) -> None:
        self._on_title(title)

    def emit_output(self, data: bytes) -> None:
        if self._on_output is not None:
            self._on_output(data)

    def exit(self, status: int | None = 0) -> None:
        self._on_exit(status)


class FakeFactory:
    def __init__(self) -> None:
        self.spawned: list[FakeBackend] = []
        self.fail = False

    def spawn(
        self,
        working_dir: str,
        argv: list[str],
        *,
        on_title: TitleCallback,
        on_exit: ExitCallback,
        on_output: OutputCallback | None = None,
    ) -> FakeBackend:
        if self.fail:
            raise TerminalSpawnError(f"cannot start {argv[0]!r}")
        backend = FakeBackend(working_dir, argv, on_title, on_exit, on_output)
        self.spawned.append(backend)
        return backend


class FakeClock:
    """Microsecond clock advancing one second per reading."""

    def __init__(self, start: int = 1_700_000_000_000_000) -> None:
        self._ticks = itertools.count(start, 1_000_000)
        self.last = start

    def __call__(self) -> int:
        self.last = next(self._ticks)
        return self.last


@pytest.fixture()
def factory() -> FakeFactory:
    return FakeFactory()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def paths(tmp_path: Path) -> AppPaths:
    return AppPaths(data_dir=tmp_path / "data", legacy_config_dir=tmp_path / "config")


@pytest.fixture()
def store(paths: AppPaths) -> SessionStore:
    return SessionStore(paths)


@pytest.fixture()
def make_workspace(factory: FakeFactory, store: SessionStore, clock: FakeClock):
    def _make(target_store: SessionStore | None = store) -> Workspace:
        return Workspace(factory, target_store, clock=clock, shell_command=lambda: ["/bin/sh"])

    return _make


@pytest.fixture()
def workspace(make_workspace) -> Workspace:
    return make_workspace()
