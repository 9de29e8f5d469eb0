"""Terminal backend capability consumed by the workspace core.

The core never talks to a pty directly. It asks a :class:`TerminalFactory`
for a :class:`TerminalBackend` seeded with a working directory and a shell
command, and listens for title changes and the child's exit. The UI layer
decides on which thread those callbacks are delivered.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Protocol

DEFAULT_SHELL = "/bin/bash"

TitleCallback = Callable[[str], None]
ExitCallback = Callable[[int | None], None]
OutputCallback = Callable[[bytes], None]


class TerminalBackend(Protocol):
    """A running terminal child process."""

    def current_directory(self) -> str | None:
        """Return the child's current working directory, if it can be obtained."""
        ...

    def write(self, data: bytes) -> None: ...

    def resize(self, rows: int, cols: int) -> None: ...

    def terminate(self) -> None:
        """Stop the child process and release the pty."""
        ...


class TerminalFactory(Protocol):
    """Spawns terminal backends."""

    def spawn(
        self,
        working_dir: str,
        argv: list[str],
        *,
        on_title: TitleCallback,
        on_exit: ExitCallback,
        on_output: OutputCallback | None = None,
    ) -> TerminalBackend: ...


def default_shell_command() -> list[str]:
    """Return the command used for new terminals: ``$SHELL`` or bash."""

    return [os.environ.get("SHELL") or DEFAULT_SHELL]
