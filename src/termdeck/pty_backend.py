"""Terminal backend running the shell on a pseudo-terminal.

Each terminal gets a reader thread that pumps pty output to ``on_output``
and scans it for OSC title (0/2) and working-directory (7) reports.
Callbacks fire on that reader thread; the caller decides how to hop back
onto its own loop.
"""

from __future__ import annotations

import logging
import os
import struct
import subprocess
import threading
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from .backend import ExitCallback, OutputCallback, TitleCallback
from .errors import TerminalSpawnError

LOG = logging.getLogger(__name__)

_OSC_START = b"\x1b]"
_BEL = b"\x07"
_ST = b"\x1b\\"


@dataclass(slots=True, frozen=True)
class OscEvent:
    kind: str  # "title" or "cwd"
    value: str


class OscScanner:
    """Incremental parser for OSC sequences split across reads."""

    MAX_PENDING = 4096

    def __init__(self) -> None:
        self._pending = b""

    def feed(self, data: bytes) -> list[OscEvent]:
        buffer = self._pending + data
        self._pending = b""
        events: list[OscEvent] = []
        position = 0
        while True:
            start = buffer.find(_OSC_START, position)
            if start < 0:
                if buffer.endswith(b"\x1b"):
                    self._pending = b"\x1b"
                break

            terminators = [
                (index, len(marker))
                for index, marker in (
                    (buffer.find(_BEL, start + 2), _BEL),
                    (buffer.find(_ST, start + 2), _ST),
                )
                if index >= 0
            ]
            if not terminators:
                tail = buffer[start:]
                if len(tail) <= self.MAX_PENDING:
                    self._pending = tail
                break

            end, width = min(terminators)
            event = self._decode(buffer[start + 2 : end])
            if event is not None:
                events.append(event)
            position = end + width
        return events

    @staticmethod
    def _decode(body: bytes) -> OscEvent | None:
        code, _, text = body.decode("utf-8", errors="replace").partition(";")
        if code in ("0", "2"):
            return OscEvent("title", text)
        if code == "7":
            parts = urlsplit(text)
            if parts.scheme == "file" and parts.path:
                return OscEvent("cwd", unquote(parts.path))
        return None


class PtyTerminal:
    """A shell attached to the master side of a pty."""

    def __init__(
        self,
        process: subprocess.Popen[bytes],
        master_fd: int,
        *,
        on_title: TitleCallback,
        on_exit: ExitCallback,
        on_output: OutputCallback | None = None,
    ) -> None:
        self._process = process
        self._fd: int | None = master_fd
        self._on_title = on_title
        self._on_exit = on_exit
        self._on_output = on_output
        self._scanner = OscScanner()
        self._reported_cwd: str | None = None
        self._alive = True
        self._reader = threading.Thread(
            target=self._read_loop, daemon=True, name=f"termdeck-pty-{process.pid}"
        )

    def start(self) -> None:
        self._reader.start()

    def current_directory(self) -> str | None:
        if self._reported_cwd:
            return self._reported_cwd
        try:
            return os.readlink(f"/proc/{self._process.pid}/cwd")
        except OSError as exc:
            LOG.debug("No /proc cwd for pid %s: %s", self._process.pid, exc)
            return None

    def write(self, data: bytes) -> None:
        fd = self._fd
        if fd is None or not self._alive:
            return
        try:
            os.write(fd, data)
        except OSError:
            LOG.exception("Terminal write failed (pid %s)", self._process.pid)

    def resize(self, rows: int, cols: int) -> None:
        fd = self._fd
        if fd is None:
            return
        _set_window_size(fd, rows, cols)

    def terminate(self) -> None:
        self._alive = False
        fd, self._fd = self._fd, None
        if fd is not None:
            try:
                os.close(fd)
            except OSError:
                pass
        if self._process.poll() is not None:
            return
        LOG.debug("Terminating shell pid %s", self._process.pid)
        self._process.terminate()
        try:
            self._process.wait(timeout=2)
        except subprocess.TimeoutExpired:
            self._process.kill()

    def _read_loop(self) -> None:
        try:
            while self._alive:
                fd = self._fd
                if fd is None:
                    break
                try:
                    data = os.read(fd, 4096)
                except OSError:
                    break
                if not data:
                    break
                for event in self._scanner.feed(data):
                    if event.kind == "title":
                        self._on_title(event.value)
                    else:
                        self._reported_cwd = event.value
                if self._on_output is not None:
                    self._on_output(data)
        finally:
            self._alive = False
            exit_code: int | None = None
            try:
                exit_code = self._process.wait(timeout=1)
            except subprocess.TimeoutExpired:
                LOG.debug("Shell pid %s still running after pty closed", self._process.pid)
            LOG.info("Terminal reader stopped (pid %s, exit_code=%s)", self._process.pid, exit_code)
            self._on_exit(exit_code)


def _set_window_size(fd: int, rows: int, cols: int) -> None:
    import fcntl
    import termios

    try:
        fcntl.ioctl(fd, termios.TIOCSWINSZ, struct.pack("HHHH", rows, cols, 0, 0))
    except OSError:
        LOG.debug("Terminal resize to %sx%s failed", cols, rows)


class PtyBackendFactory:
    """Spawns :class:`PtyTerminal` instances (POSIX only)."""

    def __init__(self, rows: int = 24, cols: int = 80) -> None:
        self.rows = rows
        self.cols = cols

    def spawn(
        self,
        working_dir: str,
        argv: list[str],
        *,
        on_title: TitleCallback,
        on_exit: ExitCallback,
        on_output: OutputCallback | None = None,
    ) -> PtyTerminal:
        if os.name != "posix":
            raise TerminalSpawnError("pty terminals require a POSIX system")
        import pty

        master_fd, slave_fd = pty.openpty()
        _set_window_size(master_fd, self.rows, self.cols)
        env = dict(os.environ, TERM="xterm-256color")
        try:
            process = subprocess.Popen(
                argv,
                stdin=slave_fd,
                stdout=slave_fd,
                stderr=slave_fd,
                cwd=working_dir,
                env=env,
                preexec_fn=os.setsid,
                close_fds=True,
            )
        except OSError as exc:
            os.close(master_fd)
            raise TerminalSpawnError(f"cannot start {argv[0]!r} in {working_dir}: {exc}") from exc
        finally:
            os.close(slave_fd)

        terminal = PtyTerminal(
            process, master_fd, on_title=on_title, on_exit=on_exit, on_output=on_output
        )
        terminal.start()
        LOG.info("Spawned %s (pid %s) in %s", argv[0], process.pid, working_dir)
        return terminal
