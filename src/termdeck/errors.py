"""Exception types shared by the termdeck core."""

from __future__ import annotations


class TermdeckError(RuntimeError):
    """Base class for errors raised by termdeck."""


class SessionDocumentError(TermdeckError):
    """Raised when a persisted session document cannot be parsed."""


class TerminalSpawnError(TermdeckError):
    """Raised when a terminal backend fails to start its child process."""
