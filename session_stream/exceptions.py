"""
Shared exceptions for claude-session-stream.

Exception Hierarchy:
    SessionStreamError (base)
    ├── TranscriptReadError (I/O failure while sizing or reading a transcript)
    └── WatcherStateError (watcher iterated more than once)

Malformed lines and missing files are NOT errors; they are handled inside
the line parser and byte reader respectively.
"""

from __future__ import annotations

from pathlib import Path


class SessionStreamError(Exception):
    """Base exception for all claude-session-stream errors."""


class TranscriptReadError(SessionStreamError):
    """Raised when a transcript exists but cannot be read (permissions, disk errors)."""

    def __init__(self, path: Path, offset: int, reason: str) -> None:
        self.path = path
        self.offset = offset
        super().__init__(f'Failed to read transcript {path} at offset {offset}: {reason}')


class WatcherStateError(SessionStreamError):
    """Raised when a SessionEventWatcher is iterated after it already ran."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'Watcher for {path} has already been started. Create a new watcher to watch again.')
