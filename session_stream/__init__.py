"""
Conversation transcript event-stream engine.

Turns an append-only JSONL transcript of an agent conversation into typed
session events, either as a one-shot batch read or a cancellable live tail.
"""

from __future__ import annotations

from session_stream.exceptions import SessionStreamError, TranscriptReadError, WatcherStateError
from session_stream.services import (
    SessionEventWatcher,
    project,
    project_all,
    read_activity_log,
    read_all_events,
    watch_session_events,
)

__all__ = [
    'SessionEventWatcher',
    'SessionStreamError',
    'TranscriptReadError',
    'WatcherStateError',
    'project',
    'project_all',
    'read_activity_log',
    'read_all_events',
    'watch_session_events',
]
