"""
Activity projector - maps SessionEvents onto UI-facing ActivityEntries.

Pure and total over the event kinds:

    thinking_complete (non-empty)  -> ThinkingActivity
    tool_start                     -> ToolStartActivity
    tool_complete                  -> ToolCompleteActivity
    text (char_count > 0)          -> GeneratingActivity
    everything else                -> None
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from session_stream.config import settings
from session_stream.schemas.activity import (
    ActivityEntry,
    GeneratingActivity,
    ThinkingActivity,
    ToolCompleteActivity,
    ToolStartActivity,
)
from session_stream.schemas.events import (
    SessionEvent,
    TextEvent,
    ThinkingCompleteEvent,
    ToolCompleteEvent,
    ToolStartEvent,
)
from session_stream.services.batch import read_all_events


def truncate_preview(content: str, limit: int) -> str:
    """First `limit` characters of `content`, suffixed with '...' when cut."""
    if len(content) > limit:
        return content[:limit] + '...'
    return content


def project(event: SessionEvent, truncate_length: int | None = None) -> ActivityEntry | None:
    """
    Project one event onto an activity entry.

    Args:
        event: Event from a batch read or live watch
        truncate_length: Preview length (default: settings.PREVIEW_TRUNCATE_LENGTH)

    Returns:
        ActivityEntry, or None for events with no UI representation
    """
    limit = truncate_length if truncate_length is not None else settings.PREVIEW_TRUNCATE_LENGTH

    if isinstance(event, ThinkingCompleteEvent):
        if not event.content:
            return None
        return ThinkingActivity(
            timestamp=event.timestamp,
            content=event.content,
            preview=truncate_preview(event.content, limit),
        )

    if isinstance(event, ToolStartEvent):
        return ToolStartActivity(timestamp=event.timestamp, tool=event.tool_name)

    if isinstance(event, ToolCompleteEvent):
        return ToolCompleteActivity(timestamp=event.timestamp, tool=event.tool_name, duration_ms=event.duration_ms)

    if isinstance(event, TextEvent):
        if event.char_count <= 0:
            return None
        return GeneratingActivity(
            timestamp=event.timestamp,
            content=event.content,
            char_count=event.char_count,
            preview=truncate_preview(event.content, limit),
        )

    # init, thinking_start, turn_end
    return None


def project_all(events: Iterable[SessionEvent], truncate_length: int | None = None) -> list[ActivityEntry]:
    """Activity log for a sequence of events, dropping events with no UI representation."""
    activity_log: list[ActivityEntry] = []
    for event in events:
        entry = project(event, truncate_length)
        if entry is not None:
            activity_log.append(entry)
    return activity_log


def read_activity_log(path: Path, truncate_length: int | None = None) -> list[ActivityEntry]:
    """Read a whole transcript and project it to an activity log."""
    return project_all(read_all_events(path), truncate_length)
