"""
Schema definitions for claude-session-stream.

This package contains Pydantic models for:
- transcript: the user/assistant lines read from a session JSONL file
- events: the SessionEvent stream reconstructed from those lines
- activity: the UI-facing ActivityEntry projection of events
"""

from __future__ import annotations

from session_stream.schemas.activity import (
    ActivityEntry,
    ActivityEntryAdapter,
    GeneratingActivity,
    ThinkingActivity,
    ToolCompleteActivity,
    ToolStartActivity,
)
from session_stream.schemas.events import (
    InitEvent,
    SessionEvent,
    SessionEventAdapter,
    TextEvent,
    ThinkingCompleteEvent,
    ThinkingStartEvent,
    ToolCompleteEvent,
    ToolStartEvent,
    TurnEndEvent,
)
from session_stream.schemas.transcript import (
    ContentBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    TranscriptEntry,
    TranscriptMessage,
    UnknownBlock,
)

__all__ = [
    # Activity
    'ActivityEntry',
    'ActivityEntryAdapter',
    'GeneratingActivity',
    'ThinkingActivity',
    'ToolCompleteActivity',
    'ToolStartActivity',
    # Events
    'InitEvent',
    'SessionEvent',
    'SessionEventAdapter',
    'TextEvent',
    'ThinkingCompleteEvent',
    'ThinkingStartEvent',
    'ToolCompleteEvent',
    'ToolStartEvent',
    'TurnEndEvent',
    # Transcript
    'ContentBlock',
    'TextBlock',
    'ThinkingBlock',
    'ToolResultBlock',
    'ToolUseBlock',
    'TranscriptEntry',
    'TranscriptMessage',
    'UnknownBlock',
]
