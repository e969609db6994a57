"""
Session events reconstructed from a transcript.

Exactly seven event kinds, discriminated on `type`. Every event carries the
timestamp of the transcript entry that produced it; synthetic turn_end
events carry the timestamp of the last assistant entry of the turn.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

import pydantic

from session_stream.schemas.types import BaseStrictModel, DurationMs


class EventModel(BaseStrictModel):
    """Common base for all session events."""

    timestamp: datetime


class InitEvent(EventModel):
    """First event of a fresh reconstruction run."""

    type: Literal['init'] = 'init'
    session_id: str


class ThinkingStartEvent(EventModel):
    type: Literal['thinking_start'] = 'thinking_start'


class ThinkingCompleteEvent(EventModel):
    type: Literal['thinking_complete'] = 'thinking_complete'
    content: str


class ToolStartEvent(EventModel):
    type: Literal['tool_start'] = 'tool_start'
    tool_name: str
    tool_use_id: str | None = None


class ToolCompleteEvent(EventModel):
    """Completion of a tool invocation, paired by the active ToolMatcher."""

    type: Literal['tool_complete'] = 'tool_complete'
    tool_name: str
    tool_use_id: str | None = None
    duration_ms: DurationMs


class TextEvent(EventModel):
    type: Literal['text'] = 'text'
    content: str
    char_count: int


class TurnEndEvent(EventModel):
    """End of one user-input-to-assistant-completion cycle."""

    type: Literal['turn_end'] = 'turn_end'
    turn_duration_ms: DurationMs = pydantic.Field(ge=0)


SessionEvent = Annotated[
    InitEvent
    | ThinkingStartEvent
    | ThinkingCompleteEvent
    | ToolStartEvent
    | ToolCompleteEvent
    | TextEvent
    | TurnEndEvent,
    pydantic.Field(discriminator='type'),
]

# Type adapter for serializing event streams (required for union types)
SessionEventAdapter: pydantic.TypeAdapter[SessionEvent] = pydantic.TypeAdapter(SessionEvent)
