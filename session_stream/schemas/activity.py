"""
UI-facing activity entries projected from session events.

A closed set of four kinds. Each carries a human-scale preview so a
progress feed can render it without holding the full event.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

import pydantic

from session_stream.schemas.types import BaseStrictModel, DurationMs


class ActivityModel(BaseStrictModel):
    timestamp: datetime


class ThinkingActivity(ActivityModel):
    """A finished reasoning block."""

    type: Literal['thinking'] = 'thinking'
    content: str
    preview: str  # First PREVIEW_TRUNCATE_LENGTH chars, '...' suffixed when cut


class ToolStartActivity(ActivityModel):
    type: Literal['tool_start'] = 'tool_start'
    tool: str


class ToolCompleteActivity(ActivityModel):
    type: Literal['tool_complete'] = 'tool_complete'
    tool: str
    duration_ms: DurationMs


class GeneratingActivity(ActivityModel):
    """Generated text. Transcripts only hold complete blocks, so chunks is always 1."""

    type: Literal['generating'] = 'generating'
    content: str
    char_count: int
    preview: str
    chunks: int = 1


ActivityEntry = Annotated[
    ThinkingActivity | ToolStartActivity | ToolCompleteActivity | GeneratingActivity,
    pydantic.Field(discriminator='type'),
]

ActivityEntryAdapter: pydantic.TypeAdapter[ActivityEntry] = pydantic.TypeAdapter(ActivityEntry)
