"""
Pydantic models for the transcript lines this engine consumes.

A transcript is an append-only JSONL file with one record per line. The
writer emits many record types (queue-operation, progress, summary,
file-history-snapshot, system, ...). Only two matter here:

    {"type": "user", "uuid": "...", "timestamp": "...", "sessionId": "...",
     "message": {"role": "user", "content": "hello"}}

    {"type": "assistant", "uuid": "...", "timestamp": "...", "sessionId": "...",
     "message": {"role": "assistant", "content": [{"type": "text", "text": "hi"}]}}

Content is either a plain string or a list of typed content blocks. Block
types other than text/tool_use/tool_result/thinking (image, document,
tool_reference, ...) validate into UnknownBlock and are ignored downstream.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Annotated, Any, Literal

import pydantic

from session_stream.schemas.types import TranscriptDatetime, TranscriptModel


def _null_as(default: str) -> Callable[[Any], Any]:
    """Before-validator reading an explicit JSON null as `default`."""

    def validate(value: Any) -> Any:
        return default if value is None else value

    return validate


# The writer sometimes emits null instead of omitting a field
type BlockText = Annotated[str, pydantic.BeforeValidator(_null_as(''))]
type ToolName = Annotated[str, pydantic.BeforeValidator(_null_as('unknown'))]


# ==============================================================================
# Content Blocks
# ==============================================================================


class TextBlock(TranscriptModel):
    """Text content block from user or assistant messages."""

    type: Literal['text']
    text: BlockText = ''


class ToolUseBlock(TranscriptModel):
    """Tool invocation requested by the assistant."""

    type: Literal['tool_use']
    name: ToolName = 'unknown'
    id: str | None = None
    input: dict[str, Any] | None = pydantic.Field(default_factory=dict)


class ToolResultBlock(TranscriptModel):
    """Tool output delivered back into the conversation (inside a user message)."""

    type: Literal['tool_result']
    tool_use_id: str | None = None
    content: str | Sequence[Any] | None = None
    is_error: bool | None = None


class ThinkingBlock(TranscriptModel):
    """Complete reasoning block from assistant messages."""

    type: Literal['thinking']
    thinking: BlockText = ''


class UnknownBlock(TranscriptModel):
    """Fallback for block types the engine does not interpret."""

    type: str


# Validated left-to-right so UnknownBlock only catches what nothing else matched
ContentBlock = Annotated[
    TextBlock | ToolUseBlock | ToolResultBlock | ThinkingBlock | UnknownBlock,
    pydantic.Field(union_mode='left_to_right'),
]


# ==============================================================================
# Transcript Entry
# ==============================================================================


class TranscriptMessage(TranscriptModel):
    """The message payload of a user or assistant record."""

    role: str | None = None
    content: str | Sequence[ContentBlock]


class TranscriptEntry(TranscriptModel):
    """
    One user or assistant line of a transcript.

    The record `type` is the role. Produced once by the writer and never
    modified, so instances are frozen.
    """

    type: Literal['user', 'assistant']
    uuid: str
    timestamp: TranscriptDatetime
    sessionId: str
    message: TranscriptMessage

    @property
    def role(self) -> Literal['user', 'assistant']:
        return self.type

    @property
    def content(self) -> str | Sequence[ContentBlock]:
        return self.message.content


TRANSCRIPT_ROLES = frozenset({'user', 'assistant'})
