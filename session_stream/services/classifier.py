"""
Transcript entry classification helpers.

The writer records both fresh human input and delivered tool output as
`user` entries. The shape of the content is the only signal separating a
new turn from a turn continuation.
"""

from __future__ import annotations

from collections.abc import Sequence

from session_stream.schemas.transcript import (
    ContentBlock,
    TextBlock,
    ToolUseBlock,
    TranscriptEntry,
)


def is_turn_start(content: str | Sequence[ContentBlock]) -> bool:
    """
    Check whether user content is new human input rather than a tool result.

    Plain-string content is always human input. Block content is human input
    only when its first block is a text block; a leading tool_result block
    means the system is delivering tool output back into the conversation.
    """
    if isinstance(content, str):
        return True
    return len(content) > 0 and isinstance(content[0], TextBlock)


def extract_text_content(entry: TranscriptEntry) -> str:
    """
    Render an entry as plain text.

    Text blocks are included verbatim, tool invocations as `[Tool: name]`
    markers. Thinking blocks and tool results are omitted.
    """
    content = entry.content
    if isinstance(content, str):
        return content

    parts: list[str] = []
    for block in content:
        if isinstance(block, TextBlock) and block.text:
            parts.append(block.text)
        elif isinstance(block, ToolUseBlock):
            parts.append(f'[Tool: {block.name}]')

    return '\n'.join(parts)


def find_entry_index(entries: Sequence[TranscriptEntry], uuid: str) -> int | None:
    """Position of the entry with the given uuid, or None if absent."""
    for index, entry in enumerate(entries):
        if entry.uuid == uuid:
            return index
    return None
