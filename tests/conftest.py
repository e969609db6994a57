"""
Shared builders for transcript test data.

Records mirror the shape the transcript writer produces: one JSON object
per line, user/assistant records carrying `message.content`.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

SESSION_ID = 'sess-123'


def user(uuid: str, timestamp: str, content: str | Sequence[dict[str, Any]]) -> dict[str, Any]:
    return {
        'type': 'user',
        'uuid': uuid,
        'timestamp': timestamp,
        'sessionId': SESSION_ID,
        'message': {'role': 'user', 'content': content},
    }


def assistant(uuid: str, timestamp: str, content: str | Sequence[dict[str, Any]]) -> dict[str, Any]:
    return {
        'type': 'assistant',
        'uuid': uuid,
        'timestamp': timestamp,
        'sessionId': SESSION_ID,
        'message': {'role': 'assistant', 'content': content},
    }


def text(body: str) -> dict[str, Any]:
    return {'type': 'text', 'text': body}


def thinking(body: str) -> dict[str, Any]:
    return {'type': 'thinking', 'thinking': body, 'signature': 'sig'}


def tool_use(name: str, tool_id: str | None = None) -> dict[str, Any]:
    block: dict[str, Any] = {'type': 'tool_use', 'name': name, 'input': {}}
    if tool_id is not None:
        block['id'] = tool_id
    return block


def tool_result(tool_use_id: str | None = None, body: str = 'ok') -> dict[str, Any]:
    block: dict[str, Any] = {'type': 'tool_result', 'content': body}
    if tool_use_id is not None:
        block['tool_use_id'] = tool_use_id
    return block


def jsonl(*records: dict[str, Any]) -> bytes:
    """Encode records as JSONL, newline-terminated."""
    return b''.join(json.dumps(record).encode() + b'\n' for record in records)


@pytest.fixture
def transcript_path(tmp_path: Path) -> Path:
    return tmp_path / 'session.jsonl'


@pytest.fixture
def write_transcript(transcript_path: Path) -> Callable[..., Path]:
    """Write records to the transcript file, replacing its contents."""

    def _write(*records: dict[str, Any]) -> Path:
        transcript_path.write_bytes(jsonl(*records))
        return transcript_path

    return _write


@pytest.fixture
def append_transcript(transcript_path: Path) -> Callable[[bytes], None]:
    """Append raw bytes to the transcript file, as the writer would."""

    def _append(data: bytes) -> None:
        with open(transcript_path, 'ab') as f:
            f.write(data)

    return _append
