"""Tests for the one-shot batch reader."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from pathlib import Path

from conftest import assistant, jsonl, text, thinking, tool_result, tool_use, user

from session_stream.schemas.events import InitEvent, TextEvent, TurnEndEvent
from session_stream.services.batch import read_all_events, read_entries


def test_single_exchange(write_transcript: Callable[..., Path]) -> None:
    path = write_transcript(
        user('u1', '2024-01-01T00:00:00Z', 'question'),
        assistant('a1', '2024-01-01T00:00:03Z', [text('answer')]),
    )

    events = read_all_events(path)

    assert [e.type for e in events] == ['init', 'text', 'turn_end']
    init, text_event, turn_end = events
    assert isinstance(init, InitEvent)
    assert init.session_id == 'sess-123'
    assert isinstance(text_event, TextEvent)
    assert text_event.content == 'answer'
    assert isinstance(turn_end, TurnEndEvent)
    assert timedelta(milliseconds=turn_end.turn_duration_ms) == text_event.timestamp - init.timestamp
    assert turn_end.turn_duration_ms == 3000


def test_user_only_transcript(write_transcript: Callable[..., Path]) -> None:
    path = write_transcript(user('u1', '2024-01-01T00:00:00Z', 'hello'))
    assert [e.type for e in read_all_events(path)] == ['init']


def test_missing_file_returns_empty(tmp_path: Path) -> None:
    assert read_all_events(tmp_path / 'nonexistent.jsonl') == []


def test_empty_file_returns_empty(transcript_path: Path) -> None:
    transcript_path.write_bytes(b'')
    assert read_all_events(transcript_path) == []


def test_every_tool_start_is_completed(write_transcript: Callable[..., Path]) -> None:
    path = write_transcript(
        user('u1', '2024-01-01T00:00:00Z', 'do stuff'),
        assistant('a1', '2024-01-01T00:00:01Z', [tool_use('Read', 't1'), tool_use('Grep', 't2')]),
        user('u2', '2024-01-01T00:00:02Z', [tool_result('t1'), tool_result('t2')]),
        assistant('a2', '2024-01-01T00:00:03Z', [tool_use('Bash', 't3')]),
        user('u3', '2024-01-01T00:00:04Z', [tool_result('t3')]),
        assistant('a3', '2024-01-01T00:00:05Z', [text('done')]),
    )

    events = read_all_events(path)
    starts = [e for e in events if e.type == 'tool_start']
    completes = [e for e in events if e.type == 'tool_complete']

    assert len(starts) == len(completes) == 3
    for start, complete in zip(starts, completes, strict=True):
        assert start.tool_name == complete.tool_name
        assert complete.timestamp > start.timestamp


def test_events_are_chronological(write_transcript: Callable[..., Path]) -> None:
    path = write_transcript(
        user('u1', '2024-01-01T00:00:00Z', 'question'),
        assistant('a1', '2024-01-01T00:00:01Z', [thinking('hmm'), tool_use('Read', 't1')]),
        user('u2', '2024-01-01T00:00:02Z', [tool_result('t1')]),
        assistant('a2', '2024-01-01T00:00:03Z', [text('done')]),
    )

    events = read_all_events(path)

    assert events[0].type == 'init'
    assert [e.type for e in events].count('init') == 1
    for previous, current in zip(events, events[1:]):
        assert current.timestamp >= previous.timestamp


def test_multi_turn_transcript(write_transcript: Callable[..., Path]) -> None:
    path = write_transcript(
        user('u1', '2024-01-01T00:00:00Z', 'first'),
        assistant('a1', '2024-01-01T00:00:05Z', [text('one')]),
        user('u2', '2024-01-01T00:00:10Z', [text('second')]),
        assistant('a2', '2024-01-01T00:00:12Z', 'two'),
    )

    events = read_all_events(path)

    assert [e.type for e in events] == ['init', 'text', 'turn_end', 'text', 'turn_end']
    assert [e.turn_duration_ms for e in events if isinstance(e, TurnEndEvent)] == [5000, 2000]


def test_malformed_lines_are_skipped(transcript_path: Path) -> None:
    transcript_path.write_bytes(
        jsonl(user('u1', '2024-01-01T00:00:00Z', 'hello'))
        + b'this is not valid json\n'
        + jsonl(assistant('a1', '2024-01-01T00:00:01Z', [text('hi')]))
    )

    assert [e.type for e in read_all_events(transcript_path)] == ['init', 'text', 'turn_end']


def test_partial_trailing_line_is_ignored(transcript_path: Path) -> None:
    transcript_path.write_bytes(
        jsonl(
            user('u1', '2024-01-01T00:00:00Z', 'hello'),
            assistant('a1', '2024-01-01T00:00:01Z', [text('hi')]),
        )
        + b'{"type":"assistant","mess'
    )

    assert [e.type for e in read_all_events(transcript_path)] == ['init', 'text', 'turn_end']


def test_read_entries(write_transcript: Callable[..., Path], tmp_path: Path) -> None:
    path = write_transcript(
        user('u1', '2024-01-01T00:00:00Z', 'hello'),
        {'type': 'summary', 'summary': 'Greeting', 'leafUuid': 'u1'},
        assistant('a1', '2024-01-01T00:00:01Z', 'hi'),
    )

    assert [e.uuid for e in read_entries(path)] == ['u1', 'a1']
    assert read_entries(tmp_path / 'missing.jsonl') == []
