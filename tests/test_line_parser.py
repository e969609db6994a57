"""
Tests for the JSONL line parser.

The key property: bytes_consumed never covers a line that might still be
growing, and always covers every line that was completely handled.
"""

from __future__ import annotations

import json

import pytest
from conftest import assistant, jsonl, text, user

from session_stream.schemas.transcript import TextBlock
from session_stream.services.line_parser import parse_lines

USER = user('u1', '2024-01-01T00:00:00Z', 'hello')
ASSISTANT = assistant('a1', '2024-01-01T00:00:01Z', [text('hi')])


def test_parses_complete_lines() -> None:
    chunk = jsonl(USER, ASSISTANT)

    result = parse_lines(chunk)

    assert [e.uuid for e in result.entries] == ['u1', 'a1']
    assert result.bytes_consumed == len(chunk)
    assert result.entries[0].content == 'hello'
    assert isinstance(result.entries[1].content[0], TextBlock)


def test_trailing_newline_artifact_adds_no_bytes() -> None:
    chunk = jsonl(USER)
    assert parse_lines(chunk).bytes_consumed == len(chunk)


def test_blank_lines_are_consumed() -> None:
    chunk = jsonl(USER) + b'\n   \n' + jsonl(ASSISTANT)

    result = parse_lines(chunk)

    assert len(result.entries) == 2
    assert result.bytes_consumed == len(chunk)


def test_partial_trailing_line_is_not_consumed() -> None:
    complete = jsonl(USER)
    chunk = complete + b'{"type":"user","mess'

    result = parse_lines(chunk)

    assert [e.uuid for e in result.entries] == ['u1']
    assert result.bytes_consumed == len(complete)


def test_completed_line_is_processed_exactly_once() -> None:
    full = jsonl(USER, ASSISTANT)
    cut = len(jsonl(USER)) + 20

    first = parse_lines(full[:cut])
    second = parse_lines(full[first.bytes_consumed :])

    assert [e.uuid for e in first.entries] == ['u1']
    assert [e.uuid for e in second.entries] == ['a1']
    assert first.bytes_consumed + second.bytes_consumed == len(full)


def test_malformed_middle_line_is_skipped_and_consumed() -> None:
    chunk = jsonl(USER) + b'this is not valid json\n' + jsonl(ASSISTANT)

    result = parse_lines(chunk)

    assert [e.uuid for e in result.entries] == ['u1', 'a1']
    assert result.bytes_consumed == len(chunk)


def test_partial_first_line_skipped_when_resumed_mid_file() -> None:
    line = jsonl(USER)
    chunk = line[10:] + jsonl(ASSISTANT)

    result = parse_lines(chunk, resumed_mid_file=True)

    assert [e.uuid for e in result.entries] == ['a1']
    assert result.bytes_consumed == len(chunk)


def test_malformed_first_line_of_fresh_read_is_corrupt_not_leftover() -> None:
    chunk = b'garbage\n' + jsonl(ASSISTANT)

    result = parse_lines(chunk, resumed_mid_file=False)

    # Consumed as a corrupt record, parsing continues
    assert [e.uuid for e in result.entries] == ['a1']
    assert result.bytes_consumed == len(chunk)


def test_malformed_single_line_of_fresh_read_is_left_unconsumed() -> None:
    result = parse_lines(b'{"type":"assis')

    assert result.entries == []
    assert result.bytes_consumed == 0


def test_partial_single_line_of_resumed_read_is_left_unconsumed() -> None:
    # Resumed at a line boundary while the writer is mid-line
    partial = jsonl(ASSISTANT)[:20]

    result = parse_lines(partial, resumed_mid_file=True)

    assert result.entries == []
    assert result.bytes_consumed == 0


def test_completed_first_line_of_resumed_read_is_kept() -> None:
    chunk = jsonl(ASSISTANT)

    result = parse_lines(chunk, resumed_mid_file=True)

    assert [e.uuid for e in result.entries] == ['a1']
    assert result.bytes_consumed == len(chunk)


def test_whitespace_only_lines() -> None:
    complete = jsonl(USER) + b' \t \r\n'

    result = parse_lines(complete + b'  ')

    # Whitespace-only lines count as blank; a trailing one may still grow
    assert [e.uuid for e in result.entries] == ['u1']
    assert result.bytes_consumed == len(complete)


@pytest.mark.parametrize(
    'record',
    [
        {'type': 'queue-operation', 'operation': 'enqueue', 'timestamp': '2024-01-01T00:00:00Z'},
        {'type': 'summary', 'summary': 'A session', 'leafUuid': 'x'},
        {'type': 'system', 'subtype': 'informational', 'content': 'note'},
        user('u2', '2024-01-01T00:00:00Z', ''),
        assistant('a2', '2024-01-01T00:00:00Z', []),
        [1, 2, 3],
        'just a string',
    ],
    ids=['queue-operation', 'summary', 'system', 'empty-string-content', 'empty-block-content', 'array', 'string'],
)
def test_irrelevant_records_are_consumed_but_not_kept(record: object) -> None:
    chunk = json.dumps(record).encode() + b'\n' + jsonl(USER)

    result = parse_lines(chunk)

    assert [e.uuid for e in result.entries] == ['u1']
    assert result.bytes_consumed == len(chunk)


def test_invalid_user_record_is_consumed_and_dropped() -> None:
    bad = user('u2', 'not-a-timestamp', 'hello')
    chunk = jsonl(bad, USER)

    result = parse_lines(chunk)

    assert [e.uuid for e in result.entries] == ['u1']
    assert result.bytes_consumed == len(chunk)


def test_unknown_blocks_are_kept_as_fallback() -> None:
    record = user('u2', '2024-01-01T00:00:00Z', [{'type': 'image', 'source': {'type': 'base64'}}])

    result = parse_lines(jsonl(record))

    assert len(result.entries) == 1
    assert result.entries[0].content[0].type == 'image'


def test_byte_count_uses_encoded_length() -> None:
    record = assistant('a2', '2024-01-01T00:00:01Z', [text('héllo wörld ✓')])
    line = json.dumps(record, ensure_ascii=False).encode('utf-8') + b'\n'

    result = parse_lines(line + b'{"partial')

    assert len(result.entries) == 1
    assert result.bytes_consumed == len(line)


def test_crlf_line_endings() -> None:
    chunk = json.dumps(USER).encode() + b'\r\n' + json.dumps(ASSISTANT).encode() + b'\r\n'

    result = parse_lines(chunk)

    assert [e.uuid for e in result.entries] == ['u1', 'a1']
    assert result.bytes_consumed == len(chunk)


def test_naive_timestamp_is_read_as_utc() -> None:
    record = user('u2', '2024-01-01T00:00:00', 'hello')

    result = parse_lines(jsonl(record))

    assert result.entries[0].timestamp.tzinfo is not None
    assert result.entries[0].timestamp.utcoffset().total_seconds() == 0
