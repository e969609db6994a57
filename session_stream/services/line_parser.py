"""
JSONL line parser for resumable tailing of a concurrently-written transcript.

Splits a byte chunk into complete records and reports exactly how many
bytes were safely consumed. The caller advances its offset by that amount,
which gives order-preserving, resumable reads that never reprocess a
completed line and never lose an in-progress one.

Line rules, in order:
- Blank or whitespace-only line (not the final fragment): consumed, no entry
- Final empty fragment (chunk ended on '\\n'): split artifact, zero bytes
- Valid JSON: always consumed; kept only if it is a user/assistant record
  with non-empty content
- Invalid JSON, last line of the chunk: partial write in progress, NOT
  consumed, parsing stops. This holds even for the first line of a resumed
  chunk: without its newline it may still be the writer's current line
- Invalid JSON, first line of a resumed chunk: leftover from a previous read
  boundary, consumed and skipped
- Invalid JSON anywhere else: corrupt record, consumed and skipped
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

import attrs
import pydantic

from session_stream.schemas.transcript import TRANSCRIPT_ROLES, TranscriptEntry

logger = logging.getLogger(__name__)


@attrs.define(frozen=True)
class ParseResult:
    """Entries parsed from a chunk and the number of bytes they account for."""

    entries: Sequence[TranscriptEntry]
    bytes_consumed: int


def parse_lines(chunk: bytes, resumed_mid_file: bool = False) -> ParseResult:
    """
    Parse complete JSONL lines from a chunk.

    Args:
        chunk: Raw bytes read from the transcript
        resumed_mid_file: True when the chunk starts at an offset the caller
            did not itself produce (a watch resumed from a stored offset), so
            the first line may be the tail of a line read earlier

    Returns:
        ParseResult with kept entries and bytes safely consumed
    """
    lines = chunk.split(b'\n')
    entries: list[TranscriptEntry] = []
    bytes_consumed = 0
    is_first_line = True

    for index, line in enumerate(lines):
        is_last_line = index == len(lines) - 1
        line_bytes = len(line) + 1  # Including the newline

        if not line.strip():
            if not is_last_line:
                bytes_consumed += line_bytes
            continue

        try:
            raw = json.loads(line)
        except ValueError:
            if is_last_line:
                # Writer hasn't finished this line yet - leave it for the next read
                break
            if is_first_line and resumed_mid_file:
                logger.debug('Skipping partial leading line (%d bytes)', len(line))
                bytes_consumed += line_bytes
                is_first_line = False
                continue
            logger.debug('Skipping malformed line (%d bytes)', len(line))
            bytes_consumed += line_bytes
            is_first_line = False
            continue

        entry = _to_entry(raw)
        if entry is not None:
            entries.append(entry)
        bytes_consumed += line_bytes
        is_first_line = False

    return ParseResult(entries=entries, bytes_consumed=bytes_consumed)


def _to_entry(raw: Any) -> TranscriptEntry | None:
    """Classify a parsed record, keeping only user/assistant records with content."""
    if not isinstance(raw, dict) or raw.get('type') not in TRANSCRIPT_ROLES:
        return None

    message = raw.get('message')
    if not isinstance(message, dict) or not message.get('content'):
        return None

    try:
        return TranscriptEntry.model_validate(raw)
    except pydantic.ValidationError as e:
        logger.warning(
            'Dropping invalid %s record %s: %d validation error(s)',
            raw.get('type'),
            raw.get('uuid', '<no uuid>'),
            e.error_count(),
        )
        return None
