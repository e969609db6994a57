"""
Batch reader - one-shot reconstruction of a whole transcript.

Runs the shared core (read -> parse -> reconstruct) once from offset 0 with
fresh state. If the transcript ends mid-turn, a synthetic turn_end closes it,
exactly as a cancelled live watch does.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from session_stream.schemas.events import SessionEvent
from session_stream.schemas.transcript import TranscriptEntry
from session_stream.services.line_parser import parse_lines
from session_stream.services.reader import read_since
from session_stream.services.reconstruction import (
    FIFO_MATCHER,
    ReconstructionState,
    ToolMatcher,
    close_turn,
    process_entry,
)

logger = logging.getLogger(__name__)


def read_entries(path: Path) -> Sequence[TranscriptEntry]:
    """
    Read every user/assistant entry of a transcript.

    Returns an empty sequence if the file does not exist or is empty. A
    trailing partial line (writer still appending) is ignored.
    """
    chunk = read_since(path, 0)
    if chunk is None:
        return []
    return parse_lines(chunk.data).entries


def read_all_events(path: Path, matcher: ToolMatcher = FIFO_MATCHER) -> list[SessionEvent]:
    """
    Reconstruct the complete event sequence of a transcript.

    Args:
        path: Transcript file path
        matcher: Strategy for pairing tool results with invocations

    Returns:
        Ordered events, starting with `init`; empty if the file is missing or empty

    Raises:
        TranscriptReadError: If the file exists but can't be read
    """
    entries = read_entries(path)
    state = ReconstructionState()
    events: list[SessionEvent] = []

    for entry in entries:
        events.extend(process_entry(entry, state, matcher))

    turn_end = close_turn(state)
    if turn_end is not None:
        events.append(turn_end)

    logger.debug('Reconstructed %d events from %d entries in %s', len(events), len(entries), path)
    return events
