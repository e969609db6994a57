"""
Event reconstruction state machine.

Folds transcript entries, in file order, into SessionEvents. The only
memory carried between entries is ReconstructionState: whether `init` was
emitted, the session id, the queue of in-flight tool invocations, and the
bounds of the open turn. Each batch read or live watch owns its own state,
so independent runs never interfere.

Turn boundaries:
    A turn opens at a user entry that is new human input and closes at the
    next such entry (or at end of input). Its duration runs from the opening
    user entry to the LAST assistant entry of the turn.

Tool pairing:
    A tool_result carries no reliable link to the tool_use it answers in
    every writer version, so pairing is delegated to a ToolMatcher. The
    default FifoToolMatcher pairs strictly by start order: if A then B start
    and B's result is logged first, the first tool_complete still reports A.
"""

from __future__ import annotations

from collections import deque
from datetime import datetime, timedelta
from typing import Protocol

import attrs

from session_stream.schemas.events import (
    InitEvent,
    SessionEvent,
    TextEvent,
    ThinkingCompleteEvent,
    ThinkingStartEvent,
    ToolCompleteEvent,
    ToolStartEvent,
    TurnEndEvent,
)
from session_stream.schemas.transcript import (
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    TranscriptEntry,
)
from session_stream.services.classifier import is_turn_start

# ==============================================================================
# State
# ==============================================================================


@attrs.define(frozen=True)
class PendingTool:
    """A tool invocation that has started but not yet been paired with a result."""

    tool_name: str
    tool_use_id: str | None
    started_at: datetime


@attrs.define
class ReconstructionState:
    """Mutable state threaded through process_entry, one instance per run."""

    initialized: bool = False
    session_id: str | None = None
    pending_tools: deque[PendingTool] = attrs.Factory(deque)
    turn_started_at: datetime | None = None
    last_assistant_at: datetime | None = None

    @classmethod
    def resumed(cls) -> ReconstructionState:
        """State for a watch resuming mid-file: `init` was already seen by an earlier run."""
        return cls(initialized=True)

    @property
    def turn_open(self) -> bool:
        return self.turn_started_at is not None and self.last_assistant_at is not None


# ==============================================================================
# Tool Matching
# ==============================================================================


class ToolMatcher(Protocol):
    """Strategy for pairing a tool_result with a pending invocation."""

    def match(self, pending: deque[PendingTool], result: ToolResultBlock) -> PendingTool | None:
        """Remove and return the invocation `result` completes, or None if nothing is pending."""
        ...


class FifoToolMatcher:
    """Pairs results with invocations strictly in start order, ignoring ids."""

    def match(self, pending: deque[PendingTool], result: ToolResultBlock) -> PendingTool | None:
        if not pending:
            return None
        return pending.popleft()


class ToolUseIdMatcher:
    """
    Pairs results by tool_use_id, falling back to FIFO.

    Only correct if the writer always links results to invocations; FIFO is
    used whenever the result has no id or the id matches nothing pending.
    """

    def match(self, pending: deque[PendingTool], result: ToolResultBlock) -> PendingTool | None:
        if result.tool_use_id is not None:
            for tool in pending:
                if tool.tool_use_id == result.tool_use_id:
                    pending.remove(tool)
                    return tool
        if not pending:
            return None
        return pending.popleft()


FIFO_MATCHER = FifoToolMatcher()


# ==============================================================================
# Processing
# ==============================================================================


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return round((end - start) / timedelta(milliseconds=1))


def close_turn(state: ReconstructionState) -> TurnEndEvent | None:
    """
    Build the turn_end for the currently open turn, if any.

    Timestamped at the last assistant activity. Durations are clamped at zero
    when the writer's clock stepped backwards.
    """
    if state.turn_started_at is None or state.last_assistant_at is None:
        return None
    return TurnEndEvent(
        timestamp=state.last_assistant_at,
        turn_duration_ms=max(0, _elapsed_ms(state.turn_started_at, state.last_assistant_at)),
    )


def process_entry(
    entry: TranscriptEntry,
    state: ReconstructionState,
    matcher: ToolMatcher = FIFO_MATCHER,
) -> list[SessionEvent]:
    """
    Process one transcript entry, mutating `state`.

    Args:
        entry: Next entry in file order
        state: State for this run (mutated in place)
        matcher: Strategy for pairing tool results with pending invocations

    Returns:
        Events produced by this entry, in order
    """
    events: list[SessionEvent] = []
    timestamp = entry.timestamp

    if not state.initialized:
        state.initialized = True
        state.session_id = entry.sessionId
        events.append(InitEvent(timestamp=timestamp, session_id=entry.sessionId))

    if entry.role == 'user':
        events.extend(_process_user(entry, state, matcher))
    else:
        events.extend(_process_assistant(entry, state))

    return events


def _process_user(entry: TranscriptEntry, state: ReconstructionState, matcher: ToolMatcher) -> list[SessionEvent]:
    events: list[SessionEvent] = []
    content = entry.content

    if is_turn_start(content):
        turn_end = close_turn(state)
        if turn_end is not None:
            events.append(turn_end)
        state.turn_started_at = entry.timestamp
        state.last_assistant_at = None
        return events

    # Turn continuation: tool output delivered back into the conversation
    for block in content:
        if not isinstance(block, ToolResultBlock):
            continue
        tool = matcher.match(state.pending_tools, block)
        if tool is None:
            continue  # Unmatched result - nothing was pending
        events.append(
            ToolCompleteEvent(
                timestamp=entry.timestamp,
                tool_name=tool.tool_name,
                tool_use_id=tool.tool_use_id,
                duration_ms=_elapsed_ms(tool.started_at, entry.timestamp),
            )
        )

    return events


def _process_assistant(entry: TranscriptEntry, state: ReconstructionState) -> list[SessionEvent]:
    timestamp = entry.timestamp
    state.last_assistant_at = timestamp
    content = entry.content

    if isinstance(content, str):
        return [TextEvent(timestamp=timestamp, content=content, char_count=len(content))]

    events: list[SessionEvent] = []
    for block in content:
        if isinstance(block, ThinkingBlock):
            # Entries are only visible once fully written, so the whole block arrives at once
            events.append(ThinkingStartEvent(timestamp=timestamp))
            events.append(ThinkingCompleteEvent(timestamp=timestamp, content=block.thinking))
        elif isinstance(block, ToolUseBlock):
            state.pending_tools.append(PendingTool(tool_name=block.name, tool_use_id=block.id, started_at=timestamp))
            events.append(ToolStartEvent(timestamp=timestamp, tool_name=block.name, tool_use_id=block.id))
        elif isinstance(block, TextBlock) and block.text:
            events.append(TextEvent(timestamp=timestamp, content=block.text, char_count=len(block.text)))
        # Inline tool_result and unknown blocks produce no events

    return events
