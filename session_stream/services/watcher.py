"""
Live watcher - cancellable tail of a transcript that is still being written.

Drives the same read -> parse -> reconstruct core as the batch reader, but
repeatedly on a timer:

    poll: read bytes past offset -> parse complete lines -> yield every event
    wait: sleep poll_interval, waking early on cancel
    cancel: yield a synthetic turn_end for the open turn, then stop

One poll's entries are fully drained into events before the next wait, and
events are yielded strictly in file order.

Resuming:
    `offset` advances only after a poll's events have all been yielded. A new
    watcher started at a previously observed offset therefore never skips an
    entry; it may replay the last partially-consumed poll if the consumer
    stopped mid-poll. A watcher started at a non-zero offset suppresses `init`.

Errors:
    An I/O failure ends the watch by raising TranscriptReadError to the
    consumer. No final turn_end is emitted in that case.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from pathlib import Path

from session_stream.config import settings
from session_stream.exceptions import WatcherStateError
from session_stream.schemas.events import SessionEvent
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


class SessionEventWatcher:
    """
    Watches one transcript and yields SessionEvents as it grows.

    Single-use: iterate once, cancel to stop, create a new watcher (at
    `offset`) to continue later.

    Example:
        watcher = SessionEventWatcher(path)
        async for event in watcher:
            handle(event)
            if done:
                watcher.cancel()
    """

    def __init__(
        self,
        path: Path,
        from_offset: int = 0,
        poll_interval_ms: int | None = None,
        cancel_event: asyncio.Event | None = None,
        matcher: ToolMatcher = FIFO_MATCHER,
    ) -> None:
        """
        Initialize watcher.

        Args:
            path: Transcript file path
            from_offset: Byte offset to start reading from (0 = beginning)
            poll_interval_ms: Delay between polls (default: settings.POLL_INTERVAL_MS)
            cancel_event: Shared cancellation signal (default: a private event,
                set via cancel())
            matcher: Strategy for pairing tool results with invocations
        """
        if from_offset < 0:
            raise ValueError(f'from_offset must be >= 0, got {from_offset}')

        self.path = path
        self.poll_interval_ms = poll_interval_ms if poll_interval_ms is not None else settings.POLL_INTERVAL_MS
        self.matcher = matcher
        self._cancel_event = cancel_event if cancel_event is not None else asyncio.Event()
        self._offset = from_offset
        self._resumed = from_offset > 0
        self._state = ReconstructionState.resumed() if self._resumed else ReconstructionState()
        self._started = False

    @property
    def offset(self) -> int:
        """Bytes of the transcript fully processed so far (safe resume point)."""
        return self._offset

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Request the watch to stop. Takes effect at the next check, never retracts events."""
        self._cancel_event.set()

    def __aiter__(self) -> AsyncIterator[SessionEvent]:
        return self.events()

    async def events(self) -> AsyncIterator[SessionEvent]:
        """
        Yield events until cancelled.

        Raises:
            WatcherStateError: If this watcher was already iterated
            TranscriptReadError: If the transcript becomes unreadable
        """
        if self._started:
            raise WatcherStateError(self.path)
        self._started = True

        logger.info('Watching %s from offset %d', self.path, self._offset)

        while not self._cancel_event.is_set():
            async with contextlib.aclosing(self._poll()) as poll:
                async for event in poll:
                    yield event
            await self._wait()

        turn_end = close_turn(self._state)
        if turn_end is not None:
            yield turn_end

        logger.info('Stopped watching %s at offset %d', self.path, self._offset)

    async def _poll(self) -> AsyncIterator[SessionEvent]:
        chunk = await asyncio.to_thread(read_since, self.path, self._offset)
        if chunk is None:
            return

        result = parse_lines(chunk.data, resumed_mid_file=self._resumed)
        # Only the first consumed line of a resumed watch can start mid-line
        if result.bytes_consumed:
            self._resumed = False

        for entry in result.entries:
            for event in process_entry(entry, self._state, self.matcher):
                yield event

        self._offset += result.bytes_consumed

    async def _wait(self) -> None:
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._cancel_event.wait(), timeout=self.poll_interval_ms / 1000)


def watch_session_events(
    path: Path,
    from_offset: int = 0,
    poll_interval_ms: int | None = None,
    cancel_event: asyncio.Event | None = None,
    matcher: ToolMatcher = FIFO_MATCHER,
) -> AsyncIterator[SessionEvent]:
    """
    Watch a transcript and yield events until `cancel_event` is set.

    Convenience wrapper around SessionEventWatcher for callers that don't
    need the resume offset.
    """
    watcher = SessionEventWatcher(
        path,
        from_offset=from_offset,
        poll_interval_ms=poll_interval_ms,
        cancel_event=cancel_event,
        matcher=matcher,
    )
    return watcher.events()
