#!/usr/bin/env python3
"""
Command-line interface for claude-session-stream.

Reads or live-tails a session transcript and prints the reconstructed
events or the projected activity log.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from pathlib import Path
from typing import Literal, TypeGuard

import typer

from session_stream.cli.logger import CLILogger
from session_stream.exceptions import SessionStreamError
from session_stream.schemas.activity import (
    ActivityEntry,
    ActivityEntryAdapter,
    GeneratingActivity,
    ThinkingActivity,
    ToolCompleteActivity,
    ToolStartActivity,
)
from session_stream.schemas.events import SessionEventAdapter
from session_stream.services.batch import read_all_events, read_entries
from session_stream.services.classifier import extract_text_content
from session_stream.services.projector import project_all
from session_stream.services.reader import get_file_size
from session_stream.services.reconstruction import FifoToolMatcher, ToolMatcher, ToolUseIdMatcher
from session_stream.services.watcher import SessionEventWatcher

app = typer.Typer(
    name='claude-session-stream',
    help='Reconstruct activity events from Claude session transcripts',
    add_completion=False,
)

MatchStrategy = Literal['fifo', 'id']
OutputFormat = Literal['text', 'json']


def _is_match_strategy(value: str) -> TypeGuard[MatchStrategy]:
    """Type guard for valid tool matching strategies."""
    return value in ('fifo', 'id')


def _validate_match(value: str) -> MatchStrategy:
    """Validate and narrow match strategy for typer callback."""
    if _is_match_strategy(value):
        return value
    raise typer.BadParameter("Must be 'fifo' or 'id'")


def _validate_format(value: str) -> OutputFormat:
    """Validate and narrow output format for typer callback."""
    if value == 'text' or value == 'json':
        return value
    raise typer.BadParameter("Must be 'text' or 'json'")


def _matcher(strategy: str) -> ToolMatcher:
    return ToolUseIdMatcher() if strategy == 'id' else FifoToolMatcher()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def _format_activity(entry: ActivityEntry) -> str:
    """One-line human rendering of an activity entry."""
    clock = entry.timestamp.strftime('%H:%M:%S')
    if isinstance(entry, ThinkingActivity):
        return f'[{clock}] thinking    {entry.preview}'
    if isinstance(entry, ToolStartActivity):
        return f'[{clock}] tool_start  {entry.tool}'
    if isinstance(entry, ToolCompleteActivity):
        return f'[{clock}] tool_done   {entry.tool} ({entry.duration_ms} ms)'
    if isinstance(entry, GeneratingActivity):
        return f'[{clock}] generating  {entry.char_count:,} chars: {entry.preview}'
    raise TypeError(f'Unknown activity entry: {type(entry).__name__}')


@app.command()
def events(
    path: Path = typer.Argument(..., help='Transcript JSONL file'),
    match: str = typer.Option(
        'fifo', '--match', help='Tool result pairing: fifo or id', callback=_validate_match
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Print every reconstructed event of a transcript as one JSON line."""
    _configure_logging(verbose)
    try:
        for event in read_all_events(path, _matcher(match)):
            typer.echo(SessionEventAdapter.dump_json(event).decode())
    except SessionStreamError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def activity(
    path: Path = typer.Argument(..., help='Transcript JSONL file'),
    format: str = typer.Option(
        'text', '--format', '-f', help='Output format: text or json', callback=_validate_format
    ),
    preview_length: int | None = typer.Option(None, '--preview-length', help='Preview length for text entries'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Print the activity log (thinking, tools, generated text) of a transcript."""
    _configure_logging(verbose)
    try:
        activity_log = project_all(read_all_events(path), preview_length)
    except SessionStreamError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    for entry in activity_log:
        if format == 'json':
            typer.echo(ActivityEntryAdapter.dump_json(entry).decode())
        else:
            typer.echo(_format_activity(entry))


@app.command()
def entries(
    path: Path = typer.Argument(..., help='Transcript JSONL file'),
    width: int = typer.Option(80, '--width', '-w', help='Maximum preview width'),
) -> None:
    """List user/assistant entries with a short text preview."""
    try:
        transcript = read_entries(path)
    except SessionStreamError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    for entry in transcript:
        text = extract_text_content(entry).replace('\n', ' ')
        if len(text) > width:
            text = text[:width] + '...'
        typer.echo(f'{entry.role:<9} {entry.uuid}  {text}')


@app.command()
def watch(
    path: Path = typer.Argument(..., help='Transcript JSONL file'),
    from_offset: int = typer.Option(0, '--from-offset', help='Byte offset to resume from'),
    from_end: bool = typer.Option(False, '--from-end', help='Start at the current end of file'),
    interval_ms: int | None = typer.Option(None, '--interval-ms', help='Poll interval in milliseconds'),
    match: str = typer.Option(
        'fifo', '--match', help='Tool result pairing: fifo or id', callback=_validate_match
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Live-tail a transcript, printing events as JSON lines until interrupted.

    On exit the resume offset is reported on stderr:

        claude-session-stream watch session.jsonl --from-offset 18234
    """
    if from_end and from_offset:
        raise typer.BadParameter('--from-offset and --from-end are mutually exclusive')
    if from_offset < 0:
        raise typer.BadParameter('--from-offset must be >= 0')
    if interval_ms is not None and interval_ms <= 0:
        raise typer.BadParameter('--interval-ms must be > 0')

    _configure_logging(verbose)
    try:
        offset = get_file_size(path) if from_end else from_offset
    except SessionStreamError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    asyncio.run(_watch_async(path, offset, interval_ms, _matcher(match), verbose))


async def _watch_async(
    path: Path,
    offset: int,
    interval_ms: int | None,
    matcher: ToolMatcher,
    verbose: bool,
) -> None:
    """Async implementation of watch command."""
    logger = CLILogger(verbose=verbose)
    watcher = SessionEventWatcher(path, from_offset=offset, poll_interval_ms=interval_ms, matcher=matcher)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, watcher.cancel)

    if not path.exists():
        await logger.warning(f'{path} does not exist yet, waiting for it to be created')
    await logger.info(f'Watching {path} from offset {offset}')

    try:
        async for event in watcher:
            typer.echo(SessionEventAdapter.dump_json(event).decode())
    except SessionStreamError as e:
        await logger.error(str(e))
        typer.echo(f'Resume with: --from-offset {watcher.offset}', err=True)
        raise typer.Exit(1)

    typer.echo(f'Stopped at offset {watcher.offset}', err=True)


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
