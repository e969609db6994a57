"""
Progress reporting for CLI commands.

Everything goes to stderr: stdout is reserved for event and activity lines
so the output of `events` and `watch` can be piped straight into jq.
"""

from __future__ import annotations

import typer


class CLILogger:
    """Async stderr logger; info lines are shown only with --verbose."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    async def info(self, message: str) -> None:
        if self.verbose:
            typer.secho(message, fg=typer.colors.BRIGHT_BLACK, err=True)

    async def warning(self, message: str) -> None:
        typer.secho(f'Warning: {message}', fg=typer.colors.YELLOW, err=True)

    async def error(self, message: str) -> None:
        typer.secho(f'Error: {message}', fg=typer.colors.RED, err=True)
