"""
Incremental byte reader for transcripts that are still being appended to.

Pure I/O: returns whatever bytes exist past an offset right now. No
interpretation, no retries.
"""

from __future__ import annotations

import logging
from pathlib import Path

import attrs

from session_stream.exceptions import TranscriptReadError

logger = logging.getLogger(__name__)


@attrs.define(frozen=True)
class ReadChunk:
    """Bytes appended to a transcript since a given offset."""

    data: bytes
    offset: int  # Where data starts in the file

    @property
    def bytes_read(self) -> int:
        return len(self.data)


def get_file_size(path: Path) -> int:
    """
    Current size of a transcript in bytes.

    Returns 0 if the file does not exist, so a caller can start a live watch
    at end-of-file without checking existence first.

    Raises:
        TranscriptReadError: If the file exists but can't be sized
    """
    try:
        return path.stat().st_size
    except FileNotFoundError:
        return 0
    except OSError as e:
        raise TranscriptReadError(path, 0, str(e)) from e


def read_since(path: Path, offset: int) -> ReadChunk | None:
    """
    Read the bytes appended to a transcript since `offset`.

    Args:
        path: Transcript file path
        offset: Byte offset already consumed by the caller

    Returns:
        ReadChunk with exactly the bytes present past `offset`, or None if the
        file doesn't exist or hasn't grown past `offset`

    Raises:
        TranscriptReadError: If the file exists but can't be sized or read
    """
    try:
        size = path.stat().st_size
        if size <= offset:
            return None

        with open(path, 'rb') as f:
            f.seek(offset)
            # Bounded by the size we observed; the writer may append more meanwhile
            data = f.read(size - offset)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.error('Failed to read %s at offset %d: %s', path, offset, e)
        raise TranscriptReadError(path, offset, str(e)) from e

    if not data:
        return None

    return ReadChunk(data=data, offset=offset)
