"""
Shared type definitions for schemas.

Layering:
- BaseStrictModel: values this engine PRODUCES (events, activity entries).
  Rejects unknown fields and is immutable.
- TranscriptModel: values this engine READS from the transcript file. The
  transcript format belongs to an external writer that adds fields over
  time, so unknown fields are ignored rather than rejected.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

import pydantic

# ==============================================================================
# Emitted Values
# ==============================================================================


class BaseStrictModel(pydantic.BaseModel):
    """
    Foundation strict model for everything the engine emits.

    Uses extra='forbid' so a misspelled field in a constructor call fails
    immediately instead of silently producing an incomplete event.
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',
        strict=True,
        frozen=True,  # Events are shared between consumers
    )


# ==============================================================================
# Transcript Values
# ==============================================================================


class TranscriptModel(pydantic.BaseModel):
    """
    Foundation model for records read from a transcript line.

    Symmetry with BaseStrictModel:
    - BaseStrictModel: extra='forbid', strict (we own the shape)
    - TranscriptModel: extra='ignore', lax (the writer owns the shape)

    Lax mode lets ISO-8601 strings validate into datetimes.
    """

    model_config = pydantic.ConfigDict(
        extra='ignore',  # Writer may add fields at any time
        frozen=True,
    )


# ==============================================================================
# Field Types
# ==============================================================================


def _assume_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


type TranscriptDatetime = Annotated[datetime, pydantic.AfterValidator(_assume_utc)]
"""Timezone-aware datetime; naive transcript timestamps are read as UTC."""

type DurationMs = Annotated[int, pydantic.Field(description='Elapsed time in milliseconds')]
"""Integer milliseconds between two transcript timestamps."""
