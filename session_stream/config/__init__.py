"""Configuration for claude-session-stream."""

from __future__ import annotations

from session_stream.config.base import StreamSettings, get_settings, settings

__all__ = [
    'StreamSettings',
    'get_settings',
    'settings',
]
