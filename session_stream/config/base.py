"""
Settings for claude-session-stream.

Precedence, highest first: explicit call arguments (e.g. a watcher's
`poll_interval_ms`), SESSION_STREAM_* environment variables, then the
.env file named by LOAD_ENV_FILE (or ./.env when that is unset).
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

S = TypeVar('S', bound='StreamSettings')


class StreamSettings(pydantic_settings.BaseSettings):
    """Defaults for live watching and activity previews."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='SESSION_STREAM_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,  # SESSION_STREAM_poll_interval_ms is a typo, not a setting
        extra='ignore',  # Shared .env files carry other tools' keys
    )

    APP_NAME: str = 'claude-session-stream'
    VERSION: str = '0.1.0'

    # Live watch: delay between two reads of the transcript
    POLL_INTERVAL_MS: int = 500

    # Activity log: characters kept in thinking/generating previews
    PREVIEW_TRUNCATE_LENGTH: int = 500

    @pydantic.field_validator('POLL_INTERVAL_MS', 'PREVIEW_TRUNCATE_LENGTH')
    @classmethod
    def validate_positive(cls, v: int, info: pydantic.ValidationInfo) -> int:
        if v <= 0:
            raise ValueError(f'{info.field_name} must be greater than 0, got {v}')
        return v


def get_settings(settings_class: type[S] = StreamSettings, env_file: str | None = None) -> S:
    """
    Build settings, optionally from a specific .env file.

    Args:
        settings_class: StreamSettings or a subclass
        env_file: .env path; takes precedence over LOAD_ENV_FILE

    Returns:
        Validated settings

    Raises:
        FileNotFoundError: If an explicitly requested .env file is missing
        pydantic.ValidationError: If a value is out of range
    """
    requested = env_file or os.getenv('LOAD_ENV_FILE')
    if requested is None or requested == '':
        return settings_class()

    path = pathlib.Path(requested).resolve()
    if not path.is_file():
        raise FileNotFoundError(f'Environment file not found: {path}')

    return settings_class(_env_file=path)


def lazy_settings(settings_class: type[S]) -> S:
    """Proxy that builds `settings_class` on first attribute access, so importing never reads the environment."""
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))


settings = lazy_settings(StreamSettings)
