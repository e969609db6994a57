"""Command-line interface for claude-session-stream."""
