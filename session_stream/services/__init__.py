"""Service layer: byte reader, line parser, reconstruction, batch/live drivers, projector."""

from session_stream.services.batch import read_all_events, read_entries
from session_stream.services.classifier import extract_text_content, find_entry_index, is_turn_start
from session_stream.services.line_parser import ParseResult, parse_lines
from session_stream.services.projector import project, project_all, read_activity_log
from session_stream.services.reader import ReadChunk, get_file_size, read_since
from session_stream.services.reconstruction import (
    FifoToolMatcher,
    PendingTool,
    ReconstructionState,
    ToolMatcher,
    ToolUseIdMatcher,
    close_turn,
    process_entry,
)
from session_stream.services.watcher import SessionEventWatcher, watch_session_events

__all__ = [
    'FifoToolMatcher',
    'ParseResult',
    'PendingTool',
    'ReadChunk',
    'ReconstructionState',
    'SessionEventWatcher',
    'ToolMatcher',
    'ToolUseIdMatcher',
    'close_turn',
    'extract_text_content',
    'find_entry_index',
    'get_file_size',
    'is_turn_start',
    'parse_lines',
    'process_entry',
    'project',
    'project_all',
    'read_activity_log',
    'read_all_events',
    'read_entries',
    'read_since',
    'watch_session_events',
]
