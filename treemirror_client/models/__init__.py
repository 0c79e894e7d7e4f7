"""
TreeMirror Client - Models Package

Contains data models and enumerations used by the client.
"""

from .remote_file import (
    RemoteFile,
    RemoteDirectory,
    parse_file_entry,
    parse_file_list,
    parse_directory
)
from .sync_decision import SyncDecision, FileOutcome, SyncReport

__all__ = [
    'RemoteFile',
    'RemoteDirectory',
    'parse_file_entry',
    'parse_file_list',
    'parse_directory',
    'SyncDecision',
    'FileOutcome',
    'SyncReport'
]
