"""
TreeMirror Server - API Models Package

This package contains Pydantic models for all API endpoints.
"""

from treemirror_server.models.api.file_entry import FileEntry, FileListResponse
from treemirror_server.models.api.directory_entry import DirectoryEntry, DirectoryResponse

__all__ = [
    'FileEntry',
    'FileListResponse',
    'DirectoryEntry',
    'DirectoryResponse',
]
