"""
TreeMirror Server - Catalog Models Package

In-memory models owned by the catalog: file records and the directory tree.
"""

from treemirror_server.models.catalog.file_record import FileRecord
from treemirror_server.models.catalog.directory_node import DirectoryNode

__all__ = [
    'FileRecord',
    'DirectoryNode',
]
