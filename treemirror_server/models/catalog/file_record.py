"""
TreeMirror Server - File Record Model

Dataclass for a single file tracked by the catalog.
"""

from dataclasses import dataclass, replace


@dataclass
class FileRecord:
    """
    A regular file observed under the served root

    Identity is the path. Records are mutated in place when a refresh
    query re-stats the file, and become tombstones (deleted=True) when
    the file disappears.
    """
    path: str  # slash-separated, relative to the served root
    size: int
    modified_at: int  # unix seconds
    deleted: bool = False

    def MarkDeleted(self) -> None:
        """Turn this record into a deletion tombstone"""
        self.size = 0
        self.modified_at = 0
        self.deleted = True

    def Snapshot(self) -> "FileRecord":
        """Get a detached copy safe to hand out of the catalog lock"""
        return replace(self)
