"""
TreeMirror Server - Catalog Service

Server-side facade over the most recent scan. Answers two read queries:
- list files under a path prefix, optionally re-checking each file on disk
- describe the directory tree

The catalog is an explicit object stored on the FastAPI app state and
handed to route handlers, never a module global. Handlers run in the
threadpool, so refresh mutation and response snapshots share one lock.
"""

import logging
import os
import stat
import threading
from pathlib import Path
from typing import List, Optional, Union

from treemirror_server.directory_scanner import ScanDirectory
from treemirror_server.models.catalog import DirectoryNode, FileRecord
from treemirror_server.models.infrastructure import ScanResult
from treemirror_server.prefix_index import PrefixIndex

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Queryable snapshot of the files under a served root

    Responsibilities:
    - Own the PrefixIndex and DirectoryNode tree built by a scan
    - Serve prefix listings, refreshing records in place on request
    - Keep deleted files as tombstones so late clients still see the deletion
    """

    def __init__(self, root: Union[str, Path], recursive: bool = False):
        """
        Initialize catalog service. No scan happens until Rescan() is called.

        Args:
            root: Directory to serve
            recursive: Whether scans descend into subdirectories
        """
        self.root = Path(root)
        self.recursive = recursive
        self.index = PrefixIndex()
        self.tree: Optional[DirectoryNode] = None
        self._lock = threading.Lock()

    def Rescan(self) -> ScanResult:
        """
        Build a fresh index and tree and swap them in

        Returns:
            ScanResult: outcome of the scan; on failure the previous
                        catalog is kept
        """
        new_index = PrefixIndex()
        result = ScanDirectory(self.root, self.recursive, new_index)
        if not result.ok:
            return result

        with self._lock:
            self.root = self.root.resolve()
            self.index = new_index
            self.tree = result.tree

        logger.info(f"Catalog loaded: {new_index.Count()} files under {self.root}")
        return result

    def ListByPrefix(self, prefix: str = "", refresh: bool = False) -> List[FileRecord]:
        """
        List catalog records whose path starts with prefix

        Args:
            prefix: Catalog path prefix ("" lists everything)
            refresh: Re-stat each matched file and update its record in place

        Returns:
            List[FileRecord]: detached copies sorted by path
        """
        with self._lock:
            records = self.index.PrefixSearch(prefix)
            if refresh:
                for record in records:
                    self._RefreshRecord(record)
            snapshot = [record.Snapshot() for record in records]

        snapshot.sort(key=lambda r: r.path)
        logger.debug(f"Listed {len(snapshot)} files for prefix '{prefix}' (refresh={refresh})")
        return snapshot

    def DescribeTree(self) -> Optional[DirectoryNode]:
        """Get the directory tree built by the most recent scan"""
        return self.tree

    def ResolvePath(self, path: str) -> Path:
        """Map a catalog path to its location on disk"""
        return self.root / path

    def FileCount(self) -> int:
        return self.index.Count()

    # ==================== Internal Helpers ====================

    def _RefreshRecord(self, record: FileRecord) -> None:
        """Update a record from the file on disk; caller holds the lock"""
        file_path = self.ResolvePath(record.path)
        try:
            stat_result = os.stat(file_path)
        except (FileNotFoundError, NotADirectoryError):
            if not record.deleted:
                logger.info(f"File removed since scan: {record.path}")
            record.MarkDeleted()
            return
        except OSError as e:
            logger.warning(f"Cannot refresh {record.path}, keeping last known state: {e}")
            return

        if not stat.S_ISREG(stat_result.st_mode):
            record.MarkDeleted()
            return

        record.size = stat_result.st_size
        record.modified_at = int(stat_result.st_mtime)
        record.deleted = False
