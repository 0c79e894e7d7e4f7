"""
TreeMirror Client - Sync Operations Module

Reconciles a local directory against the server's catalog:
- Deletes local files the server reports as deleted
- Downloads files that are missing locally or out of date
- Skips files whose size matches and whose local time is not older

A failure on one file is recorded and the batch continues; only a failed
catalog request aborts the run.
"""

import os
import logging
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable, List, Optional

from treemirror_client.exceptions import TreeMirrorTransferError
from treemirror_client.managers import CacheRecord, MetadataCache
from treemirror_client.models import FileOutcome, RemoteFile, SyncDecision, SyncReport

# Configure logging
logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"

ProgressCallback = Callable[[str, int, int], None]


class SyncOperations:
    """
    Handles one-way synchronization from server to a local directory.

    Responsibilities:
    - Decide Skip / Download / DeleteLocal for each remote catalog entry
    - Carry out downloads through a temporary file, never leaving a
      partial file behind
    - Keep the metadata cache in step with what was synchronized
    - Report progress via callbacks and aggregate per-file failures
    """

    def __init__(self, api_client, local_root, cache: Optional[MetadataCache] = None,
                 chunk_size: int = 65536):
        """
        Initialize sync operations handler.

        Args:
            api_client: TreeMirrorAPI instance for server communication
            local_root: Directory receiving the mirrored files
            cache: Optional metadata cache consulted before stat'ing local files
            chunk_size: Download chunk size in bytes
        """
        self.api = api_client
        self.local_root = Path(local_root)
        self.cache = cache
        self.chunk_size = chunk_size

    # ==================== Entry Points ====================

    def sync(self, prefix: str = "", progress_callback: Optional[ProgressCallback] = None,
             dry_run: bool = False) -> SyncReport:
        """
        Synchronize every catalog file under prefix.

        Args:
            prefix: Catalog path prefix ("" for everything)
            progress_callback: Optional callback for progress updates
                               Called with (message: str, current: int, total: int)
            dry_run: Only compute decisions, change nothing

        Returns:
            SyncReport with one outcome per remote file

        Raises:
            TreeMirrorServerError: If the catalog cannot be fetched
        """
        logger.info(f"Starting sync of prefix '{prefix}' into {self.local_root}")

        if progress_callback:
            progress_callback("Fetching file list from server...", 0, 0)

        # Ask for a refreshed catalog so deletions since the server's scan show up
        remote_files = self.api.list_files(prefix, update=True)

        if dry_run:
            report = self.plan(remote_files)
        else:
            report = self.reconcile(remote_files, progress_callback)

        logger.info(f"Sync finished: {report.summary()}")
        for failure in report.failures:
            logger.error(f"FAILED {failure.remote.path}: {failure.error}")
        return report

    def plan(self, remote_files: Iterable[RemoteFile]) -> SyncReport:
        """
        Compute decisions without touching local files or the cache.

        Returns:
            SyncReport with the decision for each file
        """
        report = SyncReport()
        for remote in remote_files:
            try:
                decision = self.decide(remote)
            except (TreeMirrorTransferError, OSError) as e:
                report.add(self._failed(remote, e))
                continue
            report.add(FileOutcome(decision=decision, remote=remote))
        return report

    def reconcile(self, remote_files: Iterable[RemoteFile],
                  progress_callback: Optional[ProgressCallback] = None) -> SyncReport:
        """
        Decide and carry out the action for each remote file.

        Files are processed one at a time, so a delete and a later download
        of the same path never overlap.

        Returns:
            SyncReport with one outcome per remote file
        """
        report = SyncReport()
        remote_files = list(remote_files)
        total = len(remote_files)

        for current, remote in enumerate(remote_files, start=1):
            logger.debug(f"{remote.path}: size={remote.size}, time={remote.modified_at}"
                         f"{' [DELETED]' if remote.deleted else ''}")
            outcome = self._process(remote, progress_callback)
            report.add(outcome)

            if progress_callback:
                progress_callback(f"{outcome.decision.value}: {remote.path}", current, total)

        return report

    # ==================== Decision ====================

    def decide(self, remote: RemoteFile) -> SyncDecision:
        """
        Decide what to do with one remote file. No side effects.

        Raises:
            TreeMirrorTransferError: If the remote path is unsafe
            OSError: If the local file cannot be inspected
        """
        local_path = self.local_path(remote.path)

        if remote.deleted:
            # A dangling symlink does not "exist" but still occupies the path
            present = local_path.exists() or local_path.is_symlink()
            return SyncDecision.DELETE_LOCAL if present else SyncDecision.SKIP

        if not local_path.exists():
            logger.debug(f"  -> not exists(need update): {remote.path}")
            return SyncDecision.DOWNLOAD

        local_size, local_time = self._local_state(remote.path, local_path)

        # Only an older local time counts; a newer one is download noise
        if local_size != remote.size or local_time < remote.modified_at:
            return SyncDecision.DOWNLOAD

        logger.debug(f"no update: {remote.path}")
        return SyncDecision.SKIP

    def local_path(self, remote_path: str) -> Path:
        """
        Map a catalog path to its location under the local root.

        Raises:
            TreeMirrorTransferError: If the path is absolute or escapes the root
        """
        relative = PurePosixPath(remote_path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise TreeMirrorTransferError(f"Refusing unsafe path from server: {remote_path!r}")
        return self.local_root.joinpath(*relative.parts)

    def cache_key(self, remote_path: str) -> str:
        """
        Metadata cache key for a catalog path: the absolute local file path.

        Keys are absolute, so several local roots can share one cache database.
        """
        local_file = self.local_path(remote_path)
        return str(local_file.parent.resolve() / local_file.name)

    def _local_state(self, remote_path: str, local_path: Path):
        """Get (size, time) of the local copy, from the cache when possible"""
        if self.cache is not None:
            cached = self.cache.get(self.cache_key(remote_path))
            if cached is not None:
                return cached.size, cached.modified_at
            logger.debug(f"not found in cache: {remote_path}")

        stat_result = local_path.stat()
        return stat_result.st_size, int(stat_result.st_mtime)

    # ==================== Actions ====================

    def _process(self, remote: RemoteFile, progress_callback: Optional[ProgressCallback]) -> FileOutcome:
        try:
            decision = self.decide(remote)
        except (TreeMirrorTransferError, OSError) as e:
            return self._failed(remote, e)

        try:
            if decision == SyncDecision.DELETE_LOCAL:
                self._delete_local(remote)
            elif decision == SyncDecision.DOWNLOAD:
                self._download(remote, progress_callback)
            elif remote.deleted:
                self._forget(remote.path)
            else:
                self._remember(remote)
        except (TreeMirrorTransferError, OSError) as e:
            return self._failed(remote, e, decision)

        return FileOutcome(decision=decision, remote=remote)

    def _delete_local(self, remote: RemoteFile):
        local_file = self.local_path(remote.path)
        logger.info(f"remove file: {local_file}")
        local_file.unlink()
        self._forget(remote.path)

    def _download(self, remote: RemoteFile, progress_callback: Optional[ProgressCallback]):
        """
        Fetch one file into place.

        Content goes to a .part file beside the destination and is moved over
        it only once complete; any failure removes the .part file.
        """
        local_file = self.local_path(remote.path)
        if not local_file.parent.exists():
            logger.debug(f"create directory: {local_file.parent}")
        local_file.parent.mkdir(parents=True, exist_ok=True)

        partial_file = local_file.with_name(local_file.name + PARTIAL_SUFFIX)
        logger.info(f"DOWNLOAD: {remote.path} -> {local_file}")

        completed = False
        try:
            with open(partial_file, 'wb') as f:
                for chunk, transferred, total in self.api.iter_file_chunks(remote.path, self.chunk_size):
                    f.write(chunk)
                    if progress_callback:
                        progress_callback(f"Downloading {remote.path}", transferred, total or remote.size)
            os.replace(partial_file, local_file)
            completed = True
        finally:
            if not completed and partial_file.exists():
                logger.debug(f"Removing partial download {partial_file}")
                partial_file.unlink()

        # Match the server's time so later comparisons see the file as current
        try:
            os.utime(local_file, (remote.modified_at, remote.modified_at))
        except OSError as e:
            logger.warning(f"Failed to set file timestamp for {remote.path}: {e}")

        logger.info(f"Download size: {remote.size} ===> done.")
        self._remember(remote)

    def _remember(self, remote: RemoteFile):
        if self.cache is not None:
            self.cache.put(self.cache_key(remote.path),
                           CacheRecord(size=remote.size, modified_at=remote.modified_at))

    def _forget(self, path: str):
        if self.cache is not None:
            self.cache.delete(self.cache_key(path))

    def _failed(self, remote: RemoteFile, error: Exception,
                decision: Optional[SyncDecision] = None) -> FileOutcome:
        if decision is None:
            decision = SyncDecision.DELETE_LOCAL if remote.deleted else SyncDecision.DOWNLOAD
        logger.warning(f"{decision.value} failed for {remote.path}: {error}")
        return FileOutcome(decision=decision, remote=remote, success=False, error=str(error))


def failed_paths(report: SyncReport) -> List[str]:
    """Paths of the files that could not be synchronized"""
    return [outcome.remote.path for outcome in report.failures]
