"""
TreeMirror Client - Sync Decision Models

Contains the SyncDecision enum and the per-file and per-run result
dataclasses produced by reconciliation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .remote_file import RemoteFile


class SyncDecision(Enum):
    """
    Action chosen for one remote catalog entry.

    States:
    - SKIP: Local copy is current (or a deleted file is already absent)
    - DOWNLOAD: Local copy is missing or out of date
    - DELETE_LOCAL: File was deleted on the server and exists locally
    """
    SKIP = "skip"
    DOWNLOAD = "download"
    DELETE_LOCAL = "delete_local"


@dataclass
class FileOutcome:
    """Decision taken for one remote file and whether carrying it out worked"""
    decision: SyncDecision
    remote: RemoteFile
    success: bool = True
    error: Optional[str] = None


@dataclass
class SyncReport:
    """Aggregated outcome of a synchronization run"""
    outcomes: List[FileOutcome] = field(default_factory=list)

    def add(self, outcome: FileOutcome):
        self.outcomes.append(outcome)

    def _successful(self, decision: SyncDecision) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.success and o.decision == decision]

    @property
    def downloaded(self) -> List[FileOutcome]:
        return self._successful(SyncDecision.DOWNLOAD)

    @property
    def skipped(self) -> List[FileOutcome]:
        return self._successful(SyncDecision.SKIP)

    @property
    def deleted(self) -> List[FileOutcome]:
        return self._successful(SyncDecision.DELETE_LOCAL)

    @property
    def failures(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return (
            f"{len(self.downloaded)} downloaded, {len(self.skipped)} unchanged, "
            f"{len(self.deleted)} deleted, {len(self.failures)} failed"
        )
