"""
TreeMirror Server - Scan Result Model

Contains the ScanStatus enum and the ScanResult dataclass returned by
directory scans, plus a helper turning a status into a message.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from treemirror_server.models.catalog import DirectoryNode


class ScanStatus(Enum):
    """
    Outcome of scanning a root directory.

    States:
    - OK: Root scanned (individual entries may still have been skipped)
    - NOT_FOUND: Root path does not exist
    - NOT_A_DIRECTORY: Root path exists but is not a directory
    """
    OK = "ok"
    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"


@dataclass
class ScanResult:
    """Result of a directory scan"""
    status: ScanStatus
    root: str
    tree: Optional[DirectoryNode] = None
    file_count: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == ScanStatus.OK


def get_scan_error_message(result: ScanResult) -> Optional[str]:
    """
    Convert a scan result to its error message.

    Returns:
        Error message string for failed scans, None for OK
    """
    if result.status == ScanStatus.OK:
        return None
    elif result.status == ScanStatus.NOT_FOUND:
        return f"not exist: {result.root}"
    elif result.status == ScanStatus.NOT_A_DIRECTORY:
        return f"not directory: {result.root}"
    else:
        return f"Unknown scan status: {result.status}"
