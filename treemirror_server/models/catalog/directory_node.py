"""
TreeMirror Server - Directory Node Model

Dataclass for the hierarchical directory summary built by a scan.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class DirectoryNode:
    """
    One directory of the scanned tree

    file_count counts direct regular-file children only, not descendants.
    """
    name: str
    file_count: int = 0
    children: List["DirectoryNode"] = field(default_factory=list)
