"""
TreeMirror Server - Prefix Index

Character trie mapping catalog paths to their FileRecord. Gives prefix
enumeration in time proportional to the prefix length plus the number of
results, which is what "list everything under this directory" needs.

Each node owns its children exclusively through a dict; there are no parent
pointers, so removal records the walk down and prunes along it afterwards.
"""

import logging
from typing import Dict, List, Optional

from treemirror_server.models.catalog import FileRecord

logger = logging.getLogger(__name__)


class TrieNode:
    """Single trie node"""

    __slots__ = ("children", "record", "is_complete")

    def __init__(self):
        self.children: Dict[str, "TrieNode"] = {}
        self.record: Optional[FileRecord] = None
        self.is_complete = False


class PrefixIndex:
    """
    Prefix-indexed catalog of file records

    Keys are compared byte-for-byte (case-sensitive). Inserting an existing
    key replaces its record.
    """

    def __init__(self):
        self.root = TrieNode()
        self._count = 0

    def Insert(self, path: str, record: FileRecord) -> None:
        """
        Store a record under an exact path

        Args:
            path: Catalog path (must be non-empty)
            record: Record to attach; replaces any existing record

        Raises:
            ValueError: If path is empty
        """
        if not path:
            raise ValueError("Cannot index an empty path")

        node = self.root
        for char in path:
            child = node.children.get(char)
            if child is None:
                child = TrieNode()
                node.children[char] = child
            node = child

        if not node.is_complete:
            self._count += 1
        node.record = record
        node.is_complete = True

    def Lookup(self, path: str) -> Optional[FileRecord]:
        """
        Get the record stored at exactly this path

        Returns None when the path is absent or only a prefix of stored keys.
        """
        node = self._FindNode(path)
        if node is None or not node.is_complete:
            return None
        return node.record

    def PrefixSearch(self, prefix: str) -> List[FileRecord]:
        """
        Get every record whose path starts with prefix

        An empty prefix matches the whole index. Order follows child
        iteration order and should not be relied upon.
        """
        node = self._FindNode(prefix)
        if node is None:
            return []

        results: List[FileRecord] = []
        self._CollectRecords(node, results)
        return results

    def Remove(self, path: str) -> bool:
        """
        Remove the record at path and prune branches left without entries

        Returns:
            bool: True if the terminal node's branch was pruned. False when
                  the path was not stored, or when the node still has
                  children and only its completion flag was cleared.
        """
        if not path:
            return False

        # Walk down remembering (parent, char) for each step
        trail = []
        node = self.root
        for char in path:
            child = node.children.get(char)
            if child is None:
                return False
            trail.append((node, char))
            node = child

        if not node.is_complete:
            return False

        node.is_complete = False
        node.record = None
        self._count -= 1
        if node.children:
            return False

        # Prune dead branch bottom-up
        for parent, char in reversed(trail):
            del parent.children[char]
            if parent.children or parent.is_complete or parent is self.root:
                break
        return True

    def Count(self) -> int:
        """Number of complete entries"""
        return self._count

    # ==================== Internal Helpers ====================

    def _FindNode(self, key: str) -> Optional[TrieNode]:
        node = self.root
        for char in key:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def _CollectRecords(self, node: TrieNode, results: List[FileRecord]) -> None:
        # Explicit stack; deep paths would otherwise hit the recursion limit
        stack = [node]
        while stack:
            current = stack.pop()
            if current.is_complete:
                results.append(current.record)
            stack.extend(reversed(list(current.children.values())))
