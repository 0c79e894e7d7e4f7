"""
TreeMirror Server - Directory Scanner

This module walks the served root directory and:
- Inserts a FileRecord for every regular file into a PrefixIndex
- Builds the DirectoryNode tree summary (name + direct file count)
- Descends into subdirectories only in recursive mode

A failure on a single entry is logged and skipped; it never aborts the scan.
"""

import logging
import os
from pathlib import Path
from typing import Union

from treemirror_server.models.catalog import DirectoryNode, FileRecord
from treemirror_server.models.infrastructure import ScanResult, ScanStatus
from treemirror_server.prefix_index import PrefixIndex

logger = logging.getLogger(__name__)


def ToCatalogPath(root: Path, file_path: Union[str, Path]) -> str:
    """
    Convert an on-disk path to a catalog path

    Catalog paths are relative to the root and always use forward slashes.
    """
    return Path(os.path.relpath(file_path, root)).as_posix()


def ScanDirectory(root: Union[str, Path], recursive: bool, index: PrefixIndex) -> ScanResult:
    """
    Scan a root directory into a prefix index

    Args:
        root: Directory to scan
        recursive: Whether to descend into subdirectories
        index: Index receiving one FileRecord per regular file

    Returns:
        ScanResult: status, root DirectoryNode and skipped-entry warnings
    """
    root_path = Path(root)
    result = ScanResult(status=ScanStatus.OK, root=str(root_path))

    logger.debug(f"check dir: {root_path}")
    if not root_path.exists():
        result.status = ScanStatus.NOT_FOUND
        return result
    if not root_path.is_dir():
        result.status = ScanStatus.NOT_A_DIRECTORY
        return result

    resolved_root = root_path.resolve()
    root_node = DirectoryNode(name=resolved_root.name)
    _ScanInto(resolved_root, resolved_root, root_node, recursive, index, result)

    result.tree = root_node
    logger.info(
        f"Scanned {resolved_root}: {result.file_count} files"
        f"{f', {len(result.warnings)} entries skipped' if result.warnings else ''}"
    )
    return result


def _ScanInto(root: Path, directory: Path, node: DirectoryNode, recursive: bool,
              index: PrefixIndex, result: ScanResult) -> None:
    """Scan one directory level into node, recursing into subdirectories if requested"""
    try:
        with os.scandir(directory) as entries:
            entry_list = sorted(entries, key=lambda e: e.name)
    except OSError as e:
        _SkipEntry(result, directory, e)
        return

    for entry in entry_list:
        try:
            if entry.is_dir(follow_symlinks=False):
                if not recursive:
                    continue
                child = DirectoryNode(name=entry.name)
                node.children.append(child)
                _ScanInto(root, Path(entry.path), child, recursive, index, result)
            elif entry.is_file():
                stat_result = entry.stat()
                record = FileRecord(
                    path=ToCatalogPath(root, entry.path),
                    size=stat_result.st_size,
                    modified_at=int(stat_result.st_mtime),
                    deleted=False
                )
                index.Insert(record.path, record)
                node.file_count += 1
                result.file_count += 1
                logger.debug(f"File: {record.path}({record.modified_at})")
        except OSError as e:
            _SkipEntry(result, entry.path, e)


def _SkipEntry(result: ScanResult, path, error: Exception) -> None:
    message = f"Skipping {path}: {error}"
    logger.warning(message)
    result.warnings.append(message)
