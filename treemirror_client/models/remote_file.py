"""
TreeMirror Client - Remote Catalog Models

Dataclasses for the catalog entries returned by the server, and the
parsing of /list and /dir response bodies into them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from treemirror_client.exceptions import TreeMirrorParseError


@dataclass(frozen=True)
class RemoteFile:
    """One file entry of a /list response"""
    path: str
    size: int
    modified_at: int
    deleted: bool = False


@dataclass
class RemoteDirectory:
    """One node of a /dir response"""
    name: str
    file_count: int
    children: List["RemoteDirectory"] = field(default_factory=list)


def _require(entry: Dict[str, Any], key: str, expected_type: type) -> Any:
    if key not in entry:
        raise TreeMirrorParseError(f"Catalog entry missing '{key}': {entry!r}")
    value = entry[key]
    # bool is a subclass of int; never accept it where a number is expected
    if expected_type is int and isinstance(value, bool):
        raise TreeMirrorParseError(f"Catalog entry field '{key}' is not a number: {value!r}")
    if not isinstance(value, expected_type):
        raise TreeMirrorParseError(
            f"Catalog entry field '{key}' should be {expected_type.__name__}, got {value!r}"
        )
    return value


def parse_file_entry(entry: Any) -> RemoteFile:
    """
    Convert one FileEntry object to a RemoteFile.

    Raises:
        TreeMirrorParseError: If the entry is malformed
    """
    if not isinstance(entry, dict):
        raise TreeMirrorParseError(f"Catalog entry is not an object: {entry!r}")

    path = _require(entry, "Path", str)
    size = _require(entry, "Size", int)
    if not path:
        raise TreeMirrorParseError("Catalog entry has an empty path")
    if size < 0:
        raise TreeMirrorParseError(f"Catalog entry has a negative size: {path}")

    return RemoteFile(
        path=path,
        size=size,
        modified_at=_require(entry, "Time", int),
        deleted=_require(entry, "Delete", bool)
    )


def parse_file_list(payload: Any) -> List[RemoteFile]:
    """
    Convert a /list response body to RemoteFile entries.

    A null Files value is read as an empty list.

    Raises:
        TreeMirrorParseError: If the body is malformed
    """
    if not isinstance(payload, dict) or "Files" not in payload:
        raise TreeMirrorParseError("File list response has no 'Files' member")

    files = payload["Files"]
    if files is None:
        return []
    if not isinstance(files, list):
        raise TreeMirrorParseError("File list response 'Files' is not an array")

    return [parse_file_entry(entry) for entry in files]


def parse_directory(payload: Any) -> RemoteDirectory:
    """
    Convert a /dir response body to a RemoteDirectory tree.

    Raises:
        TreeMirrorParseError: If the body is malformed
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("Dir"), dict):
        raise TreeMirrorParseError("Directory response has no 'Dir' object")
    return _parse_directory_node(payload["Dir"])


def _parse_directory_node(node: Dict[str, Any]) -> RemoteDirectory:
    children = node.get("Children") or []
    if not isinstance(children, list) or not all(isinstance(c, dict) for c in children):
        raise TreeMirrorParseError(f"Directory 'Children' is not an array of objects: {node!r}")

    return RemoteDirectory(
        name=_require(node, "Name", str),
        file_count=_require(node, "Count", int),
        children=[_parse_directory_node(child) for child in children]
    )
