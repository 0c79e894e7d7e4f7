"""
TreeMirror Server - Catalog Endpoints

This module contains the read-only catalog endpoints: the directory tree
and the prefix file listing.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from treemirror_server.catalog import CatalogService
from treemirror_server.models.api import (
    DirectoryEntry, DirectoryResponse,
    FileEntry, FileListResponse
)
from treemirror_server.routes import GetCatalog


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

# Query values accepted as "true" for the update flag
TRUTHY_VALUES = {"1", "true", "TRUE", "ON"}


def ParseUpdateFlag(value: Optional[str]) -> bool:
    """Interpret the update query parameter"""
    return value is not None and value in TRUTHY_VALUES


@router.get(
    "/dir",
    response_model=DirectoryResponse,
    response_model_exclude_none=True,
    tags=["Catalog"]
)
def describe_tree(catalog: CatalogService = Depends(GetCatalog)):
    """
    Describe the directory tree built by the most recent scan

    Returns:
        DirectoryResponse: {"Dir": {"Name", "Count", "Children"}}

    Raises:
        HTTPException: 503 if no scan has completed
    """
    tree = catalog.DescribeTree()
    if tree is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Directory tree not available"
        )
    return DirectoryResponse(dir=DirectoryEntry.FromNode(tree))


@router.get(
    "/list",
    response_model=FileListResponse,
    tags=["Catalog"]
)
def list_files(
    prefix: str = Query("", description="Only list paths starting with this prefix"),
    update: Optional[str] = Query(None, description="Re-check files on disk (1, true, TRUE, ON)"),
    catalog: CatalogService = Depends(GetCatalog)
):
    """
    List catalog files under a path prefix

    With update set, every matched file is re-checked on disk first. Files
    that disappeared are reported with Delete=true and stay in the catalog
    as tombstones.

    Returns:
        FileListResponse: {"Files": [{"Path", "Size", "Time", "Delete"}]}
    """
    refresh = ParseUpdateFlag(update)
    records = catalog.ListByPrefix(prefix, refresh=refresh)

    logger.info(f"Listed {len(records)} files for prefix '{prefix}' (update={refresh})")

    return FileListResponse(files=[FileEntry.FromRecord(record) for record in records])
