"""
TreeMirror Server - Status Endpoints

This module contains the health check endpoint.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from treemirror_server import __version__
from treemirror_server.catalog import CatalogService
from treemirror_server.routes import GetCatalog


# Create router instance
router = APIRouter()


@router.get("/health", tags=["Status"])
def health_check(catalog: CatalogService = Depends(GetCatalog)):
    """
    Health check endpoint to verify server is running

    Returns:
        dict: Server status information
    """
    return {
        "status": "healthy",
        "service": "TreeMirror Server",
        "version": __version__,
        "root": str(catalog.root),
        "file_count": catalog.FileCount(),
        "timestamp_utc": datetime.now(timezone.utc).isoformat()
    }
