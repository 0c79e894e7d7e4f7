"""
TreeMirror Server - Routes Package

Contains the API routers and shared request dependencies.
"""

from fastapi import HTTPException, Request
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from treemirror_server.catalog import CatalogService


def GetCatalog(request: Request) -> CatalogService:
    """
    Dependency returning the catalog attached to the running app

    Raises:
        HTTPException: 503 if no catalog has been attached
    """
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog not loaded"
        )
    return catalog
