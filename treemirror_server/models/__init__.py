"""
TreeMirror Server - Models Package

This package contains all data models for the TreeMirror server:
- catalog: in-memory catalog dataclasses
- api: API endpoint Pydantic models
- infrastructure: Dataclass models for infrastructure components
"""

# Re-export all models for convenient importing
from treemirror_server.models.catalog import *
from treemirror_server.models.api import *
from treemirror_server.models.infrastructure import *
