"""
TreeMirror Server - Directory Entry API Model

Pydantic models for the /dir endpoint response.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from treemirror_server.models.catalog import DirectoryNode


class DirectoryEntry(BaseModel):
    """Wire form of a directory node; Children is omitted when empty"""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    count: int = Field(alias="Count", ge=0)
    children: Optional[List["DirectoryEntry"]] = Field(default=None, alias="Children")

    @classmethod
    def FromNode(cls, node: DirectoryNode) -> "DirectoryEntry":
        children = None
        if node.children:
            children = [cls.FromNode(child) for child in node.children]
        return cls(name=node.name, count=node.file_count, children=children)


class DirectoryResponse(BaseModel):
    """Response model for /dir"""
    model_config = ConfigDict(populate_by_name=True)

    dir: DirectoryEntry = Field(alias="Dir")


DirectoryEntry.model_rebuild()
