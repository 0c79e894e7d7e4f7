"""
TreeMirror Server - File Entry API Model

Pydantic models for the /list endpoint response.
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field

from treemirror_server.models.catalog import FileRecord


class FileEntry(BaseModel):
    """Wire form of a catalog file record"""
    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(alias="Path")
    size: int = Field(alias="Size", ge=0)
    time: int = Field(alias="Time")
    delete: bool = Field(alias="Delete")

    @classmethod
    def FromRecord(cls, record: FileRecord) -> "FileEntry":
        return cls(
            path=record.path,
            size=record.size,
            time=record.modified_at,
            delete=record.deleted
        )


class FileListResponse(BaseModel):
    """Response model for /list"""
    model_config = ConfigDict(populate_by_name=True)

    files: List[FileEntry] = Field(alias="Files")
