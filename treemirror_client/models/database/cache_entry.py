"""
TreeMirror Client - Cache Entry Database Model

Key-value row of the metadata cache: local path -> opaque serialized value.
"""

from sqlalchemy import Column, String

from .base import Base


class CacheEntry(Base):
    """
    Metadata cache table - last synchronized state of each local file
    Value holds a JSON object {"Size": int, "Time": int}
    """
    __tablename__ = "sync_cache"

    path = Column(String, primary_key=True)
    value = Column(String, nullable=False)
