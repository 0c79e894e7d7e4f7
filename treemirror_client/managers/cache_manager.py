"""
TreeMirror Client - Metadata Cache

Persistent mapping from local path to the size/time last known to be in
sync with the server, stored in SQLite through SQLAlchemy. It only saves
filesystem stats; losing it never affects correctness, so storage errors
are logged and treated as a cache miss.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from treemirror_client.models.database import Base, CacheEntry

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheRecord:
    """Last synchronized size and modification time of a file"""
    size: int
    modified_at: int

    def dumps(self) -> str:
        return json.dumps({"Size": self.size, "Time": self.modified_at})

    @classmethod
    def loads(cls, value: str) -> Optional["CacheRecord"]:
        """Decode a stored value; None if it is not a valid record"""
        try:
            data = json.loads(value)
            size, modified_at = data["Size"], data["Time"]
        except (ValueError, TypeError, KeyError):
            return None
        if not isinstance(size, int) or not isinstance(modified_at, int):
            return None
        return cls(size=size, modified_at=modified_at)


class MetadataCache:
    """
    Key-ordered path -> CacheRecord store.

    Responsibilities:
    - get/put/delete cache records by path
    - Create the database and table on first use
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Open (or create) the cache database.

        Args:
            db_path: Path to the SQLite file

        Raises:
            SQLAlchemyError: If the database cannot be opened
            OSError: If the parent directory cannot be created
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(f"sqlite:///{self.db_path}", echo=False)
        Base.metadata.create_all(bind=self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine,
                                         expire_on_commit=False)
        logger.debug(f"Metadata cache opened: {self.db_path}")

    def get(self, path: str) -> Optional[CacheRecord]:
        """
        Get the cached record for a path.

        Returns:
            CacheRecord, or None if absent, undecodable or unreadable
        """
        session = self.SessionLocal()
        try:
            entry = session.get(CacheEntry, path)
            if entry is None:
                return None
            record = CacheRecord.loads(entry.value)
            if record is None:
                logger.debug(f"Ignoring undecodable cache value for {path}")
            return record
        except SQLAlchemyError as e:
            logger.warning(f"Metadata cache read failed for {path}: {e}")
            return None
        finally:
            session.close()

    def put(self, path: str, record: CacheRecord) -> bool:
        """
        Store or replace the cached record for a path.

        Returns:
            True if stored
        """
        session = self.SessionLocal()
        try:
            session.merge(CacheEntry(path=path, value=record.dumps()))
            session.commit()
            return True
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning(f"Metadata cache write failed for {path}: {e}")
            return False
        finally:
            session.close()

    def delete(self, path: str) -> bool:
        """
        Remove the cached record for a path.

        Returns:
            True if a record was removed
        """
        session = self.SessionLocal()
        try:
            removed = session.query(CacheEntry).filter(CacheEntry.path == path).delete()
            session.commit()
            return removed > 0
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning(f"Metadata cache delete failed for {path}: {e}")
            return False
        finally:
            session.close()

    def close(self):
        """Release the database engine."""
        self.engine.dispose()


def open_metadata_cache(db_path: Union[str, Path]) -> Optional[MetadataCache]:
    """
    Open the metadata cache, or None if it is unavailable.

    Synchronization works without a cache, so failure here is only a warning.
    """
    try:
        return MetadataCache(db_path)
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Metadata cache unavailable at {db_path}, comparing against local files: {e}")
        return None
