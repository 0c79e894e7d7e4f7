"""
TreeMirror Client - Database Models Package
"""

from .base import Base
from .cache_entry import CacheEntry

__all__ = [
    'Base',
    'CacheEntry'
]
