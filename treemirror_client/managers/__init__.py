"""
TreeMirror Client - Managers Package

Contains manager classes for configuration and the metadata cache.
"""

from .config_manager import ConfigManager, DEFAULT_CONFIG
from .cache_manager import CacheRecord, MetadataCache, open_metadata_cache

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG',
    'CacheRecord',
    'MetadataCache',
    'open_metadata_cache'
]
