"""
TreeMirror Client - Operations Package

This package contains the sync operations classes and functions.
"""

from .sync_operations import SyncOperations, failed_paths

__all__ = ['SyncOperations', 'failed_paths']
