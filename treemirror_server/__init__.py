"""
TreeMirror Server

Scans a directory tree, keeps a prefix-indexed catalog of its files and
serves the catalog and the file contents over HTTP.
"""

__version__ = "1.0.0"
