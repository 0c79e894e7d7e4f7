"""
TreeMirror Client

Mirrors a directory tree served by a TreeMirror server, downloading new or
changed files and removing files the server has deleted.
"""

__version__ = "1.0.0"
