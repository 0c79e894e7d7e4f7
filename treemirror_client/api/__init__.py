"""
TreeMirror Client - API Package

This package contains the API communication class.
"""

from .treemirror_api import TreeMirrorAPI

__all__ = ['TreeMirrorAPI']
