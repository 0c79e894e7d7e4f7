"""
TreeMirror Client - API Error Exception

Base exception class for all API-related errors.
"""


class TreeMirrorAPIError(Exception):
    """Base exception for API errors."""
    pass
