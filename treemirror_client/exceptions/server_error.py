"""
TreeMirror Client - Server Error Exception

Exception raised when a catalog request to the server fails. Fatal for the
invocation that made it.
"""

from .api_error import TreeMirrorAPIError


class TreeMirrorServerError(TreeMirrorAPIError):
    """Exception for server and transport errors on catalog requests."""
    pass
