"""
TreeMirror Client - Parse Error Exception

Exception raised when a catalog response cannot be understood. Treated the
same as a transport failure.
"""

from .server_error import TreeMirrorServerError


class TreeMirrorParseError(TreeMirrorServerError):
    """Exception for malformed catalog responses."""
    pass
