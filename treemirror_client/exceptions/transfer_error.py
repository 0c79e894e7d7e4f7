"""
TreeMirror Client - Transfer Error Exception

Exception raised when downloading a single file fails. Recorded per file;
the rest of the batch continues.
"""

from .api_error import TreeMirrorAPIError


class TreeMirrorTransferError(TreeMirrorAPIError):
    """Exception for per-file download failures."""
    pass
