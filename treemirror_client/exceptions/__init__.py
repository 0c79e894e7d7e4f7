"""
TreeMirror Client - Exceptions Package

Contains all exception classes for the TreeMirror client.
"""

from .api_error import TreeMirrorAPIError
from .server_error import TreeMirrorServerError
from .parse_error import TreeMirrorParseError
from .transfer_error import TreeMirrorTransferError

__all__ = [
    'TreeMirrorAPIError',
    'TreeMirrorServerError',
    'TreeMirrorParseError',
    'TreeMirrorTransferError'
]
