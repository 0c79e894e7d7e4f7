"""
TreeMirror Server - Infrastructure Models Package

This package contains dataclass models for infrastructure components
like scan results.
"""

from treemirror_server.models.infrastructure.scan_result import (
    ScanStatus,
    ScanResult,
    get_scan_error_message
)

__all__ = [
    'ScanStatus',
    'ScanResult',
    'get_scan_error_message',
]
