"""
Custom exceptions raised by the TMDB cache layer.

The HTTP layer maps them to responses in cineshelf.main; services never
build HTTP responses themselves.
"""
from typing import Optional


class CineShelfError(Exception):
    """Base class for all application errors"""


class UpstreamFetchError(CineShelfError):
    """
    The TMDB call failed: network error, timeout, non-2xx status or an
    unreadable body.
    """

    def __init__(self, endpoint: str, status_code: Optional[int] = None, reason: str = ""):
        self.endpoint = endpoint
        self.status_code = status_code
        self.reason = reason
        message = f"Failed to fetch from TMDB: {endpoint}"
        if status_code is not None:
            message += f" (status {status_code})"
        super().__init__(message)


class StoreError(CineShelfError):
    """The content cache table could not be read or written"""

    def __init__(self, operation: str, cache_key: Optional[str] = None):
        self.operation = operation
        self.cache_key = cache_key
        message = f"Content cache {operation} failed"
        if cache_key:
            message += f" for key '{cache_key}'"
        super().__init__(message)
