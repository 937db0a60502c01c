"""Exceptions raised by cmrquery."""

from typing import Optional


class CMRError(Exception):
    """Base class for every error raised by cmrquery."""


class InvalidBaseURL(CMRError, ValueError):
    """The configured base URL cannot have a route appended to it."""


class CMRSearchError(CMRError, RuntimeError):
    """CMR answered a search request with a non-success status.

    Attributes:
        status_code: HTTP status of the failed response.
        body: Response body, usually CMR's JSON error document.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CMRDecodeError(CMRError, ValueError):
    """A JSON response body could not be decoded."""
