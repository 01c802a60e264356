"""
Error taxonomy for contentloader.

Fatal errors (configuration, input parsing) abort a run before any row is
processed. Row errors (validation, remote failures) are caught at the row
boundary by the batch runner and only mark that row as failed.
"""

from typing import Optional


class LoaderError(Exception):
    """Base class for all errors raised by contentloader."""


class ConfigurationError(LoaderError):
    """A required option is missing or invalid."""


class ParseError(LoaderError):
    """The input file could not be read or parsed."""


class ValidationError(LoaderError):
    """
    A single row failed validation.

    Args:
        message: Human-readable description of the problem
        line: 1-based source line (CSV) or array index (JSON) of the row
    """

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class RemoteError(LoaderError):
    """
    The content store rejected a request or returned an unusable record.

    Args:
        message: Description of the failure
        status_code: HTTP status, when the failure came from a response
        body: Raw response body for diagnostics
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
