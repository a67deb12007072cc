"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from typing import Optional


class DjAutomationError(Exception):
    """Base exception for all application-specific errors."""


class ApiError(DjAutomationError):
    """
    Raised when a YouTube Data API call fails at the transport level or the
    remote returns an error status.
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status = status


class ConfigurationError(DjAutomationError):
    """Raised for issues related to configuration loading or validation."""


class DownloadError(DjAutomationError):
    """Raised when the audio download or conversion does not produce a file."""
