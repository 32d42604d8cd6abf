"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class GDriveDLError(Exception):
    """Base exception for all application-specific errors."""


class SharingDisabledError(GDriveDLError):
    """Raised when the service redirects to a login page instead of serving the item."""


class QuotaExceededError(GDriveDLError):
    """Raised when the service reports that the download quota for a file is used up."""


class UnresolvableIdError(GDriveDLError):
    """Raised when no identifier can be extracted from a URL."""


class UnrecognizedUrlError(GDriveDLError):
    """Raised when a URL is neither a file nor a folder URL."""


class ConfirmationError(GDriveDLError):
    """
    Raised when the download confirmation page keeps coming back after the
    last-resort confirm token was tried.
    """


class TooManyRedirectsError(GDriveDLError):
    """Raised when a redirect chain exceeds the configured hop limit."""


class ConfigurationError(GDriveDLError):
    """Raised for issues related to configuration loading or validation."""


class DownloadError(GDriveDLError):
    """Raised when a transfer or a local write fails."""
