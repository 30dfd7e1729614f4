from typing import Optional


class PlacesError(Exception):
    """Base class for all errors raised by this package."""


class InvalidConfigurationError(PlacesError, ValueError):
    """Raised when the field is configured with values the API can't use."""


class PlacesApiError(PlacesError):
    """A request to the Places API failed or returned an unusable payload."""

    def __init__(self, message: str, status: Optional[str] = None, error_message: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.error_message = error_message
