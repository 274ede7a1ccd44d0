"""Nobl9-specific exceptions for error handling."""


class Nobl9Error(Exception):
    """Base exception for all Nobl9 API operations."""
    pass


class Nobl9APIError(Nobl9Error):
    """HTTP error from the Nobl9 API.

    Attributes:
        status_code: HTTP status code
        message: Error message from response
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class Nobl9AuthenticationError(Nobl9APIError):
    """Access token could not be obtained with the configured credentials."""
    pass


class Nobl9TimeoutError(Nobl9Error):
    """Request deadline expired before or during a call."""
    pass
