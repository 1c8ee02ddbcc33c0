"""Custom exceptions for the Smithsonian Open Access integration."""


class SmithsonianAppError(Exception):
    """Base exception for the application."""

    pass


class PreconditionError(SmithsonianAppError, ValueError):
    """Raised when a required argument is missing, before any request is sent."""

    pass


class ConfigurationError(SmithsonianAppError):
    """Exception raised for configuration errors."""

    pass


class SmithsonianAPIError(SmithsonianAppError):
    """Base for failures talking to the Open Access API."""

    pass


class TransportError(SmithsonianAPIError):
    """Exception raised for network/connection errors."""

    pass


class UpstreamStatusError(SmithsonianAPIError):
    """Exception raised when the API answers with a status other than 200."""

    def __init__(self, status_code: int, message: str, response_text: str = ""):
        self.status_code = status_code
        self.message = message
        self.response_text = response_text
        super().__init__(f"Open Access API error {status_code}: {message}")


class ResponseDecodeError(SmithsonianAPIError):
    """Exception raised when a 200 response body is not valid JSON."""

    pass
