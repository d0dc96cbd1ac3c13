"""Exception classes for the Tictail API client."""

from enum import IntEnum
from typing import Optional, Dict, Any


class ErrorKind(IntEnum):
    """Broad category of a client failure."""

    OUTDATED_CREDENTIALS = 1
    TRANSPORT = 2
    REQUEST = 3


class TicTailError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize exception with message and optional details.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(TicTailError):
    """Raised when configuration is invalid or credentials are missing."""
    pass


class TransportError(TicTailError):
    """Raised when an HTTP exchange could not be completed."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, code: Optional[str] = None, reason: Optional[str] = None):
        """Initialize transport error.

        Args:
            message: Error message
            code: Name of the underlying transport failure (e.g. 'ConnectError')
            reason: Text of the underlying failure
        """
        details = {}
        if code:
            details['code'] = code
        if reason:
            details['reason'] = reason
        super().__init__(message, details)
        self.code = code
        self.reason = reason


class RequestTimeoutError(TransportError):
    """Raised when a request exceeds the connect or total timeout."""

    def __init__(self, operation: str, timeout: float, code: Optional[str] = None):
        message = f"Operation '{operation}' timed out after {timeout} seconds"
        super().__init__(message, code=code)
        self.operation = operation
        self.timeout = timeout
        self.details['timeout'] = timeout


class ApiError(TicTailError):
    """Raised when the API answers with anything other than HTTP 200."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize API error with HTTP details.

        Args:
            message: Error message
            kind: OUTDATED_CREDENTIALS or REQUEST
            status_code: HTTP status code if available
            response_text: Response body text if available
            details: Additional error details
        """
        super().__init__(message, details)
        self.kind = kind
        self.status_code = status_code
        self.response_text = response_text

        if status_code:
            self.details['status_code'] = status_code
        if response_text:
            self.details['response'] = response_text


class OutdatedCredentialsError(ApiError):
    """The access token is missing, expired or revoked; restart the OAuth flow."""

    DEFAULT_MESSAGE = "Reauthorize the user!"

    def __init__(
        self,
        message: str = DEFAULT_MESSAGE,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None
    ):
        super().__init__(message, ErrorKind.OUTDATED_CREDENTIALS, status_code, response_text)


class RequestError(ApiError):
    """The platform rejected the request with a structured error body."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None
    ):
        super().__init__(message, ErrorKind.REQUEST, status_code, response_text)
