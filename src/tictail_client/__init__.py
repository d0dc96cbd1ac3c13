"""Tictail Client - A Python client for the Tictail OAuth2 REST API.

This package exchanges OAuth authorization codes for access tokens, caches
the token, and performs authenticated calls against the Tictail API.
"""

__version__ = "0.1.0"

from tictail_client.core.client import TicTailClient
from tictail_client.core.config import Config
from tictail_client.core.exceptions import (
    TicTailError,
    ConfigurationError,
    TransportError,
    RequestTimeoutError,
    ApiError,
    OutdatedCredentialsError,
    RequestError,
    ErrorKind,
)

__all__ = [
    "TicTailClient",
    "Config",
    "TicTailError",
    "ConfigurationError",
    "TransportError",
    "RequestTimeoutError",
    "ApiError",
    "OutdatedCredentialsError",
    "RequestError",
    "ErrorKind",
    "__version__",
]
