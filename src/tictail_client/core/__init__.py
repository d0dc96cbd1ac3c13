"""Core functionality for the Tictail client."""

from .client import TicTailClient
from .config import Config
from .token import TokenState
from .exceptions import (
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
    "TokenState",
    "TicTailError",
    "ConfigurationError",
    "TransportError",
    "RequestTimeoutError",
    "ApiError",
    "OutdatedCredentialsError",
    "RequestError",
    "ErrorKind",
]
