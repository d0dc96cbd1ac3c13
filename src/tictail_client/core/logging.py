"""
Centralized logging configuration for tictail-client.

This module provides a consistent logging setup across all components
with support for TRACE level logging.
"""

import logging
import sys
from typing import Optional

# Define TRACE level (below DEBUG)
TRACE_LEVEL = 5

def add_trace_level():
    """Add TRACE level to logging module."""
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    def trace(self, message, *args, **kwargs):
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, message, args, **kwargs)

    logging.Logger.trace = trace

# Add TRACE level on module import
add_trace_level()

def resolve_level(level: Optional[str]) -> int:
    """Translate a level name into a numeric logging level.

    Unknown names fall back to INFO.
    """
    if not level:
        return logging.INFO
    if level.upper() == "TRACE":
        return TRACE_LEVEL
    return getattr(logging, level.upper(), logging.INFO)

def setup_logging(level: Optional[str] = None, debug: bool = False) -> None:
    """
    Configure logging for the command-line front end.

    The library itself never calls this; embedding applications keep
    control of their own handlers.

    Args:
        level: Log level string (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: If True, sets level to TRACE regardless of other settings
    """
    log_level = TRACE_LEVEL if debug else resolve_level(level)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    logging.getLogger("tictail_client").setLevel(log_level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Args:
        name: Name of the module/component

    Returns:
        Logger under the tictail_client namespace
    """
    return logging.getLogger(f"tictail_client.{name}")

def mask_token(token: Optional[str]) -> str:
    """Shorten a bearer token for log output."""
    if not token:
        return "<none>"
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-2:]}"
