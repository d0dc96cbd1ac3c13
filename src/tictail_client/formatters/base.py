"""Base formatter classes and registry."""

import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, data: Any, **kwargs) -> str:
        """Format data for output.

        Args:
            data: Data to format
            **kwargs: Formatter-specific options

        Returns:
            Formatted string
        """
        pass


class FormatterRegistry:
    """Registry for output formatters."""

    def __init__(self):
        self.formatters: Dict[str, OutputFormatter] = {}

    def register(self, name: str, formatter: OutputFormatter):
        self.formatters[name] = formatter

    def get(self, name: str) -> Optional[OutputFormatter]:
        return self.formatters.get(name)

    def format(self, data: Any, format_type: str = 'auto', **kwargs) -> str:
        """Format data using specified formatter.

        Args:
            data: Data to format
            format_type: Formatter to use ('auto' picks table on a terminal, JSON otherwise)
            **kwargs: Formatter-specific options

        Returns:
            Formatted string

        Raises:
            ValueError: If formatter not found
        """
        if format_type == 'auto':
            format_type = self._auto_select_format(data)

        formatter = self.get(format_type)
        if not formatter:
            raise ValueError(f"Unknown format type: {format_type}")

        return formatter.format(data, **kwargs)

    def _auto_select_format(self, data: Any) -> str:
        if sys.stdout.isatty() and isinstance(data, dict) and 'table' in self.formatters:
            return 'table'
        return 'json'

    def list_formats(self) -> List[str]:
        return sorted(self.formatters)
