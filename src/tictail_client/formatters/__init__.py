"""Output formatters for displaying API responses."""

from .base import OutputFormatter, FormatterRegistry
from .table_formatter import TableFormatter
from .text_formatter import JSONFormatter, YAMLFormatter

# Register default formatters
registry = FormatterRegistry()
registry.register('json', JSONFormatter())
registry.register('table', TableFormatter())
registry.register('yaml', YAMLFormatter())


def format_output(data, format_type='auto', **kwargs):
    """Format data for output.

    Args:
        data: Data to format
        format_type: One of ``registry.list_formats()`` or 'auto'
        **kwargs: Additional formatter options

    Returns:
        Formatted string
    """
    return registry.format(data, format_type, **kwargs)

__all__ = [
    'OutputFormatter',
    'FormatterRegistry',
    'JSONFormatter',
    'TableFormatter',
    'YAMLFormatter',
    'format_output',
    'registry',
]
