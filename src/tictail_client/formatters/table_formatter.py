"""Table output formatter using rich."""

from io import StringIO
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .base import OutputFormatter


class TableFormatter(OutputFormatter):
    """Format API responses as a rich key/value table.

    A dict becomes one row per key; a list of dicts becomes one row per item.
    """

    def format(self, data: Any, **kwargs) -> str:
        """Format data as a table.

        Args:
            data: Data to format (dict or list of dicts)
            **kwargs: Options including:
                - title: Table title
                - show_lines: Show row lines (default: False)
                - max_width: Maximum column width (default: None)
        """
        table = Table(
            title=kwargs.get('title'),
            show_header=True,
            show_lines=kwargs.get('show_lines', False),
            header_style='bold cyan',
        )

        if isinstance(data, list) and data and all(isinstance(item, dict) for item in data):
            keys = []
            for item in data:
                for key in item:
                    if key not in keys:
                        keys.append(key)
            for key in keys:
                table.add_column(self._format_header(key), max_width=kwargs.get('max_width'), overflow='fold')
            for item in data:
                table.add_row(*[self._format_value(item.get(key)) for key in keys])
        elif isinstance(data, dict):
            if not data:
                return "No data to display"
            table.add_column('Field', style='bright_blue')
            table.add_column('Value', max_width=kwargs.get('max_width'), overflow='fold')
            for key, value in data.items():
                table.add_row(self._format_header(str(key)), self._format_value(value))
        elif isinstance(data, list):
            if not data:
                return "No data to display"
            table.add_column('Value', max_width=kwargs.get('max_width'))
            for item in data:
                table.add_row(self._format_value(item))
        else:
            table.add_column('Value')
            table.add_row(self._format_value(data))

        console = Console(file=StringIO(), force_terminal=kwargs.get('color', False), width=kwargs.get('width', 120))
        console.print(table)
        return console.file.getvalue()

    def _format_header(self, key: str) -> str:
        # snake_case to Title Case
        return key.replace('_', ' ').title()

    def _format_value(self, value: Any) -> Text:
        if value is None:
            return Text("-", style="dim")
        if isinstance(value, bool):
            return Text("yes" if value else "no", style="green" if value else "red")
        if isinstance(value, (list, tuple)):
            if not value:
                return Text("[]", style="dim")
            items = [str(item) for item in value[:3]]
            if len(value) > 3:
                items.append(f"... ({len(value) - 3} more)")
            return Text(", ".join(items))
        if isinstance(value, dict):
            if not value:
                return Text("{}", style="dim")
            return Text(f"<{len(value)} items>", style="dim")
        text = str(value)
        if len(text) > 100:
            text = text[:97] + "..."
        return Text(text)
