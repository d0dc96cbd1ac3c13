"""Plain-text serializations of API responses."""

import json
from typing import Any

import yaml

from .base import OutputFormatter


class JSONFormatter(OutputFormatter):
    """Indented JSON; ``compact=True`` prints a single line."""

    def format(self, data: Any, **kwargs) -> str:
        indent = None if kwargs.get('compact') else 2
        # str() covers anything json can't encode, e.g. datetimes
        return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


class YAMLFormatter(OutputFormatter):
    """Block-style YAML in response key order."""

    def format(self, data: Any, **kwargs) -> str:
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
