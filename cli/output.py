#!/usr/bin/env python3
"""
Output Formatting Module for the txval CLI

Renders command results as key-value tables, JSON or YAML.
"""

import json
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from tabulate import tabulate


OUTPUT_FORMATS = ['table', 'json', 'yaml']


class OutputFormatter:
    """Universal output formatter for CLI results."""

    def __init__(self, format_type: str = 'table', color_output: bool = True):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            color_output: Enable colored output (only applied on a terminal)
        """
        if format_type not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {format_type}")
        self.format_type = format_type
        self.color_output = color_output and sys.stdout.isatty()

    def format(self, data: Any, headers: Optional[List[str]] = None) -> str:
        """
        Format data according to the configured format type.

        Args:
            data: Data to format
            headers: Optional column order for lists of records

        Returns:
            Formatted string output
        """
        if self.format_type == 'json':
            return self.format_json(data)
        elif self.format_type == 'yaml':
            return self.format_yaml(data)
        else:
            return self.format_table(data, headers)

    def format_json(self, data: Any) -> str:
        return json.dumps(data, indent=2, default=self._json_encoder)

    def format_yaml(self, data: Any) -> str:
        # Round-trip through JSON so Decimals and Paths become plain scalars
        plain = json.loads(self.format_json(data))
        return yaml.safe_dump(plain, default_flow_style=False, sort_keys=False).rstrip()

    def format_table(self, data: Any, headers: Optional[List[str]] = None) -> str:
        if isinstance(data, dict):
            return self._format_dict_table(data)
        elif isinstance(data, list):
            return self._format_list_table(data, headers)
        else:
            return str(data)

    def _format_dict_table(self, data: Dict[str, Any]) -> str:
        """Format dictionary as a key-value table, with nested keys in dot notation."""
        table_data = [[self._colorize(k, 'key'), self._format_value(v)]
                      for k, v in self._flatten(data)]
        return tabulate(table_data, tablefmt='plain', disable_numparse=True)

    def _format_list_table(self, data: List[Any], headers: Optional[List[str]] = None) -> str:
        """Format list as a table."""
        if not data:
            return "No data available"

        if not isinstance(data[0], dict):
            return '\n'.join(str(item) for item in data)

        if headers is None:
            headers = list(data[0].keys())

        table_data = [[self._format_value(item.get(h, '')) for h in headers] for item in data]
        colored_headers = [self._colorize(h, 'header') for h in headers]
        return tabulate(table_data, headers=colored_headers, tablefmt='grid',
                        disable_numparse=True)

    def _flatten(self, data: Dict[str, Any], prefix: str = '') -> List[Tuple[str, Any]]:
        rows = []
        for key, value in data.items():
            name = f"{prefix}{key}"
            if isinstance(value, dict) and value:
                rows.extend(self._flatten(value, name + '.'))
            else:
                rows.append((name, value))
        return rows

    def _format_value(self, value: Any) -> str:
        """Format individual value for display."""
        if value is None:
            return 'null'
        elif isinstance(value, bool):
            return 'true' if value else 'false'
        elif isinstance(value, Decimal):
            return format(value, 'f')
        elif isinstance(value, datetime):
            return value.strftime('%Y-%m-%d %H:%M:%S')
        elif isinstance(value, dict):
            return f"<{len(value)} items>"
        elif isinstance(value, list):
            return ', '.join(str(item) for item in value) if value else '-'
        return str(value)

    def _colorize(self, text: str, color_type: str) -> str:
        """Add color to text if color output is enabled."""
        if not self.color_output:
            return text

        colors = {
            'header': '\033[1;34m',  # Bold blue
            'key': '\033[1;36m',     # Bold cyan
            'error': '\033[1;31m',   # Bold red
            'success': '\033[1;32m', # Bold green
        }
        color = colors.get(color_type, '')
        return f"{color}{text}\033[0m" if color else text

    def _json_encoder(self, obj):
        """Custom JSON encoder for special types."""
        if isinstance(obj, Decimal):
            return format(obj, 'f')
        elif isinstance(obj, datetime):
            return obj.isoformat()
        elif isinstance(obj, Path):
            return str(obj)
        elif isinstance(obj, bytes):
            return obj.hex()
        return str(obj)
