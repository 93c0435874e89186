#!/usr/bin/env python3
"""
Shared CLI context and helpers for txval commands.
"""

import functools
import json
import logging
import sys
import traceback
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from cli.config import ConfigurationManager
from cli.output import OutputFormatter


# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2
EXIT_INTERRUPTED = 130

# Package loggers the CLI attaches its handler to
LOGGER_NAMES = ('txval-cli', 'validator', 'ledger', 'crypto')


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.profile: Optional[str] = None
        self.output_format: Optional[str] = None
        self.verbose: int = 0
        self.config_manager: Optional[ConfigurationManager] = None
        self.config: Dict[str, Any] = {}
        self.logger: logging.Logger = logging.getLogger('txval-cli')
        self._handler: Optional[logging.Handler] = None

    def load_config(self):
        """
        Load configuration from all sources.

        Raises:
            ConfigurationError: If the config file or profile is invalid
        """
        self.config_manager = ConfigurationManager(self.config_file, self.profile)
        self.config = self.config_manager.load()
        if self.output_format is None:
            self.output_format = self.get_config('cli.output', 'table')

    def setup_logging(self):
        """Configure logging from verbosity, falling back to the logging.level setting."""
        log_levels = {
            1: logging.INFO,
            2: logging.DEBUG
        }

        if self.verbose:
            level = log_levels.get(min(self.verbose, 2), logging.DEBUG)
        else:
            level_name = str(self.get_config('logging.level', 'WARNING')).upper()
            level = getattr(logging, level_name, logging.WARNING)

        formatter = logging.Formatter(
            self.get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        for name in LOGGER_NAMES:
            logger = logging.getLogger(name)
            if self._handler is not None:
                logger.removeHandler(self._handler)
            logger.addHandler(handler)
            logger.setLevel(level)

        self._handler = handler

    def teardown_logging(self):
        """Detach the handler installed by setup_logging."""
        if self._handler is None:
            return
        for name in LOGGER_NAMES:
            logging.getLogger(name).removeHandler(self._handler)
        self._handler = None

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot path with fallback to default."""
        if self.config_manager is None:
            return default
        return self.config_manager.get(key, default)

    def output(self, data: Any, format_override: Optional[str] = None,
               headers: Optional[List[str]] = None):
        """Output data in specified format."""
        formatter = OutputFormatter(
            format_override or self.output_format or 'table',
            color_output=bool(self.get_config('cli.color', True))
        )
        click.echo(formatter.format(data, headers))


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def handle_cli_error(func):
    """Decorator to handle CLI errors gracefully."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("\nOperation cancelled by user.", err=True)
            sys.exit(EXIT_INTERRUPTED)
        except click.ClickException:
            raise
        except Exception as e:
            ctx = None
            current = click.get_current_context(silent=True)
            if current is not None:
                ctx = current.find_object(CLIContext)

            click.echo(f"Error: {e}", err=True)
            if ctx and ctx.verbose >= 2:
                click.echo(traceback.format_exc(), err=True)
            else:
                click.echo("Use -vv for detailed error information.", err=True)

            sys.exit(EXIT_ERROR)

    return wrapper


def load_json_file(file_path: str) -> Any:
    """
    Load a JSON file, reading non-integer numbers as exact Decimals.

    Raises:
        click.FileError: If the file is missing or not valid JSON
    """
    path = Path(file_path)
    if not path.exists():
        raise click.FileError(file_path, hint="file not found")

    try:
        with open(path, 'r') as f:
            return json.load(f, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise click.FileError(file_path, hint=f"invalid JSON: {e}")
