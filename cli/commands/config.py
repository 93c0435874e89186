#!/usr/bin/env python3
"""
Configuration Management Commands for the txval CLI

Commands for inspecting the merged configuration and where it came from.
"""

import sys
from typing import Optional

import click

from cli.config import CONFIG_SEARCH_PATHS
from cli.context import CLIContext, EXIT_ERROR, handle_cli_error, pass_context


@click.group()
@pass_context
def config(ctx: CLIContext):
    """
    Configuration management commands.

    Inspect the configuration merged from defaults, profile, config file and
    TXVAL_* environment variables.
    """
    ctx.logger.debug("Config command group invoked")


@config.command('show')
@click.option('--key', help='Specific configuration key to show (dot notation)')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json', 'yaml']),
              help='Override output format')
@click.option('--export-env', is_flag=True, help='Export as environment variables')
@pass_context
@handle_cli_error
def show_config(ctx: CLIContext, key: Optional[str], output_format: Optional[str],
                export_env: bool):
    """
    Display current configuration settings.

    Examples:
        txval config show
        txval config show --key logging.level
        txval config show --export-env > .env
    """

    manager = ctx.config_manager

    if export_env:
        for name, value in manager.export_environment().items():
            click.echo(f"export {name}=\"{value}\"")
        return

    if key:
        missing = object()
        value = manager.get(key, missing)
        if value is missing:
            raise click.ClickException(f"Configuration key not found: {key}")

        if isinstance(value, dict):
            ctx.output(value, output_format or 'yaml')
        elif output_format:
            ctx.output({key: value}, output_format)
        else:
            click.echo(f"{key}: {value}")
    else:
        ctx.output(manager.load(), output_format or 'yaml')


@config.command('sources')
@pass_context
@handle_cli_error
def show_sources(ctx: CLIContext):
    """
    List the configuration sources that were applied, lowest precedence first.
    """

    click.echo("Configuration sources (later entries override earlier ones):")
    for i, source in enumerate(ctx.config_manager.get_sources(), 1):
        click.echo(f"  {i}. {source}")

    if ctx.verbose:
        click.echo("Config file search paths:")
        for path in CONFIG_SEARCH_PATHS:
            marker = "found" if path.exists() else "missing"
            click.echo(f"  {path} ({marker})")


@config.command('validate')
@pass_context
@handle_cli_error
def validate_config(ctx: CLIContext):
    """
    Validate configuration values.

    Examples:
        txval config validate
        txval --profile production config validate
    """

    ctx.logger.info("Validating configuration")

    errors = ctx.config_manager.validate()

    if errors:
        click.echo("Configuration validation failed:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(EXIT_ERROR)

    click.echo("Configuration is valid")
    click.echo(f"  Log level: {ctx.get_config('logging.level')}")
    click.echo(f"  Output format: {ctx.get_config('cli.output')}")
    click.echo(f"  UTXO snapshot: {ctx.get_config('pool.snapshot') or '-'}")
    click.echo(f"  Report format: {ctx.get_config('report.format')}")
