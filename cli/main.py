#!/usr/bin/env python3
"""
Transaction Validator - Command Line Interface

Validates transaction files against UTXO snapshots, prints canonical signing payloads,
and inspects the CLI configuration.
"""

from typing import Optional

import click

from cli import __version__
from cli.commands.config import config
from cli.commands.validate import payload_command, validate_command
from cli.context import CLIContext, pass_context
from cli.output import OUTPUT_FORMATS
from cli.config import PROFILES
from validator.errors import ConfigurationError


@click.group(context_settings={'help_option_names': ['-h', '--help']},
             invoke_without_command=True)
@click.option('--config-file', '-c',
              type=click.Path(dir_okay=False),
              help='Path to configuration file')
@click.option('--profile', '-p',
              type=click.Choice(sorted(PROFILES)),
              help='Configuration profile')
@click.option('--output-format', '-o',
              type=click.Choice(OUTPUT_FORMATS),
              help='Output format (default: cli.output setting)')
@click.option('--verbose', '-v',
              count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.option('--version',
              is_flag=True,
              help='Show version information')
@pass_context
@click.pass_context
def cli(click_ctx: click.Context, ctx: CLIContext, config_file: Optional[str],
        profile: Optional[str], output_format: Optional[str], verbose: int, version: bool):
    """
    Transaction Validator (txval) Command Line Interface

    Checks proposed transactions against a snapshot of unspent outputs.

    Examples:
        txval validate tx.json --pool utxos.json
        txval validate tx.json --pool utxos.json --report --report-format markdown
        txval payload tx.json --digest
        txval config show
    """

    if version:
        click.echo(f"txval v{__version__}")
        click_ctx.exit(0)

    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        click_ctx.exit(0)

    ctx.config_file = config_file
    ctx.profile = profile
    ctx.output_format = output_format
    ctx.verbose = verbose

    try:
        ctx.load_config()
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    ctx.setup_logging()
    click_ctx.call_on_close(ctx.teardown_logging)

    ctx.logger.debug(f"CLI initialized with sources: {', '.join(ctx.config_manager.get_sources())}")


def register_commands():
    """Register all command modules with the main CLI."""
    cli.add_command(validate_command)
    cli.add_command(payload_command)
    cli.add_command(config)


register_commands()


def main():
    """Console script entry point."""
    cli(prog_name='txval')


if __name__ == '__main__':
    main()
