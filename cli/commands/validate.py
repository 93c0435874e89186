#!/usr/bin/env python3
"""
Validation Commands for the txval CLI

Commands for validating transaction files against a UTXO snapshot and for printing
the canonical payload that signers sign.
"""

import sys
from typing import Optional

import click
from pydantic import ValidationError as ModelValidationError

from cli.config import REPORT_FORMATS
from cli.context import (
    CLIContext, EXIT_INVALID, EXIT_OK, handle_cli_error, load_json_file, pass_context
)
from crypto.signatures import payload_digest
from ledger.models import Transaction
from ledger.pool import InMemoryUTXOPool
from validator.core import TransactionValidator
from validator.error_reporting import ErrorReporter
from validator.payload import build_signable_payload


def load_transaction(tx_file: str) -> Transaction:
    """Load and parse a transaction JSON file."""
    data = load_json_file(tx_file)
    try:
        return Transaction.from_dict(data)
    except ModelValidationError as e:
        raise click.ClickException(f"Invalid transaction in {tx_file}: {e}")


@click.command('validate')
@click.argument('tx_file', type=click.Path(dir_okay=False))
@click.option('--pool', 'pool_file', type=click.Path(dir_okay=False),
              help='UTXO snapshot file (default: pool.snapshot setting)')
@click.option('--report', is_flag=True, help='Print a detailed error report')
@click.option('--report-format', type=click.Choice(REPORT_FORMATS),
              help='Report format (default: report.format setting)')
@pass_context
@handle_cli_error
def validate_command(ctx: CLIContext, tx_file: str, pool_file: Optional[str],
                     report: bool, report_format: Optional[str]):
    """
    Validate a transaction against a UTXO snapshot.

    Exits 0 when the transaction is valid and 2 when it is rejected.

    Examples:
        txval validate tx.json --pool utxos.json
        txval -o json validate tx.json --pool utxos.json
        txval validate tx.json --report --report-format json
    """

    pool_file = pool_file or ctx.get_config('pool.snapshot')
    if not pool_file:
        raise click.UsageError("No UTXO snapshot given; pass --pool or set pool.snapshot")

    transaction = load_transaction(tx_file)
    pool = InMemoryUTXOPool.from_snapshot_file(pool_file)

    ctx.logger.info(f"Validating {transaction.id} against {len(pool)} UTXOs from {pool_file}")

    result = TransactionValidator(pool).validate(transaction)

    if report:
        reporter = ErrorReporter()
        reporter.report_validation_result(transaction.id, result)
        click.echo(reporter.generate_report(report_format or ctx.get_config('report.format', 'text')))
    elif ctx.output_format == 'table':
        status = "VALID" if result.valid else "INVALID"
        click.echo(f"Transaction {transaction.id}: {status}")
        if result.errors:
            ctx.output([error.to_dict() for error in result.errors],
                       headers=['code', 'location', 'message'])
    else:
        ctx.output({"transaction_id": transaction.id, **result.to_dict()})

    sys.exit(EXIT_OK if result.valid else EXIT_INVALID)


@click.command('payload')
@click.argument('tx_file', type=click.Path(dir_okay=False))
@click.option('--digest', is_flag=True, help='Print the SHA-256 digest (hex) instead')
@pass_context
@handle_cli_error
def payload_command(ctx: CLIContext, tx_file: str, digest: bool):
    """
    Print the canonical signing payload of a transaction.

    Signatures are not part of the payload, so the output is the same before and
    after the inputs are signed.

    Examples:
        txval payload tx.json
        txval payload tx.json --digest
    """

    transaction = load_transaction(tx_file)
    payload = build_signable_payload(transaction)

    if digest:
        click.echo(payload_digest(payload).hex())
    else:
        click.echo(payload.decode('ascii'))
