"""
bsv-pick - Extract parts of a raw transaction as hex for pipelines.

Usage:
    bsv-pick <rawtx> --output 0                  # First output (serialized)
    bsv-pick <rawtx> --output-script 0           # First output's locking script
    bsv-pick <rawtx> --input 0 --input 1         # First two inputs
    bsv-pick <rawtx> --version --locktime        # Version and locktime
    echo <rawtx> | bsv-pick --txid               # Transaction ID from stdin
    bsv-getraw <txid> | bsv-pick --output 0      # Chain with getraw
"""

from __future__ import annotations

import typer

from bsvtools.cli.common import DEBUG_OPTION_HELP, handle_errors, log_level, setup_logging
from bsvtools.errors import NoSelectorSpecifiedError
from bsvtools.extract import FieldSelector, TxField, extract_fields
from bsvtools.inputs import get_hex_input
from bsvtools.tx import Transaction

app = typer.Typer(
    name="bsv-pick",
    help="Extract parts from a Bitcoin transaction and print them as hex, one per line.",
    add_completion=False,
)


def build_selectors(
    indexed: dict[TxField, list[int] | None], flags: dict[TxField, bool]
) -> list[FieldSelector]:
    selectors = [FieldSelector(f) for f, enabled in flags.items() if enabled]
    for field, indices in indexed.items():
        selectors.extend(FieldSelector(field, i) for i in indices or [])
    return selectors


@app.command()
def pick(
    rawtx: str | None = typer.Argument(
        None, help="Raw transaction hex, file://path or http(s):// URL"
    ),
    raw: str | None = typer.Option(None, "--raw", "-r", help="Raw transaction hex"),
    output: list[int] | None = typer.Option(
        None, "--output", "-o", help="Complete serialized output at index (repeatable)"
    ),
    output_script: list[int] | None = typer.Option(
        None, "--output-script", help="Output locking script at index (repeatable)"
    ),
    output_value: list[int] | None = typer.Option(
        None, "--output-value", help="Output value at index (repeatable)"
    ),
    input_: list[int] | None = typer.Option(
        None, "--input", "-i", help="Complete serialized input at index (repeatable)"
    ),
    input_script: list[int] | None = typer.Option(
        None, "--input-script", help="Input unlocking script at index (repeatable)"
    ),
    input_prevtxid: list[int] | None = typer.Option(
        None, "--input-prevtxid", help="Input previous txid at index (repeatable)"
    ),
    input_prevout: list[int] | None = typer.Option(
        None, "--input-prevout", help="Input previous output index at index (repeatable)"
    ),
    input_sequence: list[int] | None = typer.Option(
        None, "--input-sequence", help="Input sequence number at index (repeatable)"
    ),
    version: bool = typer.Option(
        False, "--version", "-v", help="Transaction version (4-byte LE hex)"
    ),
    locktime: bool = typer.Option(
        False, "--locktime", "-l", help="Transaction locktime (4-byte LE hex)"
    ),
    txid: bool = typer.Option(False, "--txid", help="Transaction ID"),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Extract the selected transaction parts."""
    setup_logging(log_level(debug))

    with handle_errors():
        selectors = build_selectors(
            indexed={
                TxField.OUTPUT: output,
                TxField.OUTPUT_SCRIPT: output_script,
                TxField.OUTPUT_VALUE: output_value,
                TxField.INPUT: input_,
                TxField.INPUT_SCRIPT: input_script,
                TxField.INPUT_PREVTXID: input_prevtxid,
                TxField.INPUT_PREVOUT: input_prevout,
                TxField.INPUT_SEQUENCE: input_sequence,
            },
            flags={
                TxField.VERSION: version,
                TxField.TXID: txid,
                TxField.LOCKTIME: locktime,
            },
        )
        if not selectors:
            raise NoSelectorSpecifiedError("no selector specified")

        tx_hex = get_hex_input(rawtx, raw, "transaction")
        lines = extract_fields(Transaction.from_hex(tx_hex), selectors)

    for line in lines:
        typer.echo(line)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
