"""
bsv-prettytx - Human-readable breakdown of a raw transaction.

Usage:
    bsv-prettytx <rawtx>
    bsv-getraw <txid> | bsv-prettytx --no-color
"""

from __future__ import annotations

import typer

from bsvtools.cli.common import DEBUG_OPTION_HELP, handle_errors, log_level, setup_logging, style
from bsvtools.constants import LOCKTIME_THRESHOLD, SATOSHIS_PER_BSV
from bsvtools.inputs import get_hex_input
from bsvtools.keys import Network, network_name
from bsvtools.script import address_from_locking_script, address_from_unlocking_script
from bsvtools.tx import Transaction

app = typer.Typer(
    name="bsv-prettytx",
    help="Parse a raw transaction and display its components in human-readable form.",
    add_completion=False,
)

BANNER = "=" * 80
DIVIDER = "-" * 80


def describe_locktime(locktime: int) -> str:
    if locktime == 0:
        return "Not locked"
    if locktime < LOCKTIME_THRESHOLD:
        return f"Locked until block height {locktime}"
    return f"Locked until Unix timestamp {locktime}"


def format_transaction(tx: Transaction, color: bool = True, network: Network = "mainnet") -> str:
    """
    Render a transaction as a multi-line breakdown.

    Addresses are shown for P2PKH outputs and for inputs whose unlocking
    script carries a valid public key.
    """

    def c(text: str, fg: str | None = None, bold: bool = False) -> str:
        return style(text, color, fg=fg, bold=bold)

    def label(text: str) -> str:
        return style(text, color, fg=typer.colors.YELLOW)

    def dim(text: str) -> str:
        return style(text, color, dim=True)

    def script_lines(script: bytes, address: str | None) -> list[str]:
        lines = [f"  {label('Script Length:')} {len(script)} bytes"]
        if script:
            lines.append(f"  {label('Script (hex):')} {c(script.hex(), fg=typer.colors.MAGENTA)}")
        else:
            lines.append(f"  {label('Script (hex):')} {dim('(empty)')}")
        if address:
            lines.append(f"  {label('Address:')} {c(address, fg=typer.colors.CYAN)}")
        return lines

    banner = c(BANNER, fg=typer.colors.CYAN, bold=True)
    out = [
        banner,
        c("TRANSACTION BREAKDOWN", fg=typer.colors.CYAN, bold=True),
        banner,
        "",
        f"{label('Version:')} {tx.version} {dim(f'(0x{tx.version:08x})')}",
        "",
        f"{label('In-counter:')} {len(tx.inputs)}",
        "",
    ]

    if tx.inputs:
        out.append(c("INPUTS:", fg=typer.colors.GREEN, bold=True))
        out.append(c(DIVIDER, fg=typer.colors.GREEN))
        for i, txin in enumerate(tx.inputs):
            out += ["", c(f"Input #{i}:", fg=typer.colors.GREEN, bold=True), ""]
            out.append(f"  {label('Prev TX ID:')} {c(txin.prev_txid, fg=typer.colors.CYAN)}")
            out.append(f"  {label('Prev Vout:')} {txin.prev_index}")
            out += script_lines(
                txin.unlocking_script,
                address_from_unlocking_script(txin.unlocking_script, network),
            )
            out.append(
                f"  {label('Sequence:')} {txin.sequence} {dim(f'(0x{txin.sequence:08x})')}"
            )
        out.append("")

    out += [f"{label('Out-counter:')} {len(tx.outputs)}", ""]

    if tx.outputs:
        out.append(c("OUTPUTS:", fg=typer.colors.BLUE, bold=True))
        out.append(c(DIVIDER, fg=typer.colors.BLUE))
        for i, txout in enumerate(tx.outputs):
            out += ["", c(f"Output #{i}:", fg=typer.colors.BLUE, bold=True), ""]
            bsv = txout.value / SATOSHIS_PER_BSV
            out.append(
                f"  {label('Value:')} {c(f'{txout.value} satoshis', fg=typer.colors.GREEN)} "
                f"{dim(f'({bsv:.8f} BSV)')}"
            )
            out += script_lines(
                txout.locking_script,
                address_from_locking_script(txout.locking_script, network),
            )
        out.append("")

    out += [
        f"{label('nLockTime:')} {tx.locktime} {dim(f'(0x{tx.locktime:08x})')}",
        f"           {dim(f'({describe_locktime(tx.locktime)})')}",
        "",
        banner,
        f"{c('Transaction ID:', fg=typer.colors.YELLOW, bold=True)} "
        f"{c(tx.txid(), fg=typer.colors.GREEN, bold=True)}",
        banner,
    ]
    return "\n".join(out)


@app.command()
def prettytx(
    rawtx: str | None = typer.Argument(
        None, help="Raw transaction hex, file://path or http(s):// URL"
    ),
    raw: str | None = typer.Option(None, "--raw", "-r", help="Raw transaction hex to parse"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    testnet: bool = typer.Option(False, "--testnet", "-t", help="Show testnet addresses"),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Print a human-readable breakdown of a transaction."""
    setup_logging(log_level(debug))

    with handle_errors():
        tx = Transaction.from_hex(get_hex_input(rawtx, raw, "transaction"))

    typer.echo(format_transaction(tx, color=not no_color, network=network_name(testnet)))


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
