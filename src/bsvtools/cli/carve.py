"""
bsv-carve - Create and sign a BSV transaction from a WIF.

NO SATOSHI LEFT BEHIND: if there is change it always gets its own output.
With --sats 0 (the default) everything minus the fee goes to --address.

Usage:
    bsv-carve -w <WIF> -a <address> -s 1000              # Send 1000 satoshis
    bsv-carve -w <WIF> -a <address>                      # Send all funds to address
    bsv-carve -w <WIF> -a <address> -s 1000 -t           # Use testnet
    bsv-carve -w <WIF> -a <address> -f 200               # Custom fee rate
    bsv-carve -w <WIF> -a <address> -s 1000001 -n 10     # 9 x 100000 + 1 x 100001
"""

from __future__ import annotations

import asyncio

import typer

from bsvtools.backends.whatsonchain import WhatsOnChainBackend
from bsvtools.builder import BuildResult, carve_transaction, validate_split
from bsvtools.cli.common import DEBUG_OPTION_HELP, handle_errors, log_level, setup_logging
from bsvtools.config import CarveOptions, Settings, get_settings
from bsvtools.constants import DEFAULT_FEE_PER_KB
from bsvtools.keys import WIFKey, decode_wif

app = typer.Typer(
    name="bsv-carve",
    help="Create and sign a BSV transaction from a WIF private key.",
    add_completion=False,
)


@app.command()
def carve(
    wif: str = typer.Option(
        ..., "--wif", "-w", envvar="BSV_WIF", help="Source WIF private key (required)"
    ),
    address: str = typer.Option(..., "--address", "-a", help="Destination address (required)"),
    sats: int = typer.Option(
        0, "--sats", "-s", min=0, help="Amount in satoshis to send (0 = send all minus fees)"
    ),
    split: int = typer.Option(
        1, "--split", "-n", help="Number of equal outputs to split the amount into"
    ),
    testnet: bool = typer.Option(False, "--testnet", "-t", help="Use testnet"),
    fee_per_kb: int = typer.Option(
        DEFAULT_FEE_PER_KB, "--fee-per-kb", "-f", min=0, help="Fee per kilobyte in satoshis"
    ),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Build a signed transaction and print its raw hex."""
    setup_logging(log_level(debug))

    with handle_errors():
        validate_split(sats, split)
        options = CarveOptions(
            address=address, sats=sats, split=split, testnet=testnet, fee_per_kb=fee_per_kb
        )
        key = decode_wif(wif)
        result = asyncio.run(_carve(options, key, get_settings()))

    typer.echo(result.raw_hex)


async def _carve(options: CarveOptions, key: WIFKey, settings: Settings) -> BuildResult:
    backend = WhatsOnChainBackend(
        testnet=options.testnet,
        base_url=settings.whatsonchain_url,
        timeout=settings.whatsonchain_timeout,
    )
    try:
        return await carve_transaction(options, key, backend)
    finally:
        await backend.close()


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
