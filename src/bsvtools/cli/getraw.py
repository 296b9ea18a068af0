"""
bsv-getraw - Fetch a raw transaction from WhatsOnChain.

Usage:
    bsv-getraw <txid>
    bsv-getraw -i <txid> -t                      # Testnet
    echo <txid> | bsv-getraw | bsv-pick --txid
"""

from __future__ import annotations

import asyncio

import typer
from loguru import logger

from bsvtools.backends.whatsonchain import WhatsOnChainBackend
from bsvtools.cli.common import DEBUG_OPTION_HELP, handle_errors, log_level, setup_logging
from bsvtools.config import Settings, get_settings
from bsvtools.inputs import get_hex_input
from bsvtools.keys import network_name

app = typer.Typer(
    name="bsv-getraw",
    help="Retrieve raw transaction hex from WhatsOnChain.",
    add_completion=False,
)


async def fetch_raw_transaction(txid: str, testnet: bool, settings: Settings) -> str:
    backend = WhatsOnChainBackend(
        testnet=testnet,
        base_url=settings.whatsonchain_url,
        timeout=settings.whatsonchain_timeout,
    )
    logger.debug(f"Network: {network_name(testnet)}")
    try:
        return await backend.get_raw_transaction(txid)
    finally:
        await backend.close()


@app.command()
def getraw(
    txid_arg: str | None = typer.Argument(None, metavar="TXID", help="Transaction ID"),
    txid: str | None = typer.Option(None, "--txid", "-i", help="Transaction ID to retrieve"),
    testnet: bool = typer.Option(False, "--testnet", "-t", help="Use testnet instead of mainnet"),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Print the raw hex of a transaction."""
    setup_logging(log_level(debug))

    with handle_errors():
        transaction_id = get_hex_input(txid_arg, txid, "txid")
        raw_tx = asyncio.run(fetch_raw_transaction(transaction_id, testnet, get_settings()))

    typer.echo(raw_tx)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
