"""
bsv-broadcast / bsv-txstatus - Submit transactions to ARC and track them.

Usage:
    bsv-carve ... | bsv-broadcast                 # Broadcast from stdin
    bsv-broadcast -r <rawtx> -m                   # Broadcast and monitor
    bsv-txstatus <txid>                           # One-shot status
    bsv-txstatus <txid> -m -p 10                  # Monitor every 10 seconds
"""

from __future__ import annotations

import asyncio
from datetime import datetime

import typer

from bsvtools.backends.arc import ARCClient, reached, watch_status
from bsvtools.backends.base import BroadcastProvider, TransactionStatus, status_description
from bsvtools.cli.common import DEBUG_OPTION_HELP, handle_errors, log_level, setup_logging
from bsvtools.config import Settings, get_settings
from bsvtools.inputs import get_hex_input
from bsvtools.keys import network_name

broadcast_app = typer.Typer(
    name="bsv-broadcast",
    help="Broadcast a raw transaction to ARC. Reads the transaction from stdin by default.",
    add_completion=False,
)

txstatus_app = typer.Typer(
    name="bsv-txstatus",
    help="Check a transaction's status on ARC.",
    add_completion=False,
)

POLL_RATE_HELP = "Polling rate in seconds for monitoring (default: polling.interval, 5)"


def create_arc_client(settings: Settings, testnet: bool) -> ARCClient:
    """ARC client for the selected network. Raises ConfigError if no URL is set."""
    arc = settings.validate_arc(testnet)
    typer.echo(f"Using {network_name(testnet)} configuration")
    return ARCClient(arc.url, api_key=arc.api_key, timeout=arc.timeout)


def print_status_line(status: TransactionStatus) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    typer.echo(
        f"[{timestamp}] Status: {status.tx_status} - {status_description(status.tx_status)}"
    )
    if status.block_hash:
        typer.echo(f"         Block Hash: {status.block_hash}")
        typer.echo(f"         Block Height: {status.block_height}")


async def monitor_transaction(
    client: BroadcastProvider, txid: str, poll_rate: float, settings: Settings
) -> None:
    typer.echo(f"\nMonitoring transaction status (polling every {poll_rate:g} seconds)...")
    typer.echo("Press Ctrl+C to stop monitoring\n")

    target = settings.targets.monitor_target
    last: TransactionStatus | None = None
    async for status in watch_status(
        client,
        txid,
        interval=poll_rate,
        max_polls=settings.polling.max_retries,
        backoff_factor=settings.polling.backoff_factor,
        target=target,
    ):
        print_status_line(status)
        last = status

    if last is not None and last.final:
        typer.echo(f"\nTransaction reached final state: {last.tx_status}")
    elif last is not None and reached(last, target):
        typer.echo(f"\nTransaction reached target state: {last.tx_status}")
    else:
        typer.echo("\nStopped monitoring before a final state was reached")


async def _broadcast(
    raw_tx: str, testnet: bool, monitor: bool, poll_rate: float, settings: Settings
) -> None:
    client = create_arc_client(settings, testnet)
    try:
        typer.echo("Broadcasting transaction to ARC...")
        result = await client.broadcast_transaction(raw_tx)

        typer.echo("Transaction broadcast successful!")
        typer.echo(f"  TxID: {result.txid}")
        typer.echo(f"  Status: {result.tx_status}")
        typer.echo(f"  Description: {status_description(result.tx_status)}")
        if result.extra_info:
            typer.echo(f"  Info: {result.extra_info}")

        if monitor:
            await monitor_transaction(client, result.txid, poll_rate, settings)
    finally:
        await client.close()


async def _txstatus(
    txid: str, testnet: bool, monitor: bool, poll_rate: float, settings: Settings
) -> None:
    client = create_arc_client(settings, testnet)
    try:
        if monitor:
            await monitor_transaction(client, txid, poll_rate, settings)
            return

        typer.echo(f"Checking status for transaction: {txid}\n")
        status = await client.get_transaction_status(txid)

        typer.echo(f"Status: {status.tx_status}")
        typer.echo(f"Description: {status_description(status.tx_status)}")
        if status.extra_info:
            typer.echo(f"Info: {status.extra_info}")
        if status.timestamp:
            typer.echo(f"Timestamp: {status.timestamp}")
        if status.block_hash:
            typer.echo(f"Block Hash: {status.block_hash}")
            typer.echo(f"Block Height: {status.block_height}")
    finally:
        await client.close()


@broadcast_app.command()
def broadcast(
    raw: str | None = typer.Option(None, "--raw", "-r", help="Raw transaction hex to broadcast"),
    testnet: bool = typer.Option(False, "--testnet", "-t", help="Use testnet ARC configuration"),
    monitor: bool = typer.Option(
        False, "--monitor", "-m", help="Monitor transaction status until final state"
    ),
    poll_rate: float | None = typer.Option(None, "--poll-rate", "-p", min=0.1, help=POLL_RATE_HELP),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Broadcast a transaction and optionally watch it until it is final."""
    setup_logging(log_level(debug))

    with handle_errors():
        settings = get_settings()
        raw_tx = get_hex_input(None, raw, "transaction")
        asyncio.run(
            _broadcast(raw_tx, testnet, monitor, poll_rate or settings.polling.interval, settings)
        )


@txstatus_app.command()
def txstatus(
    txid_arg: str | None = typer.Argument(None, metavar="TXID", help="Transaction ID"),
    txid: str | None = typer.Option(None, "--txid", "-i", help="Transaction ID to check"),
    testnet: bool = typer.Option(False, "--testnet", "-t", help="Use testnet ARC configuration"),
    monitor: bool = typer.Option(
        False, "--monitor", "-m", help="Monitor transaction status until final state"
    ),
    poll_rate: float | None = typer.Option(None, "--poll-rate", "-p", min=0.1, help=POLL_RATE_HELP),
    debug: bool = typer.Option(False, "--debug", help=DEBUG_OPTION_HELP),
) -> None:
    """Print a transaction's ARC status, or poll it with --monitor."""
    setup_logging(log_level(debug))

    with handle_errors():
        transaction_id = get_hex_input(txid_arg, txid, "txid")
        settings = get_settings()
        asyncio.run(
            _txstatus(
                transaction_id, testnet, monitor, poll_rate or settings.polling.interval, settings
            )
        )


def broadcast_main() -> None:
    """bsv-broadcast entry point."""
    broadcast_app()


def txstatus_main() -> None:
    """bsv-txstatus entry point."""
    txstatus_app()
