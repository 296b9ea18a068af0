"""
Transaction assembly for payments and send-all sweeps.

Builds a P2PKH transaction from selected UTXOs:
- one input per UTXO, locked to the source address
- the payment amount split into equal outputs to the destination
- a change output for every nonzero remainder

No satoshi is left behind: there is no dust threshold, so any change,
however small, gets its own output. In send-all mode the destination
receives everything except the fee.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from bsvtools.backends.base import UTXOProvider
from bsvtools.config import CarveOptions
from bsvtools.constants import DEFAULT_FEE_PER_KB
from bsvtools.errors import (
    InsufficientFundsError,
    InvalidSelectorCombinationError,
    NoUTXOsAvailableError,
)
from bsvtools.fees import change_fee, estimate_size
from bsvtools.keys import WIFKey, address_to_locking_script, decode_address
from bsvtools.models import UTXO
from bsvtools.selection import select_utxos
from bsvtools.signing import sign_transaction
from bsvtools.tx import Transaction, TxInput, TxOutput


@dataclass
class BuildResult:
    """A signed transaction and its accounting"""

    tx: Transaction
    total_input: int
    amount: int
    fee: int
    change: int
    change_address: str | None

    @property
    def raw_hex(self) -> str:
        return self.tx.hex()

    @property
    def txid(self) -> str:
        return self.tx.txid()


def validate_split(amount: int, num_outputs: int) -> None:
    """
    Reject output split settings that cannot be built.

    Raises:
        InvalidSelectorCombinationError: If num_outputs < 1, or > 1 in send-all mode
    """
    if num_outputs < 1:
        raise InvalidSelectorCombinationError("--split must be at least 1")
    if num_outputs > 1 and amount == 0:
        raise InvalidSelectorCombinationError(
            "--split requires a specific amount (--sats), cannot be used with send-all mode"
        )


def split_amount(amount: int, num_outputs: int) -> list[int]:
    """
    Split amount into num_outputs equal parts.

    The remainder of the division goes entirely to the last part.
    """
    num_outputs = max(num_outputs, 1)
    per_output, remainder = divmod(amount, num_outputs)
    values = [per_output] * num_outputs
    values[-1] += remainder
    return values


def build_transaction(
    private_key: WIFKey,
    source_address: str,
    dest_address: str,
    utxos: Sequence[UTXO],
    amount: int,
    num_outputs: int = 1,
    fee_per_kb: int = DEFAULT_FEE_PER_KB,
) -> BuildResult:
    """
    Build and sign a transaction spending every given UTXO.

    Args:
        private_key: Key controlling source_address
        source_address: Address the UTXOs are locked to; receives change
        dest_address: Payment destination
        utxos: Inputs to spend (already selected)
        amount: Satoshis to pay, 0 sends everything minus fee to dest_address
        num_outputs: Number of equal payment outputs
        fee_per_kb: Fee rate in satoshis per 1000 bytes

    Returns:
        BuildResult with the signed transaction

    Raises:
        InvalidAddressError: If either address is not a valid P2PKH address
        InvalidSelectorCombinationError: On an invalid split for the mode
        InsufficientFundsError: If inputs cannot cover amount plus fee
        SigningFailedError: If an input cannot be signed
    """
    validate_split(amount, num_outputs)

    _, dest_network = decode_address(dest_address)
    if dest_network != private_key.network:
        logger.warning(
            f"Destination address is a {dest_network} address but the key is {private_key.network}"
        )
    dest_script = address_to_locking_script(dest_address)
    source_script = address_to_locking_script(source_address)

    tx = Transaction()

    total_input = 0
    for utxo in utxos:
        tx.inputs.append(
            TxInput(
                prev_txid=utxo.txid,
                prev_index=utxo.vout,
                source_value=utxo.value,
                source_locking_script=source_script,
            )
        )
        total_input += utxo.value
    logger.debug(f"Total input: {total_input} satoshis")

    if amount > 0:
        values = split_amount(amount, num_outputs)
        for i, value in enumerate(values):
            tx.outputs.append(TxOutput(value=value, locking_script=dest_script))
            logger.debug(f"Output {i + 1} to {dest_address}: {value} satoshis")
        if amount % num_outputs:
            logger.debug(f"Remainder of {amount % num_outputs} satoshis added to last output")

    fee = change_fee(len(tx.inputs), len(tx.outputs), fee_per_kb)
    logger.debug(
        f"Estimated size: {estimate_size(len(tx.inputs), len(tx.outputs))} bytes, "
        f"Fee: {fee} satoshis"
    )

    change = total_input - amount - fee
    if change < 0 or (amount == 0 and change == 0):
        raise InsufficientFundsError(available=total_input, target=amount, fee=fee)

    # Send-all forwards everything to the destination
    change_address = dest_address if amount == 0 else source_address
    if change > 0:
        change_script = dest_script if amount == 0 else source_script
        tx.outputs.append(TxOutput(value=change, locking_script=change_script))
        logger.debug(f"Change to {change_address}: {change} satoshis")
    else:
        change_address = None

    sign_transaction(tx, private_key.private_key, private_key.compressed)
    logger.debug(f"Transaction ID: {tx.txid()}")

    return BuildResult(
        tx=tx,
        total_input=total_input,
        amount=amount,
        fee=fee,
        change=change,
        change_address=change_address,
    )


async def carve_transaction(
    options: CarveOptions, private_key: WIFKey, provider: UTXOProvider
) -> BuildResult:
    """
    Fetch UTXOs for the key's address, select inputs and build the transaction.

    Send-all (amount 0) spends every available UTXO; otherwise the
    largest-first selector picks the inputs.
    """
    validate_split(options.sats, options.split)
    decode_address(options.address)

    network = "testnet" if options.testnet else "mainnet"
    source_address = private_key.address(network)
    logger.debug(f"Source address: {source_address}")

    utxos = await provider.get_utxos(source_address)
    if not utxos:
        raise NoUTXOsAvailableError(f"no UTXOs found for address {source_address}")
    logger.debug(f"Found {len(utxos)} UTXO(s)")

    if options.sats == 0:
        logger.debug("Sending all available funds")
        selected = list(utxos)
    else:
        selected = select_utxos(utxos, options.sats, options.fee_per_kb)

    return build_transaction(
        private_key,
        source_address,
        options.address,
        selected,
        options.sats,
        options.split,
        options.fee_per_kb,
    )
