"""
Largest-first UTXO selection.

Sorting by value descending minimizes the number of inputs (and so the fee)
needed to reach a single target. It does not search for an exact match.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from bsvtools.constants import SELECTION_OUTPUT_COUNT
from bsvtools.errors import InsufficientFundsError, NoUTXOsAvailableError
from bsvtools.fees import estimate_fee
from bsvtools.models import UTXO


def select_utxos(utxos: Sequence[UTXO], target_amount: int, fee_per_kb: int) -> list[UTXO]:
    """
    Select the fewest largest UTXOs covering target_amount plus fee.

    The fee is re-estimated after every addition, always budgeting for two
    outputs (payment + change). The caller's sequence is not modified, and
    ties keep their original relative order so the result is deterministic.

    Args:
        utxos: Deduplicated spendable outputs
        target_amount: Amount to pay in satoshis
        fee_per_kb: Fee rate in satoshis per 1000 bytes

    Returns:
        Selected UTXOs, largest first

    Raises:
        NoUTXOsAvailableError: If utxos is empty
        InsufficientFundsError: If all UTXOs together cannot cover target + fee
    """
    if not utxos:
        raise NoUTXOsAvailableError("no UTXOs available")

    sorted_utxos = sorted(utxos, key=lambda u: u.value, reverse=True)

    selected: list[UTXO] = []
    total_value = 0
    estimated_fee = 0

    for utxo in sorted_utxos:
        selected.append(utxo)
        total_value += utxo.value

        estimated_fee = estimate_fee(len(selected), SELECTION_OUTPUT_COUNT, fee_per_kb)

        if total_value >= target_amount + estimated_fee:
            logger.debug(
                f"Selected {len(selected)} UTXO(s) totaling {total_value} satoshis "
                f"(target: {target_amount} + fee: ~{estimated_fee})"
            )
            return selected

    raise InsufficientFundsError(available=total_value, target=target_amount, fee=estimated_fee)
