"""
Size-based fee estimation for P2PKH transactions.
"""

from __future__ import annotations

from bsvtools.constants import BASE_TX_SIZE, INPUT_SIZE, MIN_FEE, OUTPUT_SIZE


def estimate_size(num_inputs: int, num_outputs: int) -> int:
    """Approximate serialized size in bytes."""
    return num_inputs * INPUT_SIZE + num_outputs * OUTPUT_SIZE + BASE_TX_SIZE


def estimate_fee(num_inputs: int, num_outputs: int, fee_per_kb: int) -> int:
    """
    Estimate the fee for a transaction of the given shape.

    Args:
        num_inputs: Number of P2PKH inputs
        num_outputs: Number of P2PKH outputs
        fee_per_kb: Fee rate in satoshis per 1000 bytes

    Returns:
        Fee in satoshis, never below MIN_FEE
    """
    fee = estimate_size(num_inputs, num_outputs) * fee_per_kb // 1000
    return max(fee, MIN_FEE)


def change_fee(num_inputs: int, num_payment_outputs: int, fee_per_kb: int) -> int:
    """
    Fee used when the final change output is computed.

    The size term covers the inputs and payment outputs already in the
    transaction; a separate output-sized increment covers the change output,
    whether or not it ends up being created. Both terms round down
    independently before the floor is applied.
    """
    fee = estimate_size(num_inputs, num_payment_outputs) * fee_per_kb // 1000
    fee += OUTPUT_SIZE * fee_per_kb // 1000
    return max(fee, MIN_FEE)
