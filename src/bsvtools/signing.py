"""
Bitcoin SV transaction signing for P2PKH inputs.

BSV signatures commit to the BIP143-style preimage with the FORKID flag set,
so every input needs the value and locking script of the output it spends.
"""

from __future__ import annotations

import struct

from coincurve import PrivateKey
from loguru import logger

from bsvtools.constants import SIGHASH_ALL_FORKID
from bsvtools.errors import SigningFailedError
from bsvtools.tx import Transaction, encode_varint, hash256


def push_data(data: bytes) -> bytes:
    """Minimal push for data up to 255 bytes."""
    if len(data) <= 75:
        return bytes([len(data)]) + data
    if len(data) <= 0xFF:
        return b"\x4c" + bytes([len(data)]) + data
    raise ValueError(f"push of {len(data)} bytes not supported")


def compute_sighash(
    tx: Transaction,
    input_index: int,
    script_code: bytes,
    value: int,
    sighash_type: int = SIGHASH_ALL_FORKID,
) -> bytes:
    if input_index >= len(tx.inputs):
        raise SigningFailedError(f"input index {input_index} out of range")

    hash_prevouts = hash256(b"".join(inp.outpoint() for inp in tx.inputs))
    hash_sequence = hash256(b"".join(struct.pack("<I", inp.sequence) for inp in tx.inputs))
    hash_outputs = hash256(b"".join(out.serialize() for out in tx.outputs))

    target_input = tx.inputs[input_index]

    preimage = (
        struct.pack("<I", tx.version)
        + hash_prevouts
        + hash_sequence
        + target_input.outpoint()
        + encode_varint(len(script_code))
        + script_code
        + struct.pack("<Q", value)
        + struct.pack("<I", target_input.sequence)
        + hash_outputs
        + struct.pack("<I", tx.locktime)
        + struct.pack("<I", sighash_type)
    )

    return hash256(preimage)


def sign_p2pkh_input(
    tx: Transaction,
    input_index: int,
    private_key: PrivateKey,
    compressed: bool = True,
    sighash_type: int = SIGHASH_ALL_FORKID,
) -> bytes:
    """Sign one input and return its unlocking script (<sig> <pubkey>).

    Args:
        tx: The transaction to sign
        input_index: Index of the input to sign
        private_key: coincurve PrivateKey instance
        compressed: Whether the spent output locks to the compressed pubkey
        sighash_type: Sighash type (default SIGHASH_ALL | SIGHASH_FORKID)
    """
    inp = tx.inputs[input_index]
    if inp.source_value is None or inp.source_locking_script is None:
        raise SigningFailedError(
            f"input {input_index} is missing source value or locking script"
        )

    sighash = compute_sighash(
        tx, input_index, inp.source_locking_script, inp.source_value, sighash_type
    )

    # The sighash is already SHA256d, so coincurve must not hash it again
    signature = private_key.sign(sighash, hasher=None) + bytes([sighash_type])
    pubkey = private_key.public_key.format(compressed=compressed)

    return push_data(signature) + push_data(pubkey)


def sign_transaction(tx: Transaction, private_key: PrivateKey, compressed: bool = True) -> None:
    """
    Fill in the unlocking script of every input in place.

    Raises:
        SigningFailedError: If any input cannot be signed
    """
    # FORKID sighashes never cover unlocking scripts
    unlocking_scripts = []
    for i in range(len(tx.inputs)):
        try:
            unlocking_scripts.append(sign_p2pkh_input(tx, i, private_key, compressed))
        except ValueError as e:
            raise SigningFailedError(f"failed to sign input {i}: {e}") from e

    for inp, script in zip(tx.inputs, unlocking_scripts, strict=True):
        inp.unlocking_script = script

    logger.debug(f"Signed {len(tx.inputs)} input(s)")
