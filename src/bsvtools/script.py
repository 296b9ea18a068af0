"""
Script inspection helpers for P2PKH locking and unlocking scripts.

The push walker is truncation tolerant: unlocking scripts may carry
non-standard data, so a push whose declared length runs past the end of the
script stops the walk and the pushes found so far are returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from bsvtools.constants import (
    MAX_DIRECT_PUSH,
    OP_CHECKSIG,
    OP_DUP,
    OP_EQUALVERIFY,
    OP_HASH160,
    OP_PUSHDATA1,
)
from bsvtools.keys import Network, derive_address, parse_public_key, pubkey_hash_to_address

COMPRESSED_PUBKEY_LENGTH = 33
UNCOMPRESSED_PUBKEY_LENGTH = 65


@dataclass
class ScriptPushes:
    """Data pushes found in a script"""

    pushes: list[bytes] = field(default_factory=list)
    truncated: bool = False
    truncated_at: int | None = None


def parse_pushes(script: bytes) -> ScriptPushes:
    """
    Collect direct pushes (opcodes 1-75) and OP_PUSHDATA1 pushes.

    Other opcodes are skipped. A push longer than the remaining bytes ends
    the walk with truncated=True rather than raising.
    """
    result = ScriptPushes()
    i = 0

    while i < len(script):
        opcode = script[i]
        i += 1

        if 0 < opcode <= MAX_DIRECT_PUSH:
            length = opcode
        elif opcode == OP_PUSHDATA1:
            if i >= len(script):
                result.truncated, result.truncated_at = True, i - 1
                break
            length = script[i]
            i += 1
        else:
            continue

        if i + length > len(script):
            result.truncated, result.truncated_at = True, i
            break

        result.pushes.append(script[i : i + length])
        i += length

    if result.truncated:
        logger.debug(
            f"Script push walk truncated at offset {result.truncated_at} "
            f"({len(script)} byte script, {len(result.pushes)} push(es) recovered)"
        )

    return result


def is_p2pkh(script: bytes) -> bool:
    """76 a9 14 <20 bytes> 88 ac"""
    return (
        len(script) == 25
        and script[0] == OP_DUP
        and script[1] == OP_HASH160
        and script[2] == 0x14
        and script[23] == OP_EQUALVERIFY
        and script[24] == OP_CHECKSIG
    )


def address_from_locking_script(script: bytes, network: Network = "mainnet") -> str | None:
    if not is_p2pkh(script):
        return None
    return pubkey_hash_to_address(script[3:23], network)


def address_from_unlocking_script(script: bytes, network: Network = "mainnet") -> str | None:
    """
    Derive the spender's address from a P2PKH unlocking script (<sig> <pubkey>).

    The last push of public key length is taken as the key; None is returned
    if there is no such push or it is not a valid point.
    """
    pubkey_bytes = None
    for push in parse_pushes(script).pushes:
        if len(push) in (COMPRESSED_PUBKEY_LENGTH, UNCOMPRESSED_PUBKEY_LENGTH):
            pubkey_bytes = push

    if pubkey_bytes is None or parse_public_key(pubkey_bytes) is None:
        return None

    return derive_address(pubkey_bytes, network)
