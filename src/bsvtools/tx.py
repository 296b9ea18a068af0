"""
Legacy Bitcoin SV transaction wire format.

Layout:
    version (4 LE) | varint n_in | inputs | varint n_out | outputs | locktime (4 LE)
    input  = prev txid (32, internal order) | prev index (4 LE) | varint len | script
             | sequence (4 LE)
    output = value (8 LE) | varint len | script

BSV has no segwit marker, so the serialization hashed for the txid is the
whole transaction.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field

from bsvtools.constants import DEFAULT_LOCKTIME, DEFAULT_SEQUENCE, TX_VERSION
from bsvtools.errors import MalformedTransactionError


def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def encode_varint(value: int) -> bytes:
    """Encode integer as Bitcoin varint."""
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + struct.pack("<H", value)
    if value <= 0xFFFFFFFF:
        return b"\xfe" + struct.pack("<I", value)
    return b"\xff" + struct.pack("<Q", value)


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Read varint at offset and return (value, new_offset)."""
    if offset >= len(data):
        raise MalformedTransactionError(f"unexpected end of data reading varint at offset {offset}")

    first = data[offset]
    offset += 1

    if first < 0xFD:
        return first, offset

    size = {0xFD: 2, 0xFE: 4, 0xFF: 8}[first]
    if offset + size > len(data):
        raise MalformedTransactionError(f"truncated varint at offset {offset - 1}")
    return int.from_bytes(data[offset : offset + size], "little"), offset + size


class _Reader:
    """Bounds-checked cursor over raw transaction bytes."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def read(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise MalformedTransactionError(
                f"unexpected end of data at offset {self.offset}: "
                f"need {size} bytes, have {len(self.data) - self.offset}"
            )
        chunk = self.data[self.offset : end]
        self.offset = end
        return chunk

    def uint32(self) -> int:
        return struct.unpack("<I", self.read(4))[0]

    def uint64(self) -> int:
        return struct.unpack("<Q", self.read(8))[0]

    def varint(self) -> int:
        value, self.offset = read_varint(self.data, self.offset)
        return value

    def var_bytes(self) -> bytes:
        return self.read(self.varint())

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset


@dataclass
class TxInput:
    """
    Transaction input.

    prev_txid is in display (RPC) byte order. source_value and
    source_locking_script describe the output being spent; they are needed
    for signing and are not part of the serialization.
    """

    prev_txid: str
    prev_index: int
    unlocking_script: bytes = b""
    sequence: int = DEFAULT_SEQUENCE
    source_value: int | None = None
    source_locking_script: bytes | None = None

    def outpoint(self) -> bytes:
        """Serialize outpoint (txid:vout)."""
        return bytes.fromhex(self.prev_txid)[::-1] + struct.pack("<I", self.prev_index)

    def serialize(self) -> bytes:
        return (
            self.outpoint()
            + encode_varint(len(self.unlocking_script))
            + self.unlocking_script
            + struct.pack("<I", self.sequence)
        )


@dataclass
class TxOutput:
    value: int
    locking_script: bytes

    def serialize(self) -> bytes:
        return (
            struct.pack("<Q", self.value)
            + encode_varint(len(self.locking_script))
            + self.locking_script
        )


@dataclass
class Transaction:
    version: int = TX_VERSION
    inputs: list[TxInput] = field(default_factory=list)
    outputs: list[TxOutput] = field(default_factory=list)
    locktime: int = DEFAULT_LOCKTIME

    def serialize(self) -> bytes:
        """Serialize transaction to bytes."""
        result = struct.pack("<I", self.version)

        result += encode_varint(len(self.inputs))
        for inp in self.inputs:
            result += inp.serialize()

        result += encode_varint(len(self.outputs))
        for out in self.outputs:
            result += out.serialize()

        result += struct.pack("<I", self.locktime)
        return result

    def hex(self) -> str:
        return self.serialize().hex()

    def txid(self) -> str:
        """Double SHA256 of the serialization, byte-reversed."""
        return hash256(self.serialize())[::-1].hex()

    def total_output(self) -> int:
        return sum(out.value for out in self.outputs)

    def total_input(self) -> int:
        """Sum of source values; only meaningful for transactions built locally."""
        return sum(inp.source_value or 0 for inp in self.inputs)

    @classmethod
    def from_bytes(cls, tx_bytes: bytes) -> Transaction:
        """
        Parse a raw transaction.

        Raises:
            MalformedTransactionError: On truncated data or trailing bytes
        """
        reader = _Reader(tx_bytes)

        version = reader.uint32()

        inputs: list[TxInput] = []
        for _ in range(reader.varint()):
            txid_le = reader.read(32)
            prev_index = reader.uint32()
            script = reader.var_bytes()
            sequence = reader.uint32()
            inputs.append(TxInput(txid_le[::-1].hex(), prev_index, script, sequence))

        outputs: list[TxOutput] = []
        for _ in range(reader.varint()):
            value = reader.uint64()
            script = reader.var_bytes()
            outputs.append(TxOutput(value, script))

        locktime = reader.uint32()

        if reader.remaining:
            raise MalformedTransactionError(
                f"{reader.remaining} unexpected trailing bytes after locktime"
            )

        return cls(version=version, inputs=inputs, outputs=outputs, locktime=locktime)

    @classmethod
    def from_hex(cls, tx_hex: str) -> Transaction:
        try:
            tx_bytes = bytes.fromhex(tx_hex)
        except ValueError as e:
            raise MalformedTransactionError(f"invalid transaction hex: {e}") from e
        return cls.from_bytes(tx_bytes)
