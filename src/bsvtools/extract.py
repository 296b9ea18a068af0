"""
Field extraction from raw transactions.

Each selector names one part of a transaction, optionally by input or
output index. Results are lowercase hex strings emitted in transaction
order: version and txid first, then output fields, then input fields,
and locktime last. Repeated indexed selectors keep their requested order.
"""

from __future__ import annotations

import struct
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from bsvtools.errors import IndexOutOfRangeError, NoSelectorSpecifiedError
from bsvtools.tx import Transaction, TxInput, TxOutput


class TxField(str, Enum):
    """Selectable transaction parts, in emission order."""

    VERSION = "version"
    TXID = "txid"
    OUTPUT = "output"
    OUTPUT_SCRIPT = "output-script"
    OUTPUT_VALUE = "output-value"
    INPUT = "input"
    INPUT_SCRIPT = "input-script"
    INPUT_PREVTXID = "input-prevtxid"
    INPUT_PREVOUT = "input-prevout"
    INPUT_SEQUENCE = "input-sequence"
    LOCKTIME = "locktime"

    @property
    def indexed(self) -> bool:
        return self not in (TxField.VERSION, TxField.TXID, TxField.LOCKTIME)

    @property
    def rank(self) -> int:
        return list(TxField).index(self)


@dataclass(frozen=True)
class FieldSelector:
    field: TxField
    index: int | None = None

    def __post_init__(self) -> None:
        if self.field.indexed and self.index is None:
            raise ValueError(f"--{self.field.value} requires an index")
        if not self.field.indexed and self.index is not None:
            raise ValueError(f"--{self.field.value} does not take an index")

    def __str__(self) -> str:
        if self.index is None:
            return self.field.value
        return f"{self.field.value} {self.index}"


def encode_uint32_le(value: int) -> str:
    return struct.pack("<I", value).hex()


def encode_uint64_le(value: int) -> str:
    return struct.pack("<Q", value).hex()


def _output(tx: Transaction, index: int) -> TxOutput:
    if index < 0 or index >= len(tx.outputs):
        raise IndexOutOfRangeError("output", index, len(tx.outputs))
    return tx.outputs[index]


def _input(tx: Transaction, index: int) -> TxInput:
    if index < 0 or index >= len(tx.inputs):
        raise IndexOutOfRangeError("input", index, len(tx.inputs))
    return tx.inputs[index]


_EXTRACTORS: dict[TxField, Callable[[Transaction, int], str]] = {
    TxField.VERSION: lambda tx, _: encode_uint32_le(tx.version),
    TxField.TXID: lambda tx, _: tx.txid(),
    TxField.LOCKTIME: lambda tx, _: encode_uint32_le(tx.locktime),
    TxField.OUTPUT: lambda tx, i: _output(tx, i).serialize().hex(),
    TxField.OUTPUT_SCRIPT: lambda tx, i: _output(tx, i).locking_script.hex(),
    TxField.OUTPUT_VALUE: lambda tx, i: encode_uint64_le(_output(tx, i).value),
    TxField.INPUT: lambda tx, i: _input(tx, i).serialize().hex(),
    TxField.INPUT_SCRIPT: lambda tx, i: _input(tx, i).unlocking_script.hex(),
    TxField.INPUT_PREVTXID: lambda tx, i: _input(tx, i).prev_txid,
    TxField.INPUT_PREVOUT: lambda tx, i: encode_uint32_le(_input(tx, i).prev_index),
    TxField.INPUT_SEQUENCE: lambda tx, i: encode_uint32_le(_input(tx, i).sequence),
}


def order_selectors(selectors: Iterable[FieldSelector]) -> list[FieldSelector]:
    """
    Arrange selectors in emission order.

    Transaction-level fields are emitted once however often they are
    requested.
    """
    ordered: list[FieldSelector] = []
    seen_flags: set[TxField] = set()

    for selector in sorted(selectors, key=lambda s: s.field.rank):
        if not selector.field.indexed:
            if selector.field in seen_flags:
                continue
            seen_flags.add(selector.field)
        ordered.append(selector)

    return ordered


def extract_fields(tx: Transaction, selectors: Iterable[FieldSelector]) -> list[str]:
    """
    Extract the selected fields from a parsed transaction.

    Raises:
        NoSelectorSpecifiedError: If selectors is empty
        IndexOutOfRangeError: If an index is outside the transaction
    """
    ordered = order_selectors(selectors)
    if not ordered:
        raise NoSelectorSpecifiedError("no selector specified")

    return [_EXTRACTORS[s.field](tx, s.index or 0) for s in ordered]


def extract(raw_tx: bytes, selectors: Iterable[FieldSelector]) -> list[str]:
    """
    Parse raw transaction bytes and extract the selected fields.

    Raises:
        NoSelectorSpecifiedError: If selectors is empty
        MalformedTransactionError: If raw_tx is not a valid transaction
        IndexOutOfRangeError: If an index is outside the transaction
    """
    selectors = list(selectors)
    if not selectors:
        raise NoSelectorSpecifiedError("no selector specified")

    return extract_fields(Transaction.from_bytes(raw_tx), selectors)
