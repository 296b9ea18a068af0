"""
Core data models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UTXO:
    """A spendable output candidate"""

    txid: str  # source transaction id, display byte order
    vout: int
    value: int  # satoshis

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError(f"UTXO value must be positive, got {self.value}")
        if not 0 <= self.vout <= 0xFFFFFFFF:
            raise ValueError(f"UTXO output index out of uint32 range: {self.vout}")
        if len(self.txid) != 64:
            raise ValueError(f"UTXO txid must be 64 hex characters: {self.txid!r}")

    @property
    def outpoint(self) -> str:
        return f"{self.txid}:{self.vout}"
