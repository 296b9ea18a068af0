"""
Provider interfaces for UTXO lookup, raw transaction lookup and broadcasting.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from bsvtools.models import UTXO


class TxStatus(str, Enum):
    RECEIVED = "RECEIVED"
    STORED = "STORED"
    ANNOUNCED_TO_NETWORK = "ANNOUNCED_TO_NETWORK"
    SEEN_ON_NETWORK = "SEEN_ON_NETWORK"
    SEEN_BY_NETWORK = "SEEN_BY_NETWORK"
    MINED = "MINED"
    REJECTED = "REJECTED"
    DOUBLE_SPEND_ATTEMPTED = "DOUBLE_SPEND_ATTEMPTED"


FINAL_STATUSES = frozenset(
    {TxStatus.MINED.value, TxStatus.REJECTED.value, TxStatus.DOUBLE_SPEND_ATTEMPTED.value}
)

STATUS_DESCRIPTIONS: dict[str, str] = {
    TxStatus.RECEIVED.value: "Transaction received by ARC",
    TxStatus.STORED.value: "Transaction stored and validated by ARC",
    TxStatus.ANNOUNCED_TO_NETWORK.value: "Transaction announced to the BSV network",
    TxStatus.SEEN_ON_NETWORK.value: "Transaction seen on the BSV network",
    TxStatus.SEEN_BY_NETWORK.value: "Transaction seen on the BSV network",
    TxStatus.MINED.value: "Transaction successfully mined in a block",
    TxStatus.REJECTED.value: "Transaction rejected by the network",
    TxStatus.DOUBLE_SPEND_ATTEMPTED.value: "Transaction rejected due to double spend attempt",
}


def is_final(status: str) -> bool:
    """MINED, REJECTED and DOUBLE_SPEND_ATTEMPTED end a transaction's lifecycle."""
    return status in FINAL_STATUSES


def status_description(status: str) -> str:
    return STATUS_DESCRIPTIONS.get(status, f"Unknown status: {status}")


class BroadcastResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    txid: str
    tx_status: str = Field(alias="txStatus")
    extra_info: str = Field(default="", alias="extraInfo")
    timestamp: str = ""

    @field_validator("extra_info", "timestamp", mode="before")
    @classmethod
    def null_to_empty(cls, v: str | None) -> str:
        """ARC sends null for optional text fields."""
        return "" if v is None else v


class TransactionStatus(BroadcastResult):
    block_hash: str = Field(default="", alias="blockHash")
    block_height: int = Field(default=0, alias="blockHeight")

    @field_validator("block_hash", mode="before")
    @classmethod
    def null_hash_to_empty(cls, v: str | None) -> str:
        return "" if v is None else v

    @field_validator("block_height", mode="before")
    @classmethod
    def null_height_to_zero(cls, v: int | None) -> int:
        return 0 if v is None else v

    @property
    def final(self) -> bool:
        return is_final(self.tx_status)


def deduplicate_utxos(utxos: Iterable[UTXO]) -> list[UTXO]:
    """Drop repeated (txid, vout) entries, keeping the first occurrence."""
    seen: set[tuple[str, int]] = set()
    deduped: list[UTXO] = []

    for utxo in utxos:
        key = (utxo.txid, utxo.vout)
        if key in seen:
            logger.debug(f"  Skipping duplicate UTXO: {utxo.outpoint}")
            continue
        seen.add(key)
        deduped.append(utxo)

    return deduped


class UTXOProvider(ABC):
    """Source of spendable outputs for an address."""

    @abstractmethod
    async def get_utxos(self, address: str) -> list[UTXO]:
        """Spendable, deduplicated UTXOs for address"""

    async def close(self) -> None:
        """Close provider connection"""
        pass


class TransactionProvider(ABC):
    @abstractmethod
    async def get_raw_transaction(self, txid: str) -> str:
        """Raw transaction hex for txid"""

    async def close(self) -> None:
        pass


class BroadcastProvider(ABC):
    """Transaction submission and status tracking."""

    @abstractmethod
    async def broadcast_transaction(self, raw_tx: str) -> BroadcastResult:
        """Submit raw transaction hex"""

    @abstractmethod
    async def get_transaction_status(self, txid: str) -> TransactionStatus:
        """Current status of a submitted transaction"""

    async def close(self) -> None:
        pass
