"""
Remote data providers.

Available backends:
- WhatsOnChainBackend: UTXO and raw transaction lookups
- ARCClient: transaction broadcast and status tracking
"""

from bsvtools.backends.arc import ARCClient, watch_status
from bsvtools.backends.base import (
    BroadcastProvider,
    BroadcastResult,
    TransactionProvider,
    TransactionStatus,
    TxStatus,
    UTXOProvider,
    deduplicate_utxos,
    is_final,
    status_description,
)
from bsvtools.backends.whatsonchain import WhatsOnChainBackend

__all__ = [
    "ARCClient",
    "BroadcastProvider",
    "BroadcastResult",
    "TransactionProvider",
    "TransactionStatus",
    "TxStatus",
    "UTXOProvider",
    "WhatsOnChainBackend",
    "deduplicate_utxos",
    "is_final",
    "status_description",
    "watch_status",
]
