"""
bsvtools - Command-line tools for building, inspecting and broadcasting
Bitcoin SV transactions.

Provides UTXO selection, fee estimation, transaction assembly and signing,
and field extraction from raw transactions.
"""

__version__ = "0.1.0"

from bsvtools.builder import BuildResult, build_transaction, carve_transaction, split_amount
from bsvtools.errors import (
    BsvToolsError,
    IndexOutOfRangeError,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidKeyError,
    InvalidSelectorCombinationError,
    MalformedTransactionError,
    NoSelectorSpecifiedError,
    NoUTXOsAvailableError,
    ProviderError,
)
from bsvtools.extract import FieldSelector, TxField, extract, extract_fields
from bsvtools.fees import estimate_fee, estimate_size
from bsvtools.models import UTXO
from bsvtools.selection import select_utxos
from bsvtools.tx import Transaction, TxInput, TxOutput

__all__ = [
    "BsvToolsError",
    "BuildResult",
    "FieldSelector",
    "IndexOutOfRangeError",
    "InsufficientFundsError",
    "InvalidAddressError",
    "InvalidKeyError",
    "InvalidSelectorCombinationError",
    "MalformedTransactionError",
    "NoSelectorSpecifiedError",
    "NoUTXOsAvailableError",
    "ProviderError",
    "Transaction",
    "TxField",
    "TxInput",
    "TxOutput",
    "UTXO",
    "__version__",
    "build_transaction",
    "carve_transaction",
    "estimate_fee",
    "estimate_size",
    "extract",
    "extract_fields",
    "select_utxos",
    "split_amount",
]
