"""
Shared fixtures for bsvtools tests.
"""

from __future__ import annotations

import sys

import pytest
from loguru import logger
from tests.helpers import COMPRESSED_ADDRESS, COMPRESSED_WIF, UNCOMPRESSED_ADDRESS, make_txid

from bsvtools.keys import WIFKey, decode_wif
from bsvtools.tx import Transaction, TxInput, TxOutput


@pytest.fixture
def key() -> WIFKey:
    return decode_wif(COMPRESSED_WIF)


@pytest.fixture
def source_address() -> str:
    return COMPRESSED_ADDRESS


@pytest.fixture
def dest_address() -> str:
    return UNCOMPRESSED_ADDRESS


@pytest.fixture
def sample_tx() -> Transaction:
    """Two inputs, two P2PKH outputs, nonzero locktime."""
    p2pkh = bytes.fromhex("76a914") + bytes(range(20)) + bytes.fromhex("88ac")
    return Transaction(
        version=1,
        inputs=[
            TxInput(make_txid(0xAA), 0, bytes.fromhex("0102"), 0xFFFFFFFE),
            TxInput(make_txid(0xBB), 7, b"", 0xFFFFFFFF),
        ],
        outputs=[
            TxOutput(50_000, p2pkh),
            TxOutput(1_234, bytes.fromhex("6a0568656c6c6f")),
        ],
        locktime=700_000,
    )


@pytest.fixture
def sample_tx_hex(sample_tx: Transaction) -> str:
    return sample_tx.hex()


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI commands point loguru at the runner's stderr; restore it afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
