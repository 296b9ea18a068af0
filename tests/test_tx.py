"""
Tests for the transaction wire codec.
"""

from __future__ import annotations

import pytest
from tests.helpers import (
    BLOCK_170_INPUT_SCRIPT,
    BLOCK_170_PREV_TXID,
    BLOCK_170_TX_HEX,
    BLOCK_170_TXID,
    GENESIS_COINBASE_HEX,
    GENESIS_COINBASE_TXID,
    make_txid,
)

from bsvtools.errors import MalformedTransactionError
from bsvtools.tx import Transaction, TxInput, TxOutput, encode_varint, hash256, read_varint


class TestVarint:
    """Tests for varint encoding."""

    def test_single_byte(self) -> None:
        assert encode_varint(0) == b"\x00"
        assert encode_varint(252) == b"\xfc"

    def test_two_bytes(self) -> None:
        assert encode_varint(253) == b"\xfd\xfd\x00"
        assert encode_varint(0xFFFF) == b"\xfd\xff\xff"

    def test_four_bytes(self) -> None:
        assert encode_varint(0x10000) == b"\xfe\x00\x00\x01\x00"

    def test_eight_bytes(self) -> None:
        result = encode_varint(0x100000000)
        assert result[0] == 0xFF
        assert len(result) == 9

    def test_read_returns_new_offset(self) -> None:
        data = b"\x00" + encode_varint(515) + b"\x2a"
        value, offset = read_varint(data, 1)
        assert value == 515
        assert data[offset] == 0x2A

    def test_read_truncated(self) -> None:
        with pytest.raises(MalformedTransactionError):
            read_varint(b"\xfe\x01\x02", 0)

    def test_read_past_end(self) -> None:
        with pytest.raises(MalformedTransactionError):
            read_varint(b"", 0)


class TestTxInput:
    def test_outpoint_reverses_txid(self) -> None:
        txid = "0123456789abcdef" * 4
        inp = TxInput(txid, 1)

        outpoint = inp.outpoint()

        assert outpoint[:32] == bytes.fromhex(txid)[::-1]
        assert outpoint[32:] == b"\x01\x00\x00\x00"

    def test_serialize_layout(self) -> None:
        inp = TxInput(make_txid(1), 2, b"\xab\xcd", 0xFFFFFFFE)

        data = inp.serialize()

        assert len(data) == 32 + 4 + 1 + 2 + 4
        assert data[36] == 2
        assert data[37:39] == b"\xab\xcd"
        assert data[-4:] == b"\xfe\xff\xff\xff"


class TestTxOutput:
    def test_serialize_layout(self) -> None:
        out = TxOutput(1000, b"\x51")
        assert out.serialize() == bytes.fromhex("e803000000000000") + b"\x01\x51"


class TestTransaction:
    """Tests for Transaction serialization and parsing."""

    def test_parse_round_trip(self, sample_tx: Transaction) -> None:
        parsed = Transaction.from_bytes(sample_tx.serialize())

        assert parsed.version == 1
        assert parsed.locktime == 700_000
        assert [i.prev_txid for i in parsed.inputs] == [i.prev_txid for i in sample_tx.inputs]
        assert [i.prev_index for i in parsed.inputs] == [0, 7]
        assert parsed.inputs[0].unlocking_script == b"\x01\x02"
        assert parsed.inputs[0].sequence == 0xFFFFFFFE
        assert [(o.value, o.locking_script) for o in parsed.outputs] == [
            (o.value, o.locking_script) for o in sample_tx.outputs
        ]
        assert parsed.serialize() == sample_tx.serialize()

    def test_txid_is_reversed_double_sha256(self, sample_tx: Transaction) -> None:
        assert sample_tx.txid() == hash256(sample_tx.serialize())[::-1].hex()

    def test_empty_transaction(self) -> None:
        tx = Transaction()
        assert tx.hex() == "01000000" + "00" + "00" + "00000000"
        assert Transaction.from_hex(tx.hex()).inputs == []

    def test_totals(self, sample_tx: Transaction) -> None:
        assert sample_tx.total_output() == 51_234
        assert sample_tx.total_input() == 0

    def test_truncated(self, sample_tx_hex: str) -> None:
        with pytest.raises(MalformedTransactionError, match="unexpected end of data"):
            Transaction.from_hex(sample_tx_hex[:-10])

    def test_trailing_bytes(self, sample_tx_hex: str) -> None:
        with pytest.raises(MalformedTransactionError, match="trailing"):
            Transaction.from_hex(sample_tx_hex + "00")

    def test_odd_length_hex(self, sample_tx_hex: str) -> None:
        with pytest.raises(MalformedTransactionError, match="invalid transaction hex"):
            Transaction.from_hex(sample_tx_hex + "0")

    def test_script_length_past_end(self) -> None:
        # One input whose script claims 200 bytes
        raw = bytes.fromhex("01000000" + "01") + bytes(36) + b"\xc8" + b"\x00" * 10
        with pytest.raises(MalformedTransactionError):
            Transaction.from_bytes(raw)


class TestMainnetTransactions:
    """Parsing and txids of transactions confirmed on chain."""

    def test_block_170_payment(self) -> None:
        tx = Transaction.from_hex(BLOCK_170_TX_HEX)

        assert tx.txid() == BLOCK_170_TXID
        assert tx.hex() == BLOCK_170_TX_HEX
        assert tx.version == 1
        assert tx.locktime == 0
        (txin,) = tx.inputs
        assert txin.prev_txid == BLOCK_170_PREV_TXID
        assert txin.prev_index == 0
        assert txin.unlocking_script.hex() == BLOCK_170_INPUT_SCRIPT
        assert txin.sequence == 0xFFFFFFFF
        assert [o.value for o in tx.outputs] == [1_000_000_000, 4_000_000_000]
        assert all(len(o.locking_script) == 67 for o in tx.outputs)

    def test_genesis_coinbase(self) -> None:
        tx = Transaction.from_hex(GENESIS_COINBASE_HEX)

        assert tx.txid() == GENESIS_COINBASE_TXID
        assert tx.hex() == GENESIS_COINBASE_HEX
        assert tx.inputs[0].prev_txid == "00" * 32
        assert tx.inputs[0].prev_index == 0xFFFFFFFF
        assert b"Chancellor on brink of second bailout" in tx.inputs[0].unlocking_script
        assert tx.outputs[0].value == 5_000_000_000

    def test_rebuilt_transaction_keeps_txid(self) -> None:
        parsed = Transaction.from_hex(BLOCK_170_TX_HEX)
        rebuilt = Transaction(
            version=parsed.version,
            inputs=[
                TxInput(i.prev_txid, i.prev_index, i.unlocking_script, i.sequence)
                for i in parsed.inputs
            ],
            outputs=[TxOutput(o.value, o.locking_script) for o in parsed.outputs],
            locktime=parsed.locktime,
        )

        assert rebuilt.txid() == BLOCK_170_TXID
