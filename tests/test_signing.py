"""
Tests for FORKID sighash computation and P2PKH signing.
"""

from __future__ import annotations

import pytest
from coincurve import PublicKey
from tests.helpers import COMPRESSED_ADDRESS, make_txid

from bsvtools.errors import SigningFailedError
from bsvtools.keys import WIFKey, address_to_locking_script
from bsvtools.script import parse_pushes
from bsvtools.signing import compute_sighash, push_data, sign_p2pkh_input, sign_transaction
from bsvtools.tx import Transaction, TxInput, TxOutput


def unsigned_tx(num_inputs: int = 2) -> Transaction:
    script = address_to_locking_script(COMPRESSED_ADDRESS)
    return Transaction(
        inputs=[
            TxInput(make_txid(i + 1), i, source_value=10_000, source_locking_script=script)
            for i in range(num_inputs)
        ],
        outputs=[TxOutput(15_000, script)],
    )


class TestPushData:
    def test_direct(self) -> None:
        assert push_data(b"\xaa" * 33)[:1] == b"\x21"

    def test_pushdata1(self) -> None:
        assert push_data(b"\xaa" * 100)[:2] == b"\x4c\x64"

    def test_too_long(self) -> None:
        with pytest.raises(ValueError):
            push_data(bytes(300))


class TestComputeSighash:
    """Tests for the BIP143-style preimage hash."""

    def test_differs_per_input(self) -> None:
        tx = unsigned_tx()
        script = tx.inputs[0].source_locking_script
        assert compute_sighash(tx, 0, script, 10_000) != compute_sighash(tx, 1, script, 10_000)

    def test_commits_to_value(self) -> None:
        tx = unsigned_tx()
        script = tx.inputs[0].source_locking_script
        assert compute_sighash(tx, 0, script, 10_000) != compute_sighash(tx, 0, script, 10_001)

    def test_ignores_unlocking_scripts(self) -> None:
        tx = unsigned_tx()
        script = tx.inputs[0].source_locking_script
        before = compute_sighash(tx, 0, script, 10_000)
        tx.inputs[1].unlocking_script = b"\x51"
        assert compute_sighash(tx, 0, script, 10_000) == before

    def test_index_out_of_range(self) -> None:
        with pytest.raises(SigningFailedError):
            compute_sighash(unsigned_tx(1), 3, b"", 0)


# Native P2WPKH example from BIP143. BSV signs the same preimage layout with
# the FORKID bit set in the sighash type.
BIP143_UNSIGNED_TX = (
    "0100000002fff7f7881a8099afa6940d42d1e7f6362bec38171ea3edf433541db4e4ad969f"
    "0000000000eeffffffef51e1b804cc89d182d279655c3aa89e815b1b309fe287d9b2b55d57"
    "b90ec68a0100000000ffffffff02202cb206000000001976a9148280b37df378db99f66f85"
    "c95a783a76ac7a6d5988ac9093510d000000001976a9143bde42dbee7e4dbe6a21b2d50ce2"
    "f0167faa815988ac11000000"
)
BIP143_SCRIPT_CODE = bytes.fromhex("76a9141d0f172a0ecb48aee1be1f2687d2963ae33f71a188ac")
BIP143_VALUE = 600_000_000
BIP143_SIGHASH_ALL = "c37af31116d1b27caf68aae9e3ac82f1477929014d5b917657d0eb49478cb670"
BIP143_SIGHASH_ALL_FORKID = "467f411d178762db122a6aced76370a1c8324355bf0796502bf82eeaeda86a35"


class TestSighashVectors:
    """Sighash digests checked against published values."""

    def test_bip143_sighash_all(self) -> None:
        tx = Transaction.from_hex(BIP143_UNSIGNED_TX)

        sighash = compute_sighash(tx, 1, BIP143_SCRIPT_CODE, BIP143_VALUE, sighash_type=0x01)

        assert sighash.hex() == BIP143_SIGHASH_ALL

    def test_forkid_sighash(self) -> None:
        tx = Transaction.from_hex(BIP143_UNSIGNED_TX)

        sighash = compute_sighash(tx, 1, BIP143_SCRIPT_CODE, BIP143_VALUE)

        assert sighash.hex() == BIP143_SIGHASH_ALL_FORKID

    def test_signature_commits_to_forkid_digest(self, key: WIFKey) -> None:
        tx = Transaction.from_hex(BIP143_UNSIGNED_TX)
        tx.inputs[1].source_value = BIP143_VALUE
        tx.inputs[1].source_locking_script = BIP143_SCRIPT_CODE

        script = sign_p2pkh_input(tx, 1, key.private_key)

        sig, pubkey = parse_pushes(script).pushes
        assert sig[-1] == 0x41
        assert PublicKey(pubkey).verify(
            sig[:-1], bytes.fromhex(BIP143_SIGHASH_ALL_FORKID), hasher=None
        )


class TestSignTransaction:
    """Tests for signing every input."""

    def test_unlocking_script_shape(self, key: WIFKey) -> None:
        tx = unsigned_tx()

        sign_transaction(tx, key.private_key, key.compressed)

        for inp in tx.inputs:
            pushes = parse_pushes(inp.unlocking_script).pushes
            assert len(pushes) == 2
            sig, pubkey = pushes
            assert sig[0] == 0x30
            assert sig[-1] == 0x41
            assert pubkey == key.public_key_bytes

    def test_signatures_verify(self, key: WIFKey) -> None:
        tx = unsigned_tx()

        sign_transaction(tx, key.private_key, key.compressed)

        for i, inp in enumerate(tx.inputs):
            sig, pubkey = parse_pushes(inp.unlocking_script).pushes
            sighash = compute_sighash(tx, i, inp.source_locking_script, inp.source_value)
            assert PublicKey(pubkey).verify(sig[:-1], sighash, hasher=None)

    def test_uncompressed_pubkey(self, key: WIFKey) -> None:
        tx = unsigned_tx(1)

        script = sign_p2pkh_input(tx, 0, key.private_key, compressed=False)

        assert len(parse_pushes(script).pushes[1]) == 65

    def test_missing_source_value(self, key: WIFKey) -> None:
        tx = unsigned_tx()
        tx.inputs[1].source_value = None

        with pytest.raises(SigningFailedError, match="input 1"):
            sign_transaction(tx, key.private_key)

        assert tx.inputs[0].unlocking_script == b""
