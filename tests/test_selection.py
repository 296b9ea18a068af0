"""
Tests for largest-first UTXO selection.
"""

from __future__ import annotations

import pytest
from tests.helpers import make_utxo

from bsvtools.errors import InsufficientFundsError, NoUTXOsAvailableError
from bsvtools.fees import estimate_fee
from bsvtools.selection import select_utxos


class TestSelectUtxos:
    """Tests for select_utxos."""

    def test_picks_single_largest(self) -> None:
        """5000 alone covers 1000 + 100."""
        utxos = [make_utxo(5000, 1), make_utxo(3000, 2)]

        selected = select_utxos(utxos, 1000, 100)

        assert selected == [utxos[0]]

    def test_largest_first_regardless_of_input_order(self) -> None:
        utxos = [make_utxo(3000, 1), make_utxo(5000, 2)]

        selected = select_utxos(utxos, 1000, 100)

        assert [u.value for u in selected] == [5000]

    def test_equal_values_fail_when_fee_outgrows_them(self) -> None:
        """Three 1000-sat UTXOs cannot pay 2500 at 1000 sat/kB."""
        utxos = [make_utxo(1000, i) for i in range(3)]

        with pytest.raises(InsufficientFundsError) as exc_info:
            select_utxos(utxos, 2500, 1000)

        err = exc_info.value
        assert err.available == 3000
        assert err.target == 2500
        assert err.fee == estimate_fee(3, 2, 1000) == 522

    def test_equal_values_all_needed(self) -> None:
        utxos = [make_utxo(1000, i) for i in range(3)]

        selected = select_utxos(utxos, 2500, 100)

        assert selected == utxos

    def test_accumulates_until_covered(self) -> None:
        utxos = [make_utxo(v, i) for i, v in enumerate([100, 700, 400, 900])]

        selected = select_utxos(utxos, 1400, 100)

        assert [u.value for u in selected] == [900, 700]

    def test_result_is_minimal_prefix(self) -> None:
        utxos = [make_utxo(v, i) for i, v in enumerate([10_000, 8_000, 6_000, 4_000])]
        target = 15_000

        selected = select_utxos(utxos, target, 1000)

        total = sum(u.value for u in selected)
        fee = estimate_fee(len(selected), 2, 1000)
        assert total >= target + fee
        without_last = selected[:-1]
        assert sum(u.value for u in without_last) < target + estimate_fee(
            len(without_last), 2, 1000
        )

    def test_ties_keep_original_order(self) -> None:
        utxos = [make_utxo(500, 1), make_utxo(500, 2), make_utxo(500, 3)]

        selected = select_utxos(utxos, 800, 100)

        assert [u.txid for u in selected] == [utxos[0].txid, utxos[1].txid]

    def test_deterministic(self) -> None:
        utxos = [make_utxo(v, i) for i, v in enumerate([300, 300, 900, 100, 600])]

        first = select_utxos(utxos, 1000, 250)
        second = select_utxos(utxos, 1000, 250)

        assert first == second

    def test_does_not_mutate_input(self) -> None:
        utxos = [make_utxo(1000, 1), make_utxo(5000, 2), make_utxo(3000, 3)]
        original = list(utxos)

        select_utxos(utxos, 4000, 100)

        assert utxos == original

    def test_empty_raises_no_utxos(self) -> None:
        with pytest.raises(NoUTXOsAvailableError):
            select_utxos([], 1000, 100)

    def test_insufficient_funds_message(self) -> None:
        with pytest.raises(InsufficientFundsError, match="have 500 satoshis, need 1100"):
            select_utxos([make_utxo(500)], 1000, 100)
