"""
Integration Tests for Ledger Rounds

Drives the reference ledger through admission, round finalization and
minting, the way a stateless-ledger runtime calls the engine.
"""

import pytest
from pydantic import ValidationError

from stateless_accum.accumulator import Operation
from stateless_accum.config import Settings
from stateless_accum.errors import InvalidWitnessError
from stateless_accum.ledger import StatelessLedger, Transaction, TransactionRejected, Utxo
from stateless_accum.number_theory import mod_exp
from stateless_accum.service import AccumulatorService
from stateless_accum.witness_refresh import update_mem_wit_many


def key(n: int) -> bytes:
    """32-byte owner key holding n in its low-order bytes."""
    return n.to_bytes(32, "big")


class TestLedgerRounds:
    """Round-based admission and finalization."""

    @pytest.fixture
    def service(self):
        return AccumulatorService(Settings())

    @pytest.fixture
    def ledger(self, service):
        return StatelessLedger(service)

    @pytest.fixture
    def funded(self, ledger):
        """Ledger with three coins added, plus their witnesses."""
        utxos = [Utxo(pub_key=key(i), id=i) for i in range(3)]
        elems = [ledger.member(u) for u in utxos]
        witnesses = ledger.service.create_all_mem_wit(ledger.state, elems)
        ledger.state = ledger.service.batch_add(ledger.state, elems).state
        return ledger, utxos, elems, witnesses

    def test_genesis_and_mint(self, ledger):
        assert ledger.state == 2
        assert ledger.mint(3) == 8
        assert ledger.state == 8

    def test_utxo_encoding(self):
        utxo = Utxo(pub_key=key(1), id=2)
        assert utxo.encode() == key(1) + b"\x02" + b"\x00" * 7

    def test_utxo_validation(self):
        with pytest.raises(ValidationError):
            Utxo(pub_key=b"short", id=0)
        with pytest.raises(ValidationError):
            Utxo(pub_key=key(0), id=-1)

    def test_block(self, funded):
        ledger, utxos, elems, witnesses = funded
        outputs = [
            Utxo(pub_key=key(1), id=0),
            Utxo(pub_key=key(2), id=1),
            Utxo(pub_key=key(0), id=2),
        ]
        for utxo, out, witness in zip(utxos, outputs, witnesses):
            ledger.add_transaction(
                Transaction(input=utxo, output=out, witness=ledger.service.encode(witness))
            )

        events = ledger.finalize_round()

        new_elems = [ledger.member(u) for u in outputs]
        product = new_elems[0] * new_elems[1] * new_elems[2]
        assert ledger.state == mod_exp(2, product, ledger.service.N)

        assert [e.operation for e in events] == [Operation.DELETE, Operation.ADD]
        deletion, addition = events
        assert deletion.state == 2
        assert deletion.aggregate == elems[0] * elems[1] * elems[2]
        assert addition.state == ledger.state
        assert addition.aggregate == product
        assert ledger.spent_coins == [] and ledger.new_coins == []
        assert ledger.round_id == 1

    def test_events_carry_valid_proofs(self, funded):
        ledger, utxos, _, witnesses = funded
        old_state = ledger.state
        ledger.add_transaction(
            Transaction(
                input=utxos[0],
                output=Utxo(pub_key=key(9), id=0),
                witness=ledger.service.encode(witnesses[0]),
            )
        )
        deletion, addition = ledger.finalize_round()
        service = ledger.service

        assert service.verify_batch(
            old_state, deletion.to_result(), Operation.DELETE
        )
        assert service.verify_batch(
            deletion.state, addition.to_result(), Operation.ADD
        )

    def test_holders_refresh_from_events(self, funded):
        ledger, utxos, elems, witnesses = funded
        ledger.add_transaction(
            Transaction(
                input=utxos[0],
                output=Utxo(pub_key=key(5), id=7),
                witness=ledger.service.encode(witnesses[0]),
            )
        )
        deletion, addition = ledger.finalize_round()

        refreshed = update_mem_wit_many(
            witnesses[1],
            elems[1],
            [(deletion.to_result(), Operation.DELETE), (addition.to_result(), Operation.ADD)],
            ledger.service.N,
        )
        assert ledger.service.verify_mem_wit(ledger.state, refreshed, elems[1])

        # The refreshed witness is accepted in the next round.
        ledger.add_transaction(
            Transaction(
                input=utxos[1],
                output=Utxo(pub_key=key(6), id=8),
                witness=ledger.service.encode(refreshed),
            )
        )

    def test_empty_round(self, ledger):
        assert ledger.finalize_round() == []
        assert ledger.state == 2
        assert ledger.round_id == 1

    def test_self_transfer_rejected(self, funded):
        ledger, utxos, _, witnesses = funded
        tx = Transaction(
            input=utxos[0],
            output=Utxo(pub_key=utxos[0].pub_key, id=99),
            witness=ledger.service.encode(witnesses[0]),
        )
        with pytest.raises(TransactionRejected, match="yourself"):
            ledger.add_transaction(tx)

    def test_invalid_witness_rejected(self, funded):
        ledger, utxos, _, witnesses = funded
        tx = Transaction(
            input=utxos[0],
            output=Utxo(pub_key=key(9), id=0),
            witness=ledger.service.encode(witnesses[1]),
        )
        with pytest.raises(TransactionRejected, match="Witness is invalid"):
            ledger.add_transaction(tx)

    def test_malformed_witness_rejected(self, funded):
        ledger, utxos, _, _ = funded
        tx = Transaction(input=utxos[0], output=Utxo(pub_key=key(9), id=0), witness=b"\x01")
        with pytest.raises(TransactionRejected, match="Malformed"):
            ledger.add_transaction(tx)

    def test_duplicate_submission_rejected(self, funded):
        ledger, utxos, _, witnesses = funded
        tx = Transaction(
            input=utxos[0],
            output=Utxo(pub_key=key(9), id=0),
            witness=ledger.service.encode(witnesses[0]),
        )
        ledger.add_transaction(tx)
        with pytest.raises(TransactionRejected, match="Duplicate"):
            ledger.add_transaction(tx)

    def test_queue_cap(self, funded):
        ledger, utxos, _, witnesses = funded
        ledger.max_pending = 1
        ledger.add_transaction(
            Transaction(
                input=utxos[0],
                output=Utxo(pub_key=key(9), id=0),
                witness=ledger.service.encode(witnesses[0]),
            )
        )
        with pytest.raises(TransactionRejected, match="queue full"):
            ledger.add_transaction(
                Transaction(
                    input=utxos[1],
                    output=Utxo(pub_key=key(9), id=1),
                    witness=ledger.service.encode(witnesses[1]),
                )
            )

    def test_default_queue_cap(self, ledger):
        assert ledger.max_pending == 100

    def test_failed_round_keeps_state(self, funded):
        ledger, utxos, _, witnesses = funded
        ledger.add_transaction(
            Transaction(
                input=utxos[0],
                output=Utxo(pub_key=key(9), id=0),
                witness=ledger.service.encode(witnesses[0]),
            )
        )
        # Minting mid-round moves the state under the queued witness.
        ledger.mint(3)
        state = ledger.state

        with pytest.raises(InvalidWitnessError):
            ledger.finalize_round()
        assert ledger.state == state
        assert ledger.spent_coins == []
        assert ledger.events == []