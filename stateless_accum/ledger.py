"""
Stateless Ledger Round Orchestration

Reference caller of the accumulator engine. The ledger keeps only the
current accumulator value; users keep their UTXOs and witnesses. Spent
coins and new coins are collected during a round and committed with one
batch_delete followed by one batch_add when the round is finalized.

Not thread-safe: one ledger instance owns one accumulator state.
"""

import logging
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .accumulator import BatchResult, Operation
from .number_theory import mod_exp
from .service import AccumulatorService

logger = logging.getLogger(__name__)


class TransactionRejected(ValueError):
    """A transaction failed admission."""


class Utxo(BaseModel):
    """An unspent output: owner key plus sequence id."""

    model_config = ConfigDict(frozen=True)

    pub_key: bytes = Field(..., description="32-byte owner public key")
    id: int = Field(..., ge=0, lt=2 ** 64, description="Sequence id (u64)")

    @field_validator("pub_key")
    @classmethod
    def validate_pub_key(cls, v: bytes) -> bytes:
        if len(v) != 32:
            raise ValueError("pub_key must be 32 bytes")
        return v

    def encode(self) -> bytes:
        """Little-endian record encoding: pub_key || id as 8 bytes."""
        return self.pub_key + self.id.to_bytes(8, byteorder="little")


class Transaction(BaseModel):
    """One input, one output, and the input's membership witness."""

    input: Utxo
    output: Utxo
    witness: bytes = Field(..., description="Little-endian witness for the input")


class AccumulatorEvent(BaseModel):
    """Auditable record of one committed transition."""

    model_config = ConfigDict(frozen=True)

    operation: Operation
    round_id: int
    state: int
    aggregate: int
    proof: int

    def to_result(self) -> BatchResult:
        """The BatchResult witness holders refresh against."""
        return BatchResult(self.state, self.aggregate, self.proof)


class StatelessLedger:
    """In-memory round orchestrator around an AccumulatorService."""

    def __init__(self, service: AccumulatorService, max_pending: Optional[int] = None):
        self.service = service
        self.max_pending = max_pending or service.settings.max_pending_transactions
        self.state: int = service.genesis()
        self.round_id = 0
        self.spent_coins: List[Tuple[int, int]] = []
        self.new_coins: List[int] = []
        self.events: List[AccumulatorEvent] = []
        self._pending_members: Set[int] = set()

    def member(self, utxo: Utxo) -> int:
        """Accumulator member for a UTXO."""
        return self.service.member_from_bytes(utxo.encode())

    def add_transaction(self, transaction: Transaction) -> None:
        """
        Verify a transaction and queue it for the current round.

        Raises:
            TransactionRejected: If the queue is full, the transfer is to the
                sender itself, the coin is already pending, or the witness is
                invalid against the current state
        """
        if len(self.spent_coins) >= self.max_pending:
            raise TransactionRejected("Transaction queue full. Please try again next round.")

        if transaction.input.pub_key == transaction.output.pub_key:
            raise TransactionRejected("Cannot send coin to yourself.")

        spent_elem = self.member(transaction.input)
        new_elem = self.member(transaction.output)
        if spent_elem in self._pending_members or new_elem in self._pending_members:
            raise TransactionRejected("Duplicate submission in this round.")

        try:
            witness = self.service.decode(transaction.witness)
        except ValueError as e:
            raise TransactionRejected(f"Malformed witness: {e}") from e

        if not self.service.verify_mem_wit(self.state, witness, spent_elem):
            raise TransactionRejected("Witness is invalid")

        self.spent_coins.append((spent_elem, witness))
        self.new_coins.append(new_elem)
        self._pending_members.update((spent_elem, new_elem))
        logger.debug("Queued transaction", extra={"round_id": self.round_id})

    def mint(self, elem: int) -> int:
        """Raise the state by elem directly, creating a coin outside any round."""
        if elem <= 0:
            raise ValueError("elem must be positive")
        self.state = mod_exp(self.state, elem, self.service.N, bits=self.service.int_bits)
        return self.state

    def finalize_round(self) -> List[AccumulatorEvent]:
        """
        Commit the round: batch_delete the spent coins, then batch_add the new ones.

        The state is replaced only if both transitions succeed. The pending
        queues are cleared either way.

        Returns:
            List[AccumulatorEvent]: Deletion and addition events, or [] for an
            empty round
        """
        events: List[AccumulatorEvent] = []
        try:
            if self.spent_coins:
                deletion = self.service.batch_delete(self.state, self.spent_coins)
                addition = self.service.batch_add(deletion.state, self.new_coins)
                events = [
                    AccumulatorEvent(operation=Operation.DELETE, round_id=self.round_id, **deletion._asdict()),
                    AccumulatorEvent(operation=Operation.ADD, round_id=self.round_id, **addition._asdict()),
                ]
                self.state = addition.state
                logger.info(
                    f"Round finalized: {len(self.spent_coins)} spent, {len(self.new_coins)} created",
                    extra={"round_id": self.round_id},
                )
        finally:
            self.spent_coins = []
            self.new_coins = []
            self._pending_members = set()
            self.round_id += 1

        self.events.extend(events)
        return events
