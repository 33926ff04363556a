"""
RSA Accumulator Service

Engine API bound to the configured group parameters, with variants that
accept and return the fixed-width little-endian encodings used at the
ledger boundary.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .accumulator import BatchResult, Operation, batch_add, batch_delete, verify_batch
from .config import Settings, get_settings
from .encoding import bytes_to_element, element_to_bytes, exponent_to_bytes
from .hash_to_prime import hash_to_prime
from .rsa_params import load_params
from .witness_refresh import create_all_mem_wit, update_mem_wit, verify_mem_wit

logger = logging.getLogger(__name__)


class AccumulatorService:
    """Service for accumulator operations over the configured RSA group."""

    def __init__(self, settings: Optional[Settings] = None, params: Optional[Tuple[int, int]] = None):
        self.settings = settings or get_settings()
        if params is None:
            params = load_params(self.settings)
        self.N, self.g = params
        if self.N.bit_length() > self.settings.int_bits:
            raise ValueError(f"RSA modulus N does not fit in {self.settings.int_bits} bits")
        self.lambda_bound = self.settings.lambda_bound
        self.int_bits = self.settings.int_bits
        self.max_attempts = self.settings.prime_search_max_attempts
        self.element_bytes = self.settings.element_bytes
        logger.info(f"Loaded RSA parameters: N={self.N.bit_length()} bits, g={self.g}")

    def genesis(self) -> int:
        """Accumulator value of the empty set."""
        return self.g

    def member_from_bytes(self, data: bytes) -> int:
        """Map an encoded record to its accumulator member."""
        return hash_to_prime(
            data,
            self.lambda_bound,
            max_attempts=self.max_attempts,
        )

    def _proof_options(self) -> Dict[str, int]:
        return {"bits": self.int_bits, "max_attempts": self.max_attempts}

    def batch_add(self, state: int, members: Sequence[int]) -> BatchResult:
        return batch_add(state, members, self.N, self.lambda_bound, **self._proof_options())

    def batch_delete(self, state: int, deletions: Sequence[Tuple[int, int]]) -> BatchResult:
        return batch_delete(state, deletions, self.N, self.lambda_bound, **self._proof_options())

    def verify_batch(self, old_state: int, result: BatchResult, operation: Operation) -> bool:
        return verify_batch(old_state, result, operation, self.N, self.lambda_bound, **self._proof_options())

    def create_all_mem_wit(self, state: int, members: Sequence[int]) -> List[int]:
        return create_all_mem_wit(state, members, self.N, bits=self.int_bits)

    def verify_mem_wit(self, state: int, witness: int, member: int) -> bool:
        return verify_mem_wit(state, witness, member, self.N, bits=self.int_bits)

    def update_mem_wit(self, witness: int, member: int, result: BatchResult, operation: Operation) -> int:
        return update_mem_wit(witness, member, result, operation, self.N, bits=self.int_bits)

    # Byte-boundary variants

    def encode(self, value: int) -> bytes:
        """Encode a group element or prime at the configured width."""
        return element_to_bytes(value, self.element_bytes)

    def decode(self, data: bytes) -> int:
        """Decode a group element or prime at the configured width."""
        return bytes_to_element(data, self.element_bytes)

    def encode_result(self, result: BatchResult) -> Tuple[bytes, bytes, bytes]:
        """
        Encode a batch result as (state, aggregate, proof) buffers.

        State and proof are group elements; the aggregate is a product of
        members and is length-prefixed.
        """
        return (
            self.encode(result.state),
            exponent_to_bytes(result.aggregate),
            self.encode(result.proof),
        )

    def batch_add_bytes(self, state: bytes, members: Sequence[bytes]) -> Tuple[bytes, bytes, bytes]:
        result = self.batch_add(self.decode(state), [self.decode(m) for m in members])
        return self.encode_result(result)

    def batch_delete_bytes(
        self, state: bytes, deletions: Sequence[Tuple[bytes, bytes]]
    ) -> Tuple[bytes, bytes, bytes]:
        result = self.batch_delete(
            self.decode(state),
            [(self.decode(m), self.decode(w)) for m, w in deletions],
        )
        return self.encode_result(result)

    def create_all_mem_wit_bytes(self, state: bytes, members: Sequence[bytes]) -> List[bytes]:
        witnesses = self.create_all_mem_wit(self.decode(state), [self.decode(m) for m in members])
        return [self.encode(w) for w in witnesses]

    def verify_mem_wit_bytes(self, state: bytes, witness: bytes, member: bytes) -> bool:
        return self.verify_mem_wit(self.decode(state), self.decode(witness), self.decode(member))
