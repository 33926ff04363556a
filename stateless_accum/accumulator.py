"""
RSA Accumulator Core Operations

Batched state transitions for the accumulator. Each transition is a pure
function from (state, batch) to a new state, the batch aggregate and a
proof of the transition; a batch either commits completely or raises.

Callers must serialize transitions against a given state: exactly one
batch_delete/batch_add pair is applied per round.
"""

import enum
import logging
from typing import Iterable, NamedTuple, Sequence, Tuple

from .errors import InvalidWitnessError
from .hash_to_prime import DEFAULT_MAX_ATTEMPTS, LAMBDA
from .number_theory import INT_BITS, mod_exp
from .proofs import prove_exponentiation, verify_exponentiation
from .roots import combine_roots

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    """Kind of state transition."""

    ADD = "add"
    DELETE = "delete"


class BatchResult(NamedTuple):
    """Outcome of a batch transition: (new_state, aggregate, proof)."""

    state: int
    aggregate: int
    proof: int


def _product(members: Iterable[int]) -> int:
    result = 1
    for p in members:
        if p <= 1:
            raise ValueError("All members must be greater than 1")
        result *= p
    return result


def batch_add(
    state: int,
    members: Sequence[int],
    N: int,
    lambda_bound: int = LAMBDA,
    *,
    bits: int = INT_BITS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> BatchResult:
    """
    Add a batch of members to the accumulator.

    new_state = state^(product of members) mod N, computed by folding one
    exponentiation per member. The aggregate is the product of the batch;
    witness holders raise their witnesses by it. The proof certifies
    new_state == state^aggregate.

    Args:
        state: Current accumulator value
        members: Primes to add
        N: RSA modulus
        lambda_bound: Domain bound for the proof challenge
        bits: Register width for group elements
        max_attempts: Cap on the challenge prime search

    Returns:
        BatchResult: (new_state, aggregate, proof)

    Example:
        >>> batch_add(2, [3, 5, 7], 13).state
        5
    """
    if not 0 <= state < N:
        raise ValueError("state must be a group element in [0, N)")

    aggregate = _product(members)
    new_state = state
    for p in members:
        new_state = mod_exp(new_state, p, N, bits=bits)

    proof = prove_exponentiation(
        state, aggregate, new_state, N, lambda_bound, bits=bits, max_attempts=max_attempts
    )
    logger.debug("batch_add: %d members", len(members))
    return BatchResult(new_state, aggregate, proof)


def batch_delete(
    state: int,
    deletions: Sequence[Tuple[int, int]],
    N: int,
    lambda_bound: int = LAMBDA,
    *,
    bits: int = INT_BITS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> BatchResult:
    """
    Delete a batch of members given their membership witnesses.

    Every (member, witness) pair is verified against state first; a single
    bad witness rejects the whole batch. The witnesses are then folded
    pairwise with Shamir's trick into the root of state for the product of
    all deleted members, which is the new state.

    The proof certifies new_state^aggregate == state, i.e. the old state is
    the new state with the deleted members added back.

    Args:
        state: Current accumulator value
        deletions: (member, witness) pairs
        N: RSA modulus
        lambda_bound: Domain bound for the proof challenge
        bits: Register width for group elements
        max_attempts: Cap on the challenge prime search

    Returns:
        BatchResult: (new_state, aggregate, proof)

    Raises:
        InvalidWitnessError: If any witness fails witness^member == state
        NotCoprimeError: If two deleted members share a factor (duplicates)
    """
    if not 0 <= state < N:
        raise ValueError("state must be a group element in [0, N)")

    for member, witness in deletions:
        if member <= 1:
            raise ValueError("All members must be greater than 1")
        if mod_exp(witness, member, N, bits=bits) != state:
            raise InvalidWitnessError(member)

    if not deletions:
        new_state, aggregate = state, 1
    else:
        aggregate, new_state = deletions[0]
        new_state %= N
        for member, witness in deletions[1:]:
            new_state = combine_roots(new_state, witness, aggregate, member, N, bits=bits)
            aggregate *= member

    proof = prove_exponentiation(
        new_state, aggregate, state, N, lambda_bound, bits=bits, max_attempts=max_attempts
    )
    logger.debug("batch_delete: %d members", len(deletions))
    return BatchResult(new_state, aggregate, proof)


def verify_batch(
    old_state: int,
    result: BatchResult,
    operation: Operation,
    N: int,
    lambda_bound: int = LAMBDA,
    *,
    bits: int = INT_BITS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> bool:
    """
    Check the transition proof of a batch result.

    ADD: result.state == old_state^aggregate.
    DELETE: old_state == result.state^aggregate.

    Raises:
        ValueError: If operation is not an Operation value
    """
    operation = Operation(operation)
    if operation is Operation.ADD:
        base, target = old_state, result.state
    elif operation is Operation.DELETE:
        base, target = result.state, old_state
    else:
        raise ValueError(f"Unknown operation: {operation!r}")
    return verify_exponentiation(
        base,
        result.aggregate,
        target,
        result.proof,
        N,
        lambda_bound,
        bits=bits,
        max_attempts=max_attempts,
    )


def recompute_root(members: Iterable[int], N: int, g: int, *, bits: int = INT_BITS) -> int:
    """
    Recompute the accumulator from scratch: g^(product of members) mod N.

    Example:
        >>> recompute_root([3, 5, 7], 13, 2)
        5
    """
    if N <= 0 or g <= 0:
        raise ValueError("N and g must be positive")
    if g >= N:
        raise ValueError("Generator g must be less than modulus N")

    A = g
    for p in members:
        if p <= 0:
            raise ValueError("All primes must be positive")
        A = mod_exp(A, p, N, bits=bits)
    return A