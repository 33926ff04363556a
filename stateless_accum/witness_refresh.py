"""
Witness Creation and Refresh for RSA Accumulators

Bulk witness creation for a batch about to be added, witness verification,
and refreshing stale witnesses after the accumulator advances, using only
the public values published with each batch.
"""

from typing import Iterable, List, Sequence, Tuple

from .accumulator import BatchResult, Operation
from .number_theory import INT_BITS, mod_exp
from .roots import combine_roots, root_factor


def create_all_mem_wit(
    state: int, members: Sequence[int], N: int, *, bits: int = INT_BITS
) -> List[int]:
    """
    Create witnesses for a batch that has not been added yet.

    For each i returns state^(product of members[j], j != i), which is the
    witness of members[i] against batch_add(state, members).state.

    Args:
        state: Accumulator value before the batch is added
        members: Primes about to be added
        N: RSA modulus
        bits: Register width for group elements

    Returns:
        List[int]: Witnesses, index-aligned with members

    Example:
        >>> create_all_mem_wit(2, [3, 5, 7], 13)
        [7, 5, 8]
    """
    return root_factor(state, members, N, bits=bits)


def verify_mem_wit(state: int, witness: int, member: int, N: int, *, bits: int = INT_BITS) -> bool:
    """
    Verify that member is in the accumulator: witness^member == state (mod N).

    Out-of-range inputs are reported as a failed verification.
    """
    if member <= 1 or N <= 0:
        return False
    if not 0 <= witness < N or not 0 <= state < N:
        return False
    return mod_exp(witness, member, N, bits=bits) == state


def update_mem_wit(
    witness: int,
    member: int,
    result: BatchResult,
    operation: Operation,
    N: int,
    *,
    bits: int = INT_BITS,
) -> int:
    """
    Refresh a witness after one batch transition.

    ADD: the new witness is witness^aggregate.
    DELETE: witness is a member-th root of the old state and result.state is
    an aggregate-th root of it; Shamir's trick combines them into the
    (member * aggregate)-th root of the old state, which is a member-th root
    of the new state.

    Args:
        witness: Witness valid against the state before the batch
        member: Prime the witness belongs to
        result: BatchResult published for the batch
        operation: Which transition produced result
        N: RSA modulus
        bits: Register width for group elements

    Returns:
        int: Witness valid against result.state

    Raises:
        NotCoprimeError: If member was itself deleted in the batch
        InconsistentRootsError: If witness was not valid before the batch
        ValueError: If operation is not an Operation value
    """
    operation = Operation(operation)
    if operation is Operation.ADD:
        return mod_exp(witness, result.aggregate, N, bits=bits)
    if operation is not Operation.DELETE:
        raise ValueError(f"Unknown operation: {operation!r}")
    if result.aggregate == 1:
        return witness
    return combine_roots(witness, result.state, member, result.aggregate, N, bits=bits)


def update_mem_wit_many(
    witness: int,
    member: int,
    transitions: Iterable[Tuple[BatchResult, Operation]],
    N: int,
    *,
    bits: int = INT_BITS,
) -> int:
    """Apply update_mem_wit for each (result, operation) in order."""
    for result, operation in transitions:
        witness = update_mem_wit(witness, member, result, operation, N, bits=bits)
    return witness
