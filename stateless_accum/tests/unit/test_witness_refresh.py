"""
Unit Tests for Witness Refresh Module

Tests witness creation for pending batches, verification, and refreshing
stale witnesses from published batch results.
"""

import pytest

from stateless_accum.accumulator import Operation, batch_add, batch_delete, recompute_root
from stateless_accum.errors import InconsistentRootsError, NotCoprimeError
from stateless_accum.witness_refresh import (
    create_all_mem_wit,
    update_mem_wit,
    update_mem_wit_many,
    verify_mem_wit,
)


def generate_demo_params():
    """Small composite modulus for testing."""
    p, q = 11, 19
    N = p * q  # N = 209
    g = pow(2, 2, N)  # g = 4, in the quadratic residue subgroup
    return N, g


class TestCreateAndVerify:
    """Test witness creation and verification."""

    @pytest.fixture
    def toy_params(self):
        return generate_demo_params()

    def test_reference_witnesses(self):
        assert create_all_mem_wit(2, [3, 5, 7], 13) == [7, 5, 8]

    def test_witnesses_verify_after_add(self, toy_params):
        N, g = toy_params
        members = [13, 17, 23, 29]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state
        for member, witness in zip(members, witnesses):
            assert verify_mem_wit(state, witness, member, N)

    def test_witness_fails_before_add(self, toy_params):
        N, g = toy_params
        members = [13, 17]
        witnesses = create_all_mem_wit(g, members, N)
        assert not verify_mem_wit(g, witnesses[0], 13, N)

    def test_non_member_fails(self, toy_params):
        N, g = toy_params
        state = batch_add(g, [13, 17, 23], N).state
        # Honest witness for a batch that was never added.
        pending = create_all_mem_wit(state, [31, 37], N)
        assert not verify_mem_wit(state, pending[0], 31, N)
        assert not verify_mem_wit(state, state, 31, N)

    def test_witness_bound_to_its_member(self, toy_params):
        N, g = toy_params
        members = [13, 17, 23]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state
        assert verify_mem_wit(state, witnesses[0], 13, N)
        assert not verify_mem_wit(state, witnesses[0], 29, N)
        assert not verify_mem_wit(state, witnesses[0], 17, N)

    def test_deleted_member_witness_fails(self, toy_params):
        N, g = toy_params
        members = [13, 17, 23]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state

        result = batch_delete(state, [(17, witnesses[1])], N)
        assert verify_mem_wit(state, witnesses[1], 17, N)
        assert not verify_mem_wit(result.state, witnesses[1], 17, N)
        # Survivors still verify once refreshed.
        refreshed = update_mem_wit(witnesses[0], 13, result, Operation.DELETE, N)
        assert verify_mem_wit(result.state, refreshed, 13, N)

    def test_out_of_range_inputs(self, toy_params):
        N, g = toy_params
        assert not verify_mem_wit(g, N, 13, N)
        assert not verify_mem_wit(N + 1, g, 13, N)
        assert not verify_mem_wit(g, g, 1, N)
        assert not verify_mem_wit(g, g, 13, 0)


class TestUpdateWitness:
    """Test refreshing witnesses after state transitions."""

    @pytest.fixture
    def toy_params(self):
        return generate_demo_params()

    def test_update_after_add(self, toy_params):
        N, g = toy_params
        state = batch_add(g, [13], N).state
        witness = g

        result = batch_add(state, [17, 23], N)
        new_witness = update_mem_wit(witness, 13, result, Operation.ADD, N)

        assert new_witness == recompute_root([17, 23], N, g)
        assert verify_mem_wit(result.state, new_witness, 13, N)

    def test_update_after_delete(self, toy_params):
        N, g = toy_params
        members = [13, 17, 23, 29]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state

        result = batch_delete(state, [(17, witnesses[1]), (29, witnesses[3])], N)
        new_witness = update_mem_wit(witnesses[0], 13, result, Operation.DELETE, N)

        assert new_witness == recompute_root([23], N, g)
        assert verify_mem_wit(result.state, new_witness, 13, N)

    def test_update_after_empty_delete(self, toy_params):
        N, g = toy_params
        state = batch_add(g, [13, 17], N).state
        witness = recompute_root([17], N, g)
        result = batch_delete(state, [], N)
        assert update_mem_wit(witness, 13, result, Operation.DELETE, N) == witness

    def test_deleted_member_cannot_refresh(self, toy_params):
        N, g = toy_params
        members = [13, 17]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state
        result = batch_delete(state, [(13, witnesses[0])], N)

        with pytest.raises(NotCoprimeError):
            update_mem_wit(witnesses[0], 13, result, Operation.DELETE, N)

    def test_stale_witness_rejected(self, toy_params):
        N, g = toy_params
        members = [13, 17, 23]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state
        result = batch_delete(state, [(17, witnesses[1])], N)

        stale = (witnesses[0] * 4) % N
        with pytest.raises(InconsistentRootsError):
            update_mem_wit(stale, 13, result, Operation.DELETE, N)

    def test_update_over_round(self, toy_params):
        N, g = toy_params
        members = [13, 17, 23]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state

        deletion = batch_delete(state, [(23, witnesses[2])], N)
        addition = batch_add(deletion.state, [29, 31], N)

        refreshed = update_mem_wit_many(
            witnesses[0],
            13,
            [(deletion, Operation.DELETE), (addition, Operation.ADD)],
            N,
        )
        assert refreshed == recompute_root([17, 29, 31], N, g)
        assert verify_mem_wit(addition.state, refreshed, 13, N)

    def test_operation_accepts_raw_value(self, toy_params):
        N, g = toy_params
        members = [13, 17, 23]
        witnesses = create_all_mem_wit(g, members, N)
        state = batch_add(g, members, N).state

        deletion = batch_delete(state, [(23, witnesses[2])], N)
        refreshed = update_mem_wit(witnesses[0], 13, deletion, "delete", N)
        assert refreshed == recompute_root([17], N, g)

        addition = batch_add(deletion.state, [29], N)
        refreshed = update_mem_wit(refreshed, 13, addition, "add", N)
        assert refreshed == recompute_root([17, 29], N, g)

    def test_unknown_operation_rejected(self, toy_params):
        N, g = toy_params
        result = batch_add(g, [13], N)
        with pytest.raises(ValueError):
            update_mem_wit(g, 17, result, "remove", N)
