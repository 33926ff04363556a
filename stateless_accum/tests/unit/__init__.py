"""
Unit tests for accumulator components

- test_number_theory.py: modular arithmetic and Bezout coefficients
- test_hash_to_prime.py: primality and hash-to-prime
- test_roots.py: Shamir's trick and root factoring
- test_accumulator.py: batched state transitions and proofs
- test_witness_refresh.py: witness creation, verification and refresh
- test_encoding.py: boundary encoding
- test_config.py: settings and parameter loading
"""
