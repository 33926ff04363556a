"""
Stateless Accumulator Package

RSA accumulator engine for a stateless ledger: validators keep a single
accumulator value, users keep their own membership witnesses.
"""

from .accumulator import BatchResult, Operation, batch_add, batch_delete, recompute_root, verify_batch
from .errors import (
    AccumulatorError,
    ArithmeticOverflow,
    InconsistentRootsError,
    InvalidWitnessError,
    NotCoprimeError,
    PrimeSearchExhausted,
)
from .hash_to_prime import hash_to_prime, miller_rabin
from .number_theory import bezout, extended_gcd, mod_exp, mod_inverse, mul_mod
from .roots import root_factor, shamir_trick
from .rsa_params import load_params
from .service import AccumulatorService
from .witness_refresh import create_all_mem_wit, update_mem_wit, verify_mem_wit

__version__ = "0.1.0"
__all__ = [
    "BatchResult",
    "Operation",
    "batch_add",
    "batch_delete",
    "recompute_root",
    "verify_batch",
    "AccumulatorError",
    "ArithmeticOverflow",
    "InconsistentRootsError",
    "InvalidWitnessError",
    "NotCoprimeError",
    "PrimeSearchExhausted",
    "hash_to_prime",
    "miller_rabin",
    "bezout",
    "extended_gcd",
    "mod_exp",
    "mod_inverse",
    "mul_mod",
    "root_factor",
    "shamir_trick",
    "load_params",
    "AccumulatorService",
    "create_all_mem_wit",
    "update_mem_wit",
    "verify_mem_wit",
]
