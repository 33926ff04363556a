"""
Proof of Exponentiation

Wesolowski-style certificate that result == base^exp mod N. The verifier
reduces exp modulo a hashed challenge prime and performs two short
exponentiations instead of the full one.
"""

from .encoding import exponent_to_bytes
from .hash_to_prime import DEFAULT_MAX_ATTEMPTS, LAMBDA, hash_to_prime
from .number_theory import INT_BITS, mod_exp


def _challenge(
    base: int, exp: int, result: int, N: int, lambda_bound: int, max_attempts: int
) -> int:
    transcript = b"".join(
        exponent_to_bytes(v) for v in (N, base, exp, result)
    )
    return hash_to_prime(transcript, lambda_bound, max_attempts=max_attempts)


def prove_exponentiation(
    base: int,
    exp: int,
    result: int,
    N: int,
    lambda_bound: int = LAMBDA,
    *,
    bits: int = INT_BITS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> int:
    """
    Produce Q = base^(exp // l) mod N, where l is the challenge prime.

    Args:
        base: Starting group element
        exp: Exponent applied to base
        result: Claimed base^exp mod N
        N: RSA modulus
        lambda_bound: Domain bound for the challenge prime
        bits: Register width for group elements
        max_attempts: Cap on the challenge prime search

    Returns:
        int: The proof element Q
    """
    l = _challenge(base, exp, result, N, lambda_bound, max_attempts)
    return mod_exp(base, exp // l, N, bits=bits)


def verify_exponentiation(
    base: int,
    exp: int,
    result: int,
    proof: int,
    N: int,
    lambda_bound: int = LAMBDA,
    *,
    bits: int = INT_BITS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> bool:
    """
    Check Q^l * base^(exp mod l) == result (mod N).

    Returns:
        bool: True if the proof certifies result == base^exp mod N
    """
    if not 0 <= proof < N or not 0 <= result < N:
        return False
    l = _challenge(base, exp, result, N, lambda_bound, max_attempts)
    r = exp % l
    return (mod_exp(proof, l, N, bits=bits) * mod_exp(base, r, N, bits=bits)) % N == result
