"""
Hash-to-Prime Conversion for RSA Accumulators

Maps arbitrary byte data (typically an encoded UTXO record) to a prime
below the bound LAMBDA, using BLAKE2b-256 and deterministic Miller-Rabin.
"""

import hashlib
import logging

from .errors import PrimeSearchExhausted

logger = logging.getLogger(__name__)

# Default bound for the hash-to-prime domain. Kept below DETERMINISTIC_BOUND
# so every member is certified prime by the fixed base set.
LAMBDA = 2 ** 80

MILLER_RABIN_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)

# The base set above is a proof of primality only for n below this value
# (Sorenson and Webster, 2015). Above it the test is probabilistic.
DETERMINISTIC_BOUND = 3317044064679887385961981

DEFAULT_MAX_ATTEMPTS = 10_000


def is_deterministic(n: int) -> bool:
    """Whether miller_rabin(n) is a proof rather than a probable answer."""
    return n < DETERMINISTIC_BOUND


def miller_rabin(n: int) -> bool:
    """
    Miller-Rabin primality test with the fixed bases 2..41.

    Exact for n < DETERMINISTIC_BOUND (about 3.3e24). For larger n the
    answer is only probable; a warning is logged so the result is not
    silently trusted.

    Args:
        n: Integer to test

    Returns:
        bool: True if n is prime (probably prime above the bound)

    Example:
        >>> miller_rabin(7919)
        True
        >>> miller_rabin(9167)
        False
    """
    if n < 2:
        return False
    for p in MILLER_RABIN_BASES:
        if n == p:
            return True
        if n % p == 0:
            return False

    if not is_deterministic(n):
        logger.warning(
            "Miller-Rabin on a %d-bit value is probabilistic above %d",
            n.bit_length(),
            DETERMINISTIC_BOUND,
        )

    # n - 1 = 2^r * d with d odd
    d, r = n - 1, 0
    while d % 2 == 0:
        d //= 2
        r += 1

    for a in MILLER_RABIN_BASES:
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(r - 1):
            x = (x * x) % n
            if x == n - 1:
                break
        else:
            return False
    return True


def _digest(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def hash_to_prime(
    data: bytes,
    lambda_bound: int = LAMBDA,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> int:
    """
    Convert bytes to a prime below lambda_bound.

    Hashes the input with BLAKE2b-256, reduces the digest modulo
    lambda_bound and, while the result is not prime, hashes the previous
    digest again. About ln(lambda_bound) rounds are expected; the search is
    capped at max_attempts so adversarial input cannot stall the caller.

    Args:
        data: Input bytes, e.g. the little-endian encoding of a UTXO
        lambda_bound: Exclusive upper bound of the prime domain
        max_attempts: Maximum number of digests to try

    Returns:
        int: A prime strictly less than lambda_bound

    Raises:
        TypeError: If data is not bytes
        ValueError: If lambda_bound or max_attempts is out of range
        PrimeSearchExhausted: If no prime is found within max_attempts

    Example:
        >>> p = hash_to_prime(b"utxo")
        >>> assert miller_rabin(p) and p < LAMBDA
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("data must be bytes")
    if lambda_bound <= 2:
        raise ValueError("lambda_bound must be greater than 2")
    if max_attempts <= 0:
        raise ValueError("max_attempts must be positive")
    if not is_deterministic(lambda_bound - 1):
        logger.warning("lambda_bound exceeds the deterministic Miller-Rabin range")

    digest = _digest(bytes(data))
    for attempt in range(1, max_attempts + 1):
        candidate = int.from_bytes(digest, "big") % lambda_bound
        if miller_rabin(candidate):
            logger.debug("hash_to_prime found prime after %d attempts", attempt)
            return candidate
        digest = _digest(digest)

    raise PrimeSearchExhausted(max_attempts)
