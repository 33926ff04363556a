"""
Root Algebra for RSA Accumulators

Shamir's trick for combining roots of a common value, and divide-and-conquer
root factoring for computing all membership witnesses of a batch at once.
"""

import logging
from typing import List, Optional, Sequence

from .errors import InconsistentRootsError, NotCoprimeError
from .number_theory import INT_BITS, extended_gcd, mod_exp, mod_inverse

logger = logging.getLogger(__name__)


def combine_roots(
    xth_root: int, yth_root: int, x: int, y: int, N: int, *, bits: int = INT_BITS
) -> int:
    """
    Combine an x-th root and a y-th root of the same value into its xy-th root.

    Given xth_root^x == yth_root^y == h (mod N) and gcd(x, y) == 1, returns
    h^(1/(xy)). With Bezout coefficients a*x + b*y = 1 the result is
    xth_root^b * yth_root^a; a negative coefficient is handled by inverting
    the matching root and negating the coefficient.

    Args:
        xth_root: An x-th root of h
        yth_root: A y-th root of h
        x: First exponent
        y: Second exponent, coprime to x
        N: RSA modulus
        bits: Register width for group elements

    Returns:
        int: The xy-th root of h

    Raises:
        InconsistentRootsError: If xth_root^x != yth_root^y
        NotCoprimeError: If gcd(x, y) != 1
    """
    if mod_exp(xth_root, x, N, bits=bits) != mod_exp(yth_root, y, N, bits=bits):
        raise InconsistentRootsError(f"Roots for exponents {x} and {y} do not share a power")

    gcd, a, b = extended_gcd(x, y)
    if gcd != 1:
        raise NotCoprimeError(x, y, gcd)

    if b < 0:
        xth_root = mod_inverse(xth_root, N)
        b = -b
    if a < 0:
        yth_root = mod_inverse(yth_root, N)
        a = -a

    return (mod_exp(xth_root, b, N, bits=bits) * mod_exp(yth_root, a, N, bits=bits)) % N


def shamir_trick(
    xth_root: int, yth_root: int, x: int, y: int, N: int, *, bits: int = INT_BITS
) -> Optional[int]:
    """
    Shamir's trick, returning None when the roots cannot be combined.

    Example:
        >>> shamir_trick(11, 6, 7, 5, 13)
        7
        >>> shamir_trick(12, 7, 7, 11, 13) is None
        True
    """
    try:
        return combine_roots(xth_root, yth_root, x, y, N, bits=bits)
    except (InconsistentRootsError, NotCoprimeError) as e:
        logger.debug("shamir_trick rejected inputs: %s", e)
        return None


def root_factor(g: int, elems: Sequence[int], N: int, *, bits: int = INT_BITS) -> List[int]:
    """
    For each i, compute g^(product of elems[j] for j != i) mod N.

    Divide and conquer: split the list in halves, raise g by the product of
    the right half to seed the left half and by the left half to seed the
    right half, and recurse. O(n log n) exponentiations instead of O(n^2).
    The recursion runs on an explicit work stack so large batches do not
    hit the interpreter's recursion limit.

    Args:
        g: Base element
        elems: Exponents (members)
        N: RSA modulus
        bits: Register width for group elements

    Returns:
        List[int]: One value per element, in input order

    Example:
        >>> root_factor(2, [3, 5, 7, 11], 13)
        [2, 8, 5, 5]
    """
    if not elems:
        return []

    result: List[Optional[int]] = [None] * len(elems)
    stack = [(g, 0, len(elems))]

    while stack:
        base, lo, hi = stack.pop()
        if hi - lo == 1:
            result[lo] = base
            continue

        mid = lo + (hi - lo) // 2

        g_left = base
        for e in elems[lo:mid]:
            g_left = mod_exp(g_left, e, N, bits=bits)

        g_right = base
        for e in elems[mid:hi]:
            g_right = mod_exp(g_right, e, N, bits=bits)

        stack.append((g_left, mid, hi))
        stack.append((g_right, lo, mid))

    return result
