"""
Integer Arithmetic for RSA Accumulators

Modular exponentiation, modular multiplication, the extended Euclidean
algorithm and modular inverses.

Python integers never wrap, so the fixed-width limits of the accumulator
are checked explicitly: group elements live in a ``bits``-wide register
(2048 for production, 256 for the test configuration) and Bezout
coefficients in a signed ``coefficient_bits``-wide register. Anything that
does not fit raises ArithmeticOverflow instead of being truncated.
"""

from typing import Optional, Tuple

from .errors import ArithmeticOverflow

# Width of a group element register.
INT_BITS = 2048

# Signed width of Bezout coefficients. Must cover the largest exponent
# product handed to extended_gcd (a delete batch of 100 members below 2**80
# needs 8000 bits).
COEFFICIENT_BITS = 8192


def _check_width(value: int, bits: int, what: str) -> None:
    if value.bit_length() > bits:
        raise ArithmeticOverflow(
            f"{what} needs {value.bit_length()} bits, register holds {bits}"
        )


def mod_exp(base: int, exp: int, modulus: int, *, bits: int = INT_BITS) -> int:
    """
    Compute base^exp mod modulus.

    Square-and-multiply over a base reduced into [0, modulus). Each
    intermediate product is below modulus^2, which fits the double-width
    product register as long as the modulus fits ``bits``.

    Args:
        base: Base, any non-negative integer
        exp: Non-negative exponent
        modulus: Positive modulus
        bits: Register width for group elements

    Returns:
        int: base^exp mod modulus

    Raises:
        ArithmeticOverflow: If the modulus does not fit the register
        ValueError: If modulus is not positive or exp is negative

    Example:
        >>> mod_exp(2, 7, 13)
        11
    """
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if exp < 0:
        raise ValueError("exponent must be non-negative")
    _check_width(modulus, bits, "modulus")

    return pow(base % modulus, exp, modulus)


def mul_mod(a: int, b: int, modulus: int, *, bits: int = INT_BITS) -> int:
    """
    Compute a * b mod modulus by repeated doubling.

    Only additions and doublings of values below the modulus are performed,
    so no full-width product is ever formed. Precondition: the doubled
    addend must stay below half the register (2**(bits-1)); if it does not,
    ArithmeticOverflow is raised rather than returning a wrapped value.

    Args:
        a: First factor
        b: Second factor (non-negative)
        modulus: Positive modulus
        bits: Register width

    Returns:
        int: a * b mod modulus

    Raises:
        ArithmeticOverflow: If a doubling would leave the register
    """
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if b < 0:
        raise ValueError("b must be non-negative")

    half = 1 << (bits - 1)
    result = 0
    a %= modulus
    while b > 0:
        if b & 1:
            result = (result + a) % modulus
        b >>= 1
        if not b:
            break
        if a >= half:
            raise ArithmeticOverflow(
                f"mul_mod addend {a.bit_length()} bits cannot double in a {bits}-bit register"
            )
        a = (a * 2) % modulus

    return result % modulus


def extended_gcd(
    a: int, b: int, *, coefficient_bits: int = COEFFICIENT_BITS
) -> Tuple[int, int, int]:
    """
    Extended Euclidean Algorithm (iterative).

    Computes gcd(a, b) and signed coefficients x, y with a*x + b*y = gcd.

    Args:
        a: First non-negative integer
        b: Second non-negative integer
        coefficient_bits: Signed width available to the coefficients

    Returns:
        Tuple[int, int, int]: (gcd, x, y)

    Raises:
        ArithmeticOverflow: If a coefficient leaves the signed range

    Example:
        >>> extended_gcd(180, 150)
        (30, 1, -1)
        >>> extended_gcd(13, 17)
        (1, 4, -3)
    """
    if a < 0 or b < 0:
        raise ValueError("extended_gcd expects non-negative inputs")

    limit = 1 << (coefficient_bits - 1)
    s, old_s = 0, 1
    t, old_t = 1, 0
    r, old_r = b, a

    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s
        old_t, t = t, old_t - quotient * t
        if abs(s) >= limit or abs(t) >= limit:
            raise ArithmeticOverflow(
                f"Bezout coefficient exceeds signed {coefficient_bits}-bit range"
            )

    return old_r, old_s, old_t


def bezout(a: int, b: int) -> Optional[Tuple[int, int]]:
    """
    Bezout coefficients (x, y) with a*x + b*y = 1, or None if gcd(a, b) != 1.

    Example:
        >>> bezout(4, 10) is None
        True
        >>> bezout(3434, 2423)
        (-997, 1413)
    """
    gcd, x, y = extended_gcd(a, b)
    if gcd != 1:
        return None
    return x, y


def mod_inverse(a: int, modulus: int) -> int:
    """
    Modular inverse of a modulo modulus.

    The caller guarantees gcd(a, modulus) == 1; this is not checked and the
    result is meaningless otherwise.

    Example:
        >>> mod_inverse(9, 13)
        3
    """
    # Coefficients of a reduced inverse never exceed the modulus.
    width = max(COEFFICIENT_BITS, modulus.bit_length() + 1)
    _, x, _ = extended_gcd(a % modulus, modulus, coefficient_bits=width)
    return x % modulus
