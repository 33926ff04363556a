"""
Accumulator Errors

Exception hierarchy for the accumulator engine. Every failure aborts the
enclosing operation; nothing here is retried automatically.
"""


class AccumulatorError(Exception):
    """Base class for accumulator engine failures."""


class ArithmeticOverflow(AccumulatorError, OverflowError):
    """An operand or intermediate value exceeds its configured integer width."""


class NotCoprimeError(AccumulatorError, ValueError):
    """Two exponents that must be coprime share a factor."""

    def __init__(self, x: int, y: int, gcd: int):
        super().__init__(f"Exponents are not coprime (gcd={gcd})")
        self.x = x
        self.y = y
        self.gcd = gcd


class InvalidWitnessError(AccumulatorError, ValueError):
    """A witness does not verify against the accumulator state."""

    def __init__(self, member: int, message: str = "Witness is invalid"):
        super().__init__(f"{message} for member {member}")
        self.member = member


class PrimeSearchExhausted(AccumulatorError, ValueError):
    """hash_to_prime hit its iteration cap without finding a prime."""

    def __init__(self, attempts: int):
        super().__init__(f"Could not find prime within {attempts} attempts")
        self.attempts = attempts


class InconsistentRootsError(AccumulatorError, ValueError):
    """Roots passed to Shamir's trick are not roots of the same value."""
