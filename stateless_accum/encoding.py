"""
Boundary Encoding

Fixed-width little-endian transcoding of group elements and primes, and a
length-prefixed form for exponents of arbitrary size (batch aggregates).
"""

from .errors import ArithmeticOverflow


def byte_length(bits: int) -> int:
    """Number of bytes in a register of the given bit width."""
    if bits <= 0 or bits % 8 != 0:
        raise ValueError("bits must be a positive multiple of 8")
    return bits // 8


def element_to_bytes(value: int, length: int) -> bytes:
    """
    Encode a group element or prime as exactly ``length`` little-endian bytes.

    Args:
        value: Non-negative integer
        length: Buffer size (32 for 256-bit, 256 for 2048-bit configurations)

    Returns:
        bytes: Little-endian encoding padded with zero bytes

    Raises:
        ValueError: If value is negative
        ArithmeticOverflow: If value does not fit in length bytes
    """
    if value < 0:
        raise ValueError("Value must be non-negative")
    try:
        return value.to_bytes(length, byteorder="little")
    except OverflowError:
        raise ArithmeticOverflow(f"Value too large for {length} bytes")


def bytes_to_element(data: bytes, length: int) -> int:
    """
    Decode a fixed-width little-endian buffer.

    Raises:
        ValueError: If data is not bytes or has the wrong length
    """
    if not isinstance(data, (bytes, bytearray)):
        raise ValueError("Input must be bytes")
    if len(data) != length:
        raise ValueError(f"Expected {length} bytes, got {len(data)}")
    return int.from_bytes(data, byteorder="little")


def exponent_to_bytes(value: int) -> bytes:
    """Encode an exponent as a 4-byte little-endian length followed by its body."""
    if value < 0:
        raise ValueError("Value must be non-negative")
    body = value.to_bytes((value.bit_length() + 7) // 8, byteorder="little")
    return len(body).to_bytes(4, byteorder="little") + body


def bytes_to_exponent(data: bytes) -> int:
    """Inverse of exponent_to_bytes."""
    if len(data) < 4:
        raise ValueError("Exponent encoding is missing its length prefix")
    size = int.from_bytes(data[:4], byteorder="little")
    body = data[4:]
    if len(body) != size:
        raise ValueError(f"Exponent body should be {size} bytes, got {len(body)}")
    return int.from_bytes(body, byteorder="little")
