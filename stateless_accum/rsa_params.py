"""
RSA Parameters for the Accumulator

Loads the public group parameters (modulus N and generator g) from
configuration, or from a JSON parameters file when one is configured.
"""

import json
import logging
import math
from pathlib import Path
from typing import Optional, Tuple

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


def _parse_int(value) -> int:
    if isinstance(value, int):
        return value
    value = str(value).strip()
    return int(value, 16) if value.lower().startswith("0x") else int(value, 10)


def load_params(settings: Optional[Settings] = None) -> Tuple[int, int]:
    """
    Load RSA parameters for accumulator operations.

    Args:
        settings: Settings to read from (defaults to the global settings)

    Returns:
        Tuple[int, int]: (N, g)

    Raises:
        FileNotFoundError: If a configured params_file does not exist
        ValueError: If parameters are invalid or malformed
    """
    settings = settings or get_settings()

    if settings.params_file:
        params_file = Path(settings.params_file)
        with open(params_file, "r") as f:
            try:
                params = json.load(f)
                N = _parse_int(params["N"])
                g = _parse_int(params.get("g", settings.generator))
            except (json.JSONDecodeError, KeyError) as e:
                raise ValueError(f"Invalid parameters file format: {e}")
        logger.info("Loaded RSA parameters from %s", params_file)
    else:
        N, g = settings.N, settings.generator

    validate_params(N, g, settings.int_bits)
    return N, g


def generate_toy_params() -> Tuple[int, int]:
    """
    Small toy parameters for unit testing.

    Returns:
        Tuple[int, int]: (13, 2)
    """
    return 13, 2


def validate_params(N: int, g: int, bits: int) -> None:
    """
    Validate RSA parameters for accumulator operations.

    Args:
        N: RSA modulus
        g: Generator base
        bits: Register width the modulus must fit

    Raises:
        ValueError: If parameters are invalid
    """
    if N <= 2:
        raise ValueError("RSA modulus N must be greater than 2")

    if g <= 1:
        raise ValueError("Generator g must be greater than 1")

    if g >= N:
        raise ValueError("Generator g must be less than modulus N")

    if N.bit_length() > bits:
        raise ValueError(f"RSA modulus N does not fit in {bits} bits")

    if math.gcd(N, g) != 1:
        raise ValueError("RSA modulus N and generator g must be coprime")
