"""
Accumulator Configuration

Environment-based configuration for the accumulator engine. Every setting
can be overridden with an ``ACCUM_``-prefixed environment variable or a
``.env`` file.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .hash_to_prime import DEFAULT_MAX_ATTEMPTS, LAMBDA
from .number_theory import INT_BITS

# RSA-2048 factoring challenge number; its factorization is not known.
RSA_2048 = (
    "251959084756578934940271832400483985714292821262040320277771378360436620"
    "207075955562640185258807844069182906412495150821892985591491761845028084"
    "891200728449926873928072877767359714183472702618963750149718246911650776"
    "133798590957000973304597488084284017974291006424586918171951187461215151"
    "726546322822168699875491824224336372590851418654620435767984233871847744"
    "479207399342365848238242811981638150106748104516603773060562016196762561"
    "338441436038339044149526344321901146575444541784240209246165157233507787"
    "077498171257724679629263863563732899121548314381678998850404453640235273"
    "81951378636564391212010397122822120720357"
)


class Settings(BaseSettings):
    """Accumulator settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ACCUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Group parameters
    modulus: str = Field(
        default=RSA_2048,
        description="RSA modulus N, decimal or 0x-prefixed hex",
    )

    generator: int = Field(
        default=2,
        description="Accumulator base g",
    )

    params_file: Optional[str] = Field(
        default=None,
        description="Optional JSON file with N and g, overrides modulus/generator",
    )

    int_bits: int = Field(
        default=INT_BITS,
        description="Register width of group elements (256 test, 2048 production)",
    )

    # Hash-to-prime
    lambda_bound: int = Field(
        default=LAMBDA,
        description="Exclusive upper bound of the hash-to-prime domain",
    )

    prime_search_max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        description="Iteration cap for hash_to_prime",
    )

    # Admission policy of the reference ledger
    max_pending_transactions: int = Field(
        default=100,
        description="Pending transactions accepted per round",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    log_format: str = Field(default="json", description="Log format: json or text")

    app_version: str = Field(default="0.1.0")

    @field_validator("modulus")
    @classmethod
    def validate_modulus(cls, v: str) -> str:
        v = v.strip()
        try:
            value = int(v, 16) if v.lower().startswith("0x") else int(v, 10)
        except ValueError:
            raise ValueError("modulus must be a decimal or 0x-prefixed hex integer")
        if value <= 2:
            raise ValueError("modulus must be greater than 2")
        return v

    @field_validator("int_bits")
    @classmethod
    def validate_int_bits(cls, v: int) -> int:
        if v <= 0 or v % 8 != 0:
            raise ValueError("int_bits must be a positive multiple of 8")
        return v

    @field_validator("lambda_bound")
    @classmethod
    def validate_lambda_bound(cls, v: int) -> int:
        if v <= 2:
            raise ValueError("lambda_bound must be greater than 2")
        return v

    @field_validator("prime_search_max_attempts", "max_pending_transactions")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError('log_format must be "json" or "text"')
        return v.lower()

    @property
    def N(self) -> int:
        """RSA modulus N as integer."""
        v = self.modulus
        return int(v, 16) if v.lower().startswith("0x") else int(v, 10)

    @property
    def element_bytes(self) -> int:
        """Width of an encoded group element in bytes."""
        return self.int_bits // 8


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get accumulator settings."""
    return settings
