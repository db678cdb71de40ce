from dataclasses import dataclass
from functools import cached_property

import numpy as np

from hectx import errors
from hectx.config.security_parameters import MOD_BIT_COUNT_MAX
from hectx.utils.generate_primes import MillerRabinPrimalityTest


def _to_int(value) -> int:
    # bool is an int subclass, never a modulus.
    if isinstance(value, bool):
        raise errors.InvalidModulus(value=value, why="booleans are not moduli")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    raise errors.InvalidModulus(
        value=value, why=f"expected an unsigned integer, got {type(value).__name__}"
    )


@dataclass(frozen=True, order=True)
class Modulus:
    """
    One modulus of at most MOD_BIT_COUNT_MAX bits.

    Accepts int, NumPy integer or a decimal string. Compares, hashes
    and orders by value.
    """

    value: int

    def __post_init__(self):
        value = _to_int(self.value)
        if value <= 1:
            raise errors.InvalidModulus(value=value, why="must be greater than 1")
        if value.bit_length() > MOD_BIT_COUNT_MAX:
            raise errors.InvalidModulus(
                value=value, why=f"exceeds {MOD_BIT_COUNT_MAX} bits"
            )
        object.__setattr__(self, "value", value)

    @property
    def bit_count(self) -> int:
        return self.value.bit_length()

    @cached_property
    def is_prime(self) -> bool:
        return MillerRabinPrimalityTest(self.value)

    @property
    def uint64(self) -> np.uint64:
        return np.uint64(self.value)

    def is_ntt_compatible(self, ring_degree: int) -> bool:
        return (self.value - 1) % (2 * ring_degree) == 0

    def __int__(self):
        return self.value

    def __repr__(self):
        return f"Modulus({self.value})"
