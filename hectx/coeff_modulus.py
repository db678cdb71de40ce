from hectx import errors
from hectx.config.security_parameters import (
    MOD_BIT_COUNT_MIN,
    USER_MOD_BIT_COUNT_MAX,
    is_supported_degree,
    maximum_qbits,
)
from hectx.modulus import Modulus
from hectx.typing import SecurityLevel
from hectx.utils.generate_primes import generate_primes

# Default prime bit sizes per (sec_level, N). Every row sums to at most the
# matching security bound. Degrees up to 4096 use a single prime.
_DEFAULT_BIT_SIZES = {
    SecurityLevel.tc128: {
        1024: [27],
        2048: [54],
        4096: [60],
        8192: [43, 43, 44, 44, 44],
        16384: [48, 48, 48, 49, 49, 49, 49, 49, 49],
        32768: [55] * 15 + [56],
    },
    SecurityLevel.tc192: {
        1024: [19],
        2048: [37],
        4096: [59],
        8192: [38, 38, 38, 38],
        16384: [50, 50, 50, 51, 52, 52],
        32768: [56] * 10 + [51],
    },
    SecurityLevel.tc256: {
        1024: [14],
        2048: [29],
        4096: [58],
        8192: [39, 39, 40],
        16384: [47, 47, 47, 48, 48],
        32768: [53] * 8 + [52],
    },
}


class CoeffModulus:
    @staticmethod
    def max_bit_count(
        poly_modulus_degree: int,
        sec_level: SecurityLevel = SecurityLevel.tc128,
    ) -> int:
        return maximum_qbits(poly_modulus_degree, sec_level)

    @staticmethod
    def bfv_default(
        poly_modulus_degree: int,
        sec_level: SecurityLevel = SecurityLevel.tc128,
        n_jobs: int = 1,
    ) -> tuple[Modulus, ...]:
        """
        Default coefficient modulus for BFV/BGV (also usable for CKKS).

        Args:
            poly_modulus_degree (int): Ring degree N.
            sec_level (SecurityLevel): Standard level the total bit-length must satisfy.
            n_jobs (int): joblib workers for the prime search.
        Returns:
            tuple[Modulus, ...]: Distinct primes, each congruent to 1 mod 2N.
        """
        sec_level = SecurityLevel(sec_level)
        try:
            bit_sizes = _DEFAULT_BIT_SIZES[sec_level][poly_modulus_degree]
        except KeyError:
            raise errors.UnsupportedParameters(
                N=poly_modulus_degree, sec_level=sec_level.name
            )
        return CoeffModulus.create(poly_modulus_degree, bit_sizes, n_jobs=n_jobs)

    @staticmethod
    def create(
        poly_modulus_degree: int,
        bit_sizes: list[int],
        n_jobs: int = 1,
    ) -> tuple[Modulus, ...]:
        """
        One prime per requested bit size, each congruent to 1 mod 2N, searched
        downward from the largest value of that bit length. Output order
        follows `bit_sizes`; repeated sizes give distinct primes.
        """
        if not is_supported_degree(poly_modulus_degree):
            raise errors.UnsupportedParameters(N=poly_modulus_degree, sec_level="any")
        bit_sizes = list(bit_sizes)
        if not bit_sizes:
            raise errors.InvalidModulus(value=bit_sizes, why="no bit sizes requested")
        for bit_size in bit_sizes:
            if not MOD_BIT_COUNT_MIN <= bit_size <= USER_MOD_BIT_COUNT_MAX:
                raise errors.InvalidModulus(
                    value=bit_size,
                    why=f"bit size must be within [{MOD_BIT_COUNT_MIN}, {USER_MOD_BIT_COUNT_MAX}]",
                )
        primes = generate_primes(poly_modulus_degree, bit_sizes, n_jobs=n_jobs)
        return tuple(Modulus(q) for q in primes)


class PlainModulus:
    @staticmethod
    def batching(poly_modulus_degree: int, bit_size: int) -> Modulus:
        """A prime plaintext modulus that enables batching at degree N."""
        return CoeffModulus.create(poly_modulus_degree, [bit_size])[0]

    @staticmethod
    def batching_multi(
        poly_modulus_degree: int, bit_sizes: list[int]
    ) -> tuple[Modulus, ...]:
        return CoeffModulus.create(poly_modulus_degree, bit_sizes)
