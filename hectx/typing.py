from enum import Enum, IntEnum


class SchemeType(Enum):
    none = 0x0
    bfv = 0x1
    ckks = 0x2
    bgv = 0x3

    @property
    def uses_plain_modulus(self) -> bool:
        return self in (SchemeType.bfv, SchemeType.bgv)


class SecurityLevel(IntEnum):
    """
    Standard security levels from the HomomorphicEncryption.org tables.
    Ordered by strength, `none` disables enforcement.
    """

    none = 0
    tc128 = 128
    tc192 = 192
    tc256 = 256


class ErrorType(Enum):
    success = "valid"
    invalid_scheme = "scheme must be BFV, CKKS or BGV"
    invalid_degree = "poly_modulus_degree must be a power of two within the supported range"
    invalid_coeff_modulus_size = "coeff_modulus must hold between 1 and the maximum number of primes"
    modulus_too_large = "coeff_modulus exceeds the bit-length allowed for this degree"
    coeff_modulus_not_coprime = "coeff_modulus primes must be pairwise coprime"
    plain_modulus_missing = "plain_modulus must be set for this scheme"
    plain_modulus_too_large = "plain_modulus must be smaller than every coeff_modulus prime"
    plain_modulus_not_coprime = "plain_modulus must be coprime to every coeff_modulus prime"
    security_level_too_low = "parameters do not reach the requested security level"
