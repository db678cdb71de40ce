import math
from dataclasses import dataclass

from hectx.config.security_parameters import (
    COEFF_MOD_COUNT_MAX,
    COEFF_MOD_COUNT_MIN,
    MOD_BIT_COUNT_MAX,
    estimate_security_level,
    is_supported_degree,
    maximum_qbits,
)
from hectx.encryption_parameters import EncryptionParameters
from hectx.typing import ErrorType, SchemeType, SecurityLevel


@dataclass(frozen=True)
class EncryptionParameterQualifiers:
    """
    Properties derived from one EncryptionParameters by `evaluate`.

    Attributes:
        parameter_error (ErrorType): `success`, or the first rule the parameters broke.
        using_fft (bool): The degree is a power of two, so FFT-style transforms apply.
        using_ntt (bool): Every coefficient modulus is a prime congruent to 1 mod 2N.
        using_batching (bool): NTT plus, for BFV/BGV, a prime plaintext modulus congruent to 1 mod 2N.
        using_fast_plain_lift (bool): BFV/BGV plaintext modulus below every coefficient prime.
        using_descending_modulus_chain (bool): Coefficient primes strictly decrease by value.
        using_keyswitching (bool): More than one coefficient prime.
        sec_level (SecurityLevel): Strongest standard level the total bit-length reaches.
    """

    parameter_error: ErrorType = ErrorType.success
    using_fft: bool = False
    using_ntt: bool = False
    using_batching: bool = False
    using_fast_plain_lift: bool = False
    using_descending_modulus_chain: bool = False
    using_keyswitching: bool = False
    sec_level: SecurityLevel = SecurityLevel.none

    @property
    def parameters_set(self) -> bool:
        return self.parameter_error == ErrorType.success

    @property
    def parameter_error_name(self) -> str:
        return self.parameter_error.name

    @property
    def parameter_error_message(self) -> str:
        return self.parameter_error.value


def _failed(reason: ErrorType) -> EncryptionParameterQualifiers:
    return EncryptionParameterQualifiers(parameter_error=reason)


def evaluate(parms: EncryptionParameters) -> EncryptionParameterQualifiers:
    """
    Check `parms` rule by rule and derive its qualifiers. Never raises; the
    first broken rule is reported in `parameter_error`.
    """
    # Scheme and degree.
    if parms.scheme not in (SchemeType.bfv, SchemeType.ckks, SchemeType.bgv):
        return _failed(ErrorType.invalid_scheme)
    N = parms.poly_modulus_degree
    if not is_supported_degree(N):
        return _failed(ErrorType.invalid_degree)

    # Coefficient modulus.
    coeff_modulus = parms.coeff_modulus
    if not COEFF_MOD_COUNT_MIN <= len(coeff_modulus) <= COEFF_MOD_COUNT_MAX:
        return _failed(ErrorType.invalid_coeff_modulus_size)
    if any(q.bit_count > MOD_BIT_COUNT_MAX for q in coeff_modulus):
        return _failed(ErrorType.modulus_too_large)
    total_qbits = sum(q.bit_count for q in coeff_modulus)
    if total_qbits > maximum_qbits(N, SecurityLevel.tc128):
        return _failed(ErrorType.modulus_too_large)
    for i, qi in enumerate(coeff_modulus):
        for qj in coeff_modulus[i + 1 :]:
            if math.gcd(qi.value, qj.value) != 1:
                return _failed(ErrorType.coeff_modulus_not_coprime)

    # Plaintext modulus.
    uses_plain_modulus = parms.scheme.uses_plain_modulus
    plain_modulus = parms.plain_modulus
    if uses_plain_modulus:
        if plain_modulus is None:
            return _failed(ErrorType.plain_modulus_missing)
        if plain_modulus >= min(coeff_modulus):
            return _failed(ErrorType.plain_modulus_too_large)
        if any(math.gcd(plain_modulus.value, q.value) != 1 for q in coeff_modulus):
            return _failed(ErrorType.plain_modulus_not_coprime)

    # NTT tables only exist over a prime field.
    using_ntt = all(q.is_prime and q.is_ntt_compatible(N) for q in coeff_modulus)
    using_batching = using_ntt and (
        not uses_plain_modulus
        or (plain_modulus.is_prime and plain_modulus.is_ntt_compatible(N))
    )
    values = [q.value for q in coeff_modulus]

    return EncryptionParameterQualifiers(
        parameter_error=ErrorType.success,
        using_fft=True,
        using_ntt=using_ntt,
        using_batching=using_batching,
        using_fast_plain_lift=uses_plain_modulus
        and all(plain_modulus < q for q in coeff_modulus),
        using_descending_modulus_chain=all(
            a > b for a, b in zip(values, values[1:])
        ),
        using_keyswitching=len(coeff_modulus) > 1,
        sec_level=estimate_security_level(N, total_qbits),
    )
