"""
Security tables and library-wide bounds.

The bounds are the largest total coefficient modulus bit-lengths that keep a
ring of degree N at the given classical security level, following the
HomomorphicEncryption.org security standard for a uniform ternary secret.
"""

from hectx.typing import SecurityLevel

POLY_MOD_DEGREE_MIN = 1024
POLY_MOD_DEGREE_MAX = 32768

MOD_BIT_COUNT_MIN = 2
MOD_BIT_COUNT_MAX = 61
USER_MOD_BIT_COUNT_MAX = 60

COEFF_MOD_COUNT_MIN = 1
COEFF_MOD_COUNT_MAX = 64

# Returned for SecurityLevel.none, larger than any admissible total.
UNBOUNDED_QBITS = MOD_BIT_COUNT_MAX * COEFF_MOD_COUNT_MAX

_MAX_QBITS = {
    SecurityLevel.tc128: {
        1024: 27,
        2048: 54,
        4096: 109,
        8192: 218,
        16384: 438,
        32768: 881,
    },
    SecurityLevel.tc192: {
        1024: 19,
        2048: 37,
        4096: 75,
        8192: 152,
        16384: 305,
        32768: 611,
    },
    SecurityLevel.tc256: {
        1024: 14,
        2048: 29,
        4096: 58,
        8192: 118,
        16384: 237,
        32768: 476,
    },
}

STANDARD_LEVELS = (SecurityLevel.tc128, SecurityLevel.tc192, SecurityLevel.tc256)


def maximum_qbits(N: int, sec_level: SecurityLevel = SecurityLevel.tc128) -> int:
    """
    Maximum total coefficient modulus bit-length for degree N.
    Returns 0 when the table has no entry for N.
    """
    sec_level = SecurityLevel(sec_level)
    if sec_level == SecurityLevel.none:
        return UNBOUNDED_QBITS
    return _MAX_QBITS[sec_level].get(N, 0)


def estimate_security_level(N: int, total_qbits: int) -> SecurityLevel:
    """Strongest standard level whose bound admits `total_qbits` at degree N."""
    reached = SecurityLevel.none
    for sec_level in STANDARD_LEVELS:
        bound = _MAX_QBITS[sec_level].get(N, 0)
        if 0 < total_qbits <= bound:
            reached = sec_level
    return reached


def is_supported_degree(N: int) -> bool:
    return (
        isinstance(N, int)
        and POLY_MOD_DEGREE_MIN <= N <= POLY_MOD_DEGREE_MAX
        and N & (N - 1) == 0
    )
