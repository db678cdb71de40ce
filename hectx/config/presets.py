from enum import Enum

from hectx.typing import SchemeType, SecurityLevel


class Preset(Enum):
    bfv_4096 = "bfv_4096"
    bfv_8192 = "bfv_8192"
    bfv_16384 = "bfv_16384"
    bfv_32768 = "bfv_32768"
    ckks_8192 = "ckks_8192"
    ckks_16384 = "ckks_16384"


# 786433 = 3 * 2^18 + 1 supports batching up to N = 2^17.
_BATCHING_PLAIN_MODULUS = 786433

_PRESET_CONFIGS = {
    Preset.bfv_4096: {
        "scheme": SchemeType.bfv,
        "poly_modulus_degree": 4096,
        "plain_modulus": _BATCHING_PLAIN_MODULUS,
        "sec_level": SecurityLevel.tc128,
    },
    Preset.bfv_8192: {
        "scheme": SchemeType.bfv,
        "poly_modulus_degree": 8192,
        "plain_modulus": _BATCHING_PLAIN_MODULUS,
        "sec_level": SecurityLevel.tc128,
    },
    Preset.bfv_16384: {
        "scheme": SchemeType.bfv,
        "poly_modulus_degree": 16384,
        "plain_modulus": _BATCHING_PLAIN_MODULUS,
        "sec_level": SecurityLevel.tc128,
    },
    Preset.bfv_32768: {
        "scheme": SchemeType.bfv,
        "poly_modulus_degree": 32768,
        "plain_modulus": _BATCHING_PLAIN_MODULUS,
        "sec_level": SecurityLevel.tc128,
    },
    Preset.ckks_8192: {
        "scheme": SchemeType.ckks,
        "poly_modulus_degree": 8192,
        "sec_level": SecurityLevel.tc128,
    },
    Preset.ckks_16384: {
        "scheme": SchemeType.ckks,
        "poly_modulus_degree": 16384,
        "sec_level": SecurityLevel.tc128,
    },
}
