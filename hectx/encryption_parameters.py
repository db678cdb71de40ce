import dataclasses
import hashlib
from dataclasses import dataclass
from functools import cached_property
from typing import Sequence

import numpy as np
from loguru import logger

from hectx import errors
from hectx.config.presets import _PRESET_CONFIGS, Preset
from hectx.modulus import Modulus
from hectx.typing import ErrorType, SchemeType

ParmsId = bytes


def _as_modulus(value) -> Modulus:
    return value if isinstance(value, Modulus) else Modulus(value)


@dataclass(frozen=True)
class EncryptionParameters:
    """
    Scheme type, ring degree, coefficient modulus and plaintext modulus.

    Frozen: a Context keeps referring to the exact instance it was built from,
    so a change means a new instance (see `dataclasses.replace` and the
    `with_*` helpers). The plaintext modulus is ignored for CKKS.
    """

    scheme: SchemeType
    poly_modulus_degree: int = 0
    coeff_modulus: tuple[Modulus, ...] = ()
    plain_modulus: Modulus | None = None

    @classmethod
    def from_preset(cls, preset: Preset, **kwargs):
        """
        Create EncryptionParameters from a preset.
        Args:
            preset (Preset): The preset to use.
            **kwargs: Field overrides applied on top of the preset values.
        Returns:
            EncryptionParameters: The parameter set with the default coefficient
            modulus for the preset degree and security level.
        """
        # Deferred, coeff_modulus imports this module.
        from hectx.coeff_modulus import CoeffModulus

        preset_config = dict(_PRESET_CONFIGS[Preset(preset)])
        sec_level = kwargs.pop("sec_level", preset_config.pop("sec_level"))
        preset_config.update(kwargs)
        if "coeff_modulus" not in preset_config:
            preset_config["coeff_modulus"] = CoeffModulus.bfv_default(
                preset_config["poly_modulus_degree"], sec_level
            )
        return cls(**preset_config)

    def __post_init__(self):
        try:
            scheme = SchemeType(self.scheme)
        except ValueError:
            raise errors.InvalidScheme(reason=ErrorType.invalid_scheme)
        object.__setattr__(self, "scheme", scheme)
        if isinstance(self.poly_modulus_degree, np.integer):
            object.__setattr__(
                self, "poly_modulus_degree", int(self.poly_modulus_degree)
            )
        object.__setattr__(
            self,
            "coeff_modulus",
            tuple(_as_modulus(q) for q in self.coeff_modulus),
        )
        if self.plain_modulus is not None:
            if not self.scheme.uses_plain_modulus:
                logger.warning(
                    f"plain_modulus={self.plain_modulus} is ignored by scheme {self.scheme.name}."
                )
            object.__setattr__(
                self, "plain_modulus", _as_modulus(self.plain_modulus)
            )

    @cached_property
    def parms_id(self) -> ParmsId:
        """
        SHA3-256 over a canonical encoding of the fields that define the
        parameter set. Equal fields give equal ids across processes.
        """
        words = [
            self.scheme.value,
            self.poly_modulus_degree,
            len(self.coeff_modulus),
            *(q.value for q in self.coeff_modulus),
        ]
        if self.scheme.uses_plain_modulus and self.plain_modulus is not None:
            words.append(self.plain_modulus.value)
        data = b",".join(str(int(w)).encode("ascii") for w in words)
        return hashlib.sha3_256(data).digest()

    @property
    def plain_modulus_value(self) -> int:
        return 0 if self.plain_modulus is None else self.plain_modulus.value

    def with_coeff_modulus(self, coeff_modulus: Sequence) -> "EncryptionParameters":
        return dataclasses.replace(self, coeff_modulus=tuple(coeff_modulus))

    def with_plain_modulus(self, plain_modulus) -> "EncryptionParameters":
        return dataclasses.replace(self, plain_modulus=plain_modulus)

    def with_poly_modulus_degree(self, poly_modulus_degree: int) -> "EncryptionParameters":
        return dataclasses.replace(self, poly_modulus_degree=poly_modulus_degree)

    def without_smallest_prime(self) -> "EncryptionParameters":
        """Copy with the smallest coefficient modulus prime removed, order kept."""
        if not self.coeff_modulus:
            return self
        smallest = min(self.coeff_modulus)
        index = self.coeff_modulus.index(smallest)
        return self.with_coeff_modulus(
            self.coeff_modulus[:index] + self.coeff_modulus[index + 1 :]
        )

    def __repr__(self):
        return (
            f"EncryptionParameters(scheme={self.scheme.name}, "
            f"poly_modulus_degree={self.poly_modulus_degree}, "
            f"coeff_modulus={[q.value for q in self.coeff_modulus]}, "
            f"plain_modulus={self.plain_modulus_value or None})"
        )
