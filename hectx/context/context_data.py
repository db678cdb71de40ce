import math
from functools import cached_property
from typing import Optional

import numpy as np

from hectx.context.qualifiers import EncryptionParameterQualifiers
from hectx.encryption_parameters import EncryptionParameters, ParmsId
from hectx.typing import SchemeType


class ContextData:
    """
    One level of the modulus-switching chain.

    Nodes live in the chain list owned by their Context and refer to their
    neighbours by index into it. They are created by the Context only and
    expose no mutators.
    """

    def __init__(
        self,
        parms: EncryptionParameters,
        qualifiers: EncryptionParameterQualifiers,
        chain: list["ContextData"],
        chain_index: int,
    ):
        self._parms = parms
        self._qualifiers = qualifiers
        self._chain = chain
        self._chain_index = chain_index

    @property
    def parms(self) -> EncryptionParameters:
        return self._parms

    @property
    def parms_id(self) -> ParmsId:
        return self._parms.parms_id

    @property
    def qualifiers(self) -> EncryptionParameterQualifiers:
        return self._qualifiers

    @property
    def chain_index(self) -> int:
        """Position in the chain, 0 being the key level."""
        return self._chain_index

    @property
    def prev_context_data(self) -> Optional["ContextData"]:
        """The level this one was derived from, None at the key level."""
        if self._chain_index == 0:
            return None
        return self._chain[self._chain_index - 1]

    @property
    def next_context_data(self) -> Optional["ContextData"]:
        if self.is_last:
            return None
        return self._chain[self._chain_index + 1]

    @property
    def is_last(self) -> bool:
        return self._chain_index == len(self._chain) - 1

    # ------------------------------------------------------------------
    # Values derived for downstream consumers.
    # ------------------------------------------------------------------

    @cached_property
    def total_coeff_modulus(self) -> int:
        return math.prod(q.value for q in self._parms.coeff_modulus)

    @property
    def total_coeff_modulus_bit_count(self) -> int:
        return self.total_coeff_modulus.bit_length()

    @cached_property
    def coeff_modulus_array(self) -> np.ndarray:
        arr = np.array(
            [q.value for q in self._parms.coeff_modulus], dtype=np.uint64
        )
        arr.flags.writeable = False
        return arr

    @property
    def coeff_div_plain_modulus(self) -> int | None:
        if not self._parms.scheme.uses_plain_modulus:
            return None
        return self.total_coeff_modulus // self._parms.plain_modulus.value

    @property
    def upper_half_increment(self) -> int | None:
        if not self._parms.scheme.uses_plain_modulus:
            return None
        return self.total_coeff_modulus % self._parms.plain_modulus.value

    @property
    def plain_upper_half_threshold(self) -> int | None:
        if not self._parms.scheme.uses_plain_modulus:
            return None
        return (self._parms.plain_modulus.value + 1) // 2

    @property
    def upper_half_threshold(self) -> int | None:
        # CKKS decodes coefficients above this as negative.
        if self._parms.scheme != SchemeType.ckks:
            return None
        return (self.total_coeff_modulus + 1) // 2

    @property
    def slot_count(self) -> int:
        N = self._parms.poly_modulus_degree
        if self._parms.scheme == SchemeType.ckks:
            return N // 2 if self._qualifiers.using_ntt else 0
        return N if self._qualifiers.using_batching else 0

    def __repr__(self):
        return (
            f"ContextData(chain_index={self._chain_index}, "
            f"parms_id={self.parms_id.hex()[:16]}, "
            f"coeff_modulus_size={len(self._parms.coeff_modulus)}, "
            f"is_last={self.is_last})"
        )
