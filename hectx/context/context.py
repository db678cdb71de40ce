import textwrap
from typing import Iterator

from loguru import logger

from hectx import errors
from hectx.context import qualifiers as _qualifiers
from hectx.context.context_data import ContextData
from hectx.encryption_parameters import EncryptionParameters, ParmsId
from hectx.typing import ErrorType, SecurityLevel


class Context:
    """
    Validated encryption parameters and their modulus-switching chain.

    The chain starts at the key level (all coefficient primes, used for key
    generation). With key switching, the first data level drops the smallest
    prime; `expand_mod_chain` keeps dropping the smallest prime one level at a
    time until a single prime is left or a reduced level fails validation.

    A Context is either valid or not and never changes afterwards. Queries on
    an invalid Context raise `errors.ContextNotSet`; `Context.create` raises
    the construction error directly.

    Example:
        >>> parms = EncryptionParameters.from_preset(Preset.bfv_8192)
        >>> context = Context.create(parms, expand_mod_chain=True)
        >>> [len(cd.parms.coeff_modulus) for cd in context]
        [5, 4, 3, 2, 1]
    """

    def __init__(
        self,
        parms: EncryptionParameters,
        expand_mod_chain: bool = True,
        sec_level: SecurityLevel = SecurityLevel.tc128,
    ):
        self._sec_level = SecurityLevel(sec_level)
        self._expand_mod_chain = expand_mod_chain
        self._chain: list[ContextData] = []
        self._by_parms_id: dict[ParmsId, ContextData] = {}
        self._error: errors.HectxError | None = None
        self._parameter_error = ErrorType.success
        self._first_index = 0

        key_qualifiers = _qualifiers.evaluate(parms)
        if not key_qualifiers.parameters_set:
            self._fail(
                key_qualifiers.parameter_error,
                errors.InvalidParameters.from_error_type(
                    key_qualifiers.parameter_error
                ),
            )
            return

        if (
            self._sec_level != SecurityLevel.none
            and key_qualifiers.sec_level < self._sec_level
        ):
            self._fail(
                ErrorType.security_level_too_low,
                errors.SecurityLevelTooLow(
                    requested=self._sec_level.name,
                    actual=key_qualifiers.sec_level.name,
                ),
            )
            return

        self._append(parms, key_qualifiers)
        if key_qualifiers.using_keyswitching:
            self._build_chain(parms)
            self._first_index = 1 if len(self._chain) > 1 else 0

        logger.info(
            f"Context built: scheme={parms.scheme.name}, N={parms.poly_modulus_degree}, "
            f"levels={len(self._chain)}, sec_level={key_qualifiers.sec_level.name}."
        )

    @classmethod
    def create(
        cls,
        parms: EncryptionParameters,
        expand_mod_chain: bool = True,
        sec_level: SecurityLevel = SecurityLevel.tc128,
    ) -> "Context":
        """Build a Context and raise the construction error if it is not valid."""
        context = cls(parms, expand_mod_chain=expand_mod_chain, sec_level=sec_level)
        context.raise_for_status()
        return context

    # ------------------------------------------------------------------
    # Chain construction.
    # ------------------------------------------------------------------

    def _fail(self, reason: ErrorType, error: errors.HectxError):
        logger.warning(f"Encryption parameters rejected: {error}")
        self._parameter_error = reason
        self._error = error

    def _append(self, parms, qualifiers) -> ContextData:
        context_data = ContextData(
            parms, qualifiers, chain=self._chain, chain_index=len(self._chain)
        )
        self._chain.append(context_data)
        self._by_parms_id[context_data.parms_id] = context_data
        return context_data

    def _build_chain(self, key_parms: EncryptionParameters):
        parms = key_parms
        while len(parms.coeff_modulus) > 1:
            next_parms = parms.without_smallest_prime()
            next_qualifiers = _qualifiers.evaluate(next_parms)
            if not next_qualifiers.parameters_set:
                logger.debug(
                    f"Chain stops at level {len(self._chain) - 1}: "
                    f"reduced parameters invalid ({next_qualifiers.parameter_error_name})."
                )
                break
            context_data = self._append(next_parms, next_qualifiers)
            logger.debug(
                f"Derived level {context_data.chain_index} with "
                f"{len(next_parms.coeff_modulus)} coeff prime(s)."
            )
            parms = next_parms

            # Without expansion the chain ends at the first data level.
            if not self._expand_mod_chain:
                break

    # ------------------------------------------------------------------
    # Queries.
    # ------------------------------------------------------------------

    def parameters_set(self) -> bool:
        return self._error is None

    def raise_for_status(self):
        if self._error is not None:
            raise self._error

    def _require_set(self):
        if self._error is not None:
            raise errors.ContextNotSet(reason=self._parameter_error.name)

    @property
    def parameter_error(self) -> ErrorType:
        return self._parameter_error

    @property
    def parameter_error_name(self) -> str:
        return self._parameter_error.name

    @property
    def parameter_error_message(self) -> str:
        return self._parameter_error.value

    @property
    def sec_level(self) -> SecurityLevel:
        """The minimum security level requested at construction."""
        return self._sec_level

    @property
    def using_keyswitching(self) -> bool:
        self._require_set()
        return self._chain[0].qualifiers.using_keyswitching

    @property
    def key_context_data(self) -> ContextData:
        self._require_set()
        return self._chain[0]

    @property
    def first_context_data(self) -> ContextData:
        self._require_set()
        return self._chain[self._first_index]

    @property
    def last_context_data(self) -> ContextData:
        self._require_set()
        return self._chain[-1]

    @property
    def key_parms_id(self) -> ParmsId:
        return self.key_context_data.parms_id

    @property
    def first_parms_id(self) -> ParmsId:
        return self.first_context_data.parms_id

    @property
    def last_parms_id(self) -> ParmsId:
        return self.last_context_data.parms_id

    def get_context_data(self, parms_id: ParmsId) -> ContextData:
        self._require_set()
        try:
            return self._by_parms_id[parms_id]
        except KeyError:
            shown = parms_id.hex() if isinstance(parms_id, bytes) else parms_id
            raise errors.UnknownParmsId(parms_id=shown)

    def __contains__(self, parms_id) -> bool:
        return self._error is None and parms_id in self._by_parms_id

    def __iter__(self) -> Iterator[ContextData]:
        """Levels from the key level down to the last level."""
        self._require_set()
        return iter(tuple(self._chain))

    def __len__(self):
        self._require_set()
        return len(self._chain)

    def __bool__(self):
        return self._error is None

    def to_human(self) -> str:
        if self._error is not None:
            return f"Context (invalid): {self._parameter_error.name}: {self._parameter_error.value}"

        key = self._chain[0]
        parms = key.parms
        lines = [
            f"scheme: {parms.scheme.name.upper()}",
            f"poly_modulus_degree: {parms.poly_modulus_degree}",
            f"coeff_modulus size: {key.total_coeff_modulus_bit_count} "
            f"({' + '.join(str(q.bit_count) for q in parms.coeff_modulus)}) bits",
        ]
        if parms.scheme.uses_plain_modulus:
            lines.append(f"plain_modulus: {parms.plain_modulus.value}")
        lines.append(f"sec_level: {key.qualifiers.sec_level.name}")
        lines.append(f"levels: {len(self._chain)}")
        for context_data in self._chain:
            marks = []
            if context_data is self._chain[0]:
                marks.append("key")
            if context_data is self._chain[self._first_index]:
                marks.append("first")
            if context_data.is_last:
                marks.append("last")
            lines.append(
                f"  [{context_data.chain_index}] {context_data.parms_id.hex()[:16]} "
                f"primes={len(context_data.parms.coeff_modulus)} {','.join(marks)}"
            )
        return "/\n" + textwrap.indent("\n".join(lines), "| ") + "\n\\"

    def __repr__(self):
        if self._error is not None:
            return f"Context(parameters_set=False, error={self._parameter_error.name})"
        return (
            f"Context(parameters_set=True, levels={len(self._chain)}, "
            f"using_keyswitching={self.using_keyswitching}, sec_level={self._sec_level.name})"
        )
