from typing import Any

from hectx.typing import ErrorType


class HectxError(Exception):
    """
    Base class of every error raised by hectx.

    Subclasses define `template`, formatted with the keyword arguments given
    at raise time. The keyword arguments stay available in `details`.
    """

    template = "hectx error"

    def __init__(self, message: str | None = None, **details: Any):
        self.details = details
        if message is None:
            message = self.template.format(**details)
        self.message = message
        super().__init__(message)


class InvalidModulus(HectxError):
    template = "Invalid modulus {value!r}: {why}."


class UnsupportedParameters(HectxError):
    template = "No security table entry for poly_modulus_degree={N} at sec_level={sec_level}."


class ModulusSearchExhausted(HectxError):
    template = "Could not find {count} prime(s) of {bit_size} bits congruent to 1 mod {M}."


class InvalidParameters(HectxError):
    """Raised when a parameter set fails qualifier evaluation."""

    template = "Invalid encryption parameters: {reason}."

    def __init__(self, reason: ErrorType, message: str | None = None, **details: Any):
        self.reason = reason
        super().__init__(message, reason=reason.value, **details)

    @classmethod
    def from_error_type(cls, reason: ErrorType, **details: Any) -> "InvalidParameters":
        err_cls = _REASON_TO_ERROR.get(reason, cls)
        return err_cls(reason=reason, **details)


class InvalidScheme(InvalidParameters):
    pass


class InvalidDegree(InvalidParameters):
    pass


class ModulusTooLarge(InvalidParameters):
    pass


class PlainModulusTooLarge(InvalidParameters):
    pass


class SecurityLevelTooLow(HectxError):
    template = "Requested sec_level={requested} but the parameters only reach sec_level={actual}."


class UnknownParmsId(HectxError):
    template = "No context data for parms_id={parms_id}."


class ContextNotSet(HectxError):
    template = "Context is not set ({reason}); build a new Context from valid parameters."


_REASON_TO_ERROR = {
    ErrorType.invalid_scheme: InvalidScheme,
    ErrorType.invalid_degree: InvalidDegree,
    ErrorType.modulus_too_large: ModulusTooLarge,
    ErrorType.plain_modulus_too_large: PlainModulusTooLarge,
}
