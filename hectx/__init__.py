from importlib.metadata import version

from hectx.coeff_modulus import CoeffModulus, PlainModulus
from hectx.config import Preset
from hectx.context import (
    Context,
    ContextData,
    EncryptionParameterQualifiers,
    evaluate,
)
from hectx.encryption_parameters import EncryptionParameters, ParmsId
from hectx.modulus import Modulus
from hectx.typing import ErrorType, SchemeType, SecurityLevel

__version__ = version("hectx")

__all__ = [
    "CoeffModulus",
    "Context",
    "ContextData",
    "EncryptionParameterQualifiers",
    "EncryptionParameters",
    "ErrorType",
    "Modulus",
    "ParmsId",
    "PlainModulus",
    "Preset",
    "SchemeType",
    "SecurityLevel",
    "evaluate",
]
