from .context import Context
from .context_data import ContextData
from .qualifiers import EncryptionParameterQualifiers, evaluate
