from .presets import Preset
from .security_parameters import estimate_security_level, maximum_qbits
