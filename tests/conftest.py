import pytest

from hectx import (
    CoeffModulus,
    Context,
    EncryptionParameters,
    SchemeType,
    SecurityLevel,
)

PLAIN_MODULUS = 786433


@pytest.fixture()
def bfv_parms(request):
    """
        BFV parameters with the default tc128 coeff_modulus
    @param request.param: poly_modulus_degree, 4096 when not parametrized
    @return: EncryptionParameters
    """
    N = getattr(request, "param", 4096)
    return EncryptionParameters(
        SchemeType.bfv,
        poly_modulus_degree=N,
        coeff_modulus=CoeffModulus.bfv_default(N, SecurityLevel.tc128),
        plain_modulus=PLAIN_MODULUS,
    )


@pytest.fixture()
def bfv_context_8192():
    parms = EncryptionParameters(
        SchemeType.bfv,
        poly_modulus_degree=8192,
        coeff_modulus=CoeffModulus.bfv_default(8192, SecurityLevel.tc128),
        plain_modulus=PLAIN_MODULUS,
    )
    return Context.create(parms, expand_mod_chain=True, sec_level=SecurityLevel.tc128)
