import pytest

from hectx import (
    CoeffModulus,
    Context,
    ContextData,
    EncryptionParameterQualifiers,
    EncryptionParameters,
    ErrorType,
    Preset,
    SchemeType,
    SecurityLevel,
    errors,
)
from hectx.context import qualifiers

PLAIN_MODULUS = 786433


def test_4096_single_level(bfv_parms):
    context = Context.create(bfv_parms, expand_mod_chain=True, sec_level=SecurityLevel.tc128)
    assert context.parameters_set()
    assert not context.using_keyswitching
    assert len(context) == 1
    assert context.first_context_data is context.key_context_data
    assert context.last_context_data is context.key_context_data
    assert context.first_parms_id == context.key_parms_id == context.last_parms_id
    key = context.key_context_data
    assert key.chain_index == 0
    assert key.is_last
    assert key.prev_context_data is None
    assert key.next_context_data is None
    assert key.parms is bfv_parms


def test_8192_chain(bfv_context_8192):
    context = bfv_context_8192
    assert context.using_keyswitching
    chain = list(context)
    assert len(chain) == 5
    assert [len(cd.parms.coeff_modulus) for cd in chain] == [5, 4, 3, 2, 1]
    assert context.first_context_data is chain[1]
    assert context.last_context_data is chain[-1]
    assert context.first_context_data is not context.key_context_data

    for index, (parent, child) in enumerate(zip(chain, chain[1:])):
        assert parent.chain_index == index
        assert child.chain_index == index + 1
        assert parent.next_context_data is child
        assert child.prev_context_data is parent
        assert not parent.is_last
        # Each level drops the smallest prime of its parent.
        assert child.parms == parent.parms.without_smallest_prime()
        assert min(parent.parms.coeff_modulus) not in child.parms.coeff_modulus
        assert child.qualifiers.parameters_set

    assert chain[-1].is_last
    assert chain[-1].next_context_data is None
    assert not chain[-1].qualifiers.using_keyswitching


def test_get_context_data(bfv_context_8192):
    context = bfv_context_8192
    for context_data in context:
        assert context.get_context_data(context_data.parms_id) is context_data
        assert context_data.parms_id in context
    with pytest.raises(errors.UnknownParmsId):
        context.get_context_data(bytes(32))


def test_chain_without_expansion():
    parms = EncryptionParameters.from_preset(Preset.bfv_8192)
    context = Context.create(parms, expand_mod_chain=False)
    assert context.using_keyswitching
    assert len(context) == 2
    assert context.first_context_data is context.last_context_data
    assert context.first_context_data.chain_index == 1
    assert len(context.last_context_data.parms.coeff_modulus) == 4


@pytest.mark.parametrize("bfv_parms", [4096, 8192, 16384, 32768], indirect=True)
def test_first_is_key_iff_no_keyswitching(bfv_parms):
    context = Context.create(bfv_parms)
    assert (
        context.first_context_data is context.key_context_data
    ) is not context.using_keyswitching
    counts = [len(cd.parms.coeff_modulus) for cd in context]
    assert counts == list(range(counts[0], 0, -1))


def test_security_level_too_low(bfv_context_8192):
    parms = bfv_context_8192.key_context_data.parms
    with pytest.raises(errors.SecurityLevelTooLow):
        Context.create(parms, sec_level=SecurityLevel.tc256)

    context = Context(parms, sec_level=SecurityLevel.tc192)
    assert not context.parameters_set()
    assert context.parameter_error == ErrorType.security_level_too_low
    with pytest.raises(errors.ContextNotSet):
        context.first_context_data


def test_security_level_none_disables_check(bfv_context_8192):
    parms = bfv_context_8192.key_context_data.parms
    context = Context.create(parms, sec_level=SecurityLevel.none)
    assert context.sec_level == SecurityLevel.none
    assert context.key_context_data.qualifiers.sec_level == SecurityLevel.tc128


def test_higher_level_accepted():
    parms = EncryptionParameters.from_preset(Preset.bfv_8192, sec_level=SecurityLevel.tc256)
    context = Context.create(parms, sec_level=SecurityLevel.tc256)
    assert context.key_context_data.qualifiers.sec_level == SecurityLevel.tc256


def test_invalid_context_rejects_queries(bfv_parms):
    parms = bfv_parms.with_plain_modulus(2**61 - 1)
    context = Context(parms)
    assert not context.parameters_set()
    assert context.parameter_error == ErrorType.plain_modulus_too_large
    assert context.parameter_error_name == "plain_modulus_too_large"
    for query in [
        "key_context_data",
        "first_context_data",
        "last_context_data",
        "key_parms_id",
        "using_keyswitching",
    ]:
        with pytest.raises(errors.ContextNotSet):
            getattr(context, query)
    with pytest.raises(errors.ContextNotSet):
        context.get_context_data(parms.parms_id)
    with pytest.raises(errors.ContextNotSet):
        list(context)
    assert parms.parms_id not in context
    assert "invalid" in context.to_human()


def test_create_raises_specific_error(bfv_parms):
    with pytest.raises(errors.PlainModulusTooLarge) as excinfo:
        Context.create(bfv_parms.with_plain_modulus(2**61 - 1))
    assert isinstance(excinfo.value, errors.InvalidParameters)
    assert excinfo.value.reason == ErrorType.plain_modulus_too_large

    with pytest.raises(errors.InvalidDegree):
        Context.create(bfv_parms.with_poly_modulus_degree(3000))

    with pytest.raises(errors.InvalidParameters) as excinfo:
        Context.create(bfv_parms.with_plain_modulus(None))
    assert excinfo.value.reason == ErrorType.plain_modulus_missing


def test_chain_stops_when_reduced_level_fails(monkeypatch):
    parms = EncryptionParameters.from_preset(Preset.bfv_8192)
    evaluate = qualifiers.evaluate

    def failing_below_three_primes(p):
        if len(p.coeff_modulus) < 3:
            return EncryptionParameterQualifiers(parameter_error=ErrorType.modulus_too_large)
        return evaluate(p)

    monkeypatch.setattr(qualifiers, "evaluate", failing_below_three_primes)
    context = Context.create(parms)
    counts = [len(cd.parms.coeff_modulus) for cd in context]
    assert counts == [5, 4, 3]
    assert context.last_context_data.is_last
    assert context.last_context_data.next_context_data is None


def test_degenerate_two_prime_chain():
    # 12289 is NTT-friendly for N=1024, the Mersenne prime 8191 is not.
    parms = EncryptionParameters(
        SchemeType.bfv,
        poly_modulus_degree=1024,
        coeff_modulus=[12289, 8191],
        plain_modulus=257,
    )
    context = Context.create(parms)
    key, last = list(context)
    assert not key.qualifiers.using_ntt
    assert key.qualifiers.using_keyswitching
    assert [q.value for q in last.parms.coeff_modulus] == [12289]
    assert last.qualifiers.using_ntt
    assert context.first_context_data is last


def test_degree_without_default_primes():
    with pytest.raises(errors.ModulusSearchExhausted):
        CoeffModulus.create(1024, [13, 14])


def test_ckks_context():
    parms = EncryptionParameters.from_preset(Preset.ckks_8192)
    context = Context.create(parms)
    first = context.first_context_data
    assert first.slot_count == 4096
    assert first.coeff_div_plain_modulus is None
    assert first.upper_half_threshold == (first.total_coeff_modulus + 1) // 2


def test_context_data_derived_values(bfv_context_8192):
    key = bfv_context_8192.key_context_data
    assert isinstance(key, ContextData)
    values = [q.value for q in key.parms.coeff_modulus]
    product = 1
    for v in values:
        product *= v
    assert key.total_coeff_modulus == product
    assert key.total_coeff_modulus_bit_count == product.bit_length()
    assert key.coeff_modulus_array.dtype.name == "uint64"
    assert key.coeff_modulus_array.tolist() == values
    assert key.coeff_div_plain_modulus == product // PLAIN_MODULUS
    assert key.upper_half_increment == product % PLAIN_MODULUS
    assert key.plain_upper_half_threshold == (PLAIN_MODULUS + 1) // 2
    assert key.slot_count == 8192
    assert key.upper_half_threshold is None


def test_to_human(bfv_context_8192):
    text = bfv_context_8192.to_human()
    assert "scheme: BFV" in text
    assert "poly_modulus_degree: 8192" in text
    assert "levels: 5" in text
    assert "key" in text and "first" in text and "last" in text
