import dataclasses

import pytest
from argon2.low_level import Type

from passwd import AlgorithmError, Argon2Params, BcryptParams, MismatchError, ScryptParams, codec
from passwd.params import KEY_LEN, SALT_LEN, keyed_password


def test_argon2_public_text(cheap_argon2):
    fields = codec.split(cheap_argon2.hash(b"pw"))

    assert fields[0] == codec.ID_ARGON2ID
    assert fields[2:6] == ["1", "8", "1", str(KEY_LEN)]
    assert len(codec.b64decode(fields[1])) == SALT_LEN
    assert len(codec.b64decode(fields[6])) == KEY_LEN


def test_argon2i_uses_its_own_id(cheap_argon2):
    params = dataclasses.replace(cheap_argon2, type=Type.I)
    fields = codec.split(params.hash(b"pw"))

    assert fields[0] == codec.ID_ARGON2I
    assert Argon2Params.from_fields(fields).type is Type.I


def test_argon2d_cannot_be_encoded_but_derives(cheap_argon2):
    params = dataclasses.replace(cheap_argon2, type=Type.D)

    with pytest.raises(AlgorithmError):
        params.hash(b"pw")
    assert len(params.derive(b"pw", b"saltsaltsalt")) == KEY_LEN


def test_scrypt_public_text(cheap_scrypt):
    fields = codec.split(cheap_scrypt.hash(b"pw"))

    assert fields[0] == codec.ID_SCRYPT
    assert fields[2:6] == ["16", "8", "1", str(KEY_LEN)]


def test_masked_text_has_no_costs(cheap_stretched):
    params = dataclasses.replace(cheap_stretched, masked=True)
    assert len(codec.split(params.hash(b"pw"))) == codec.MASKED_FIELD_COUNT


def test_fixed_salt_is_used(cheap_stretched):
    params = dataclasses.replace(cheap_stretched, salt=b"0123456789abcdef")

    first = params.hash(b"pw")
    assert first == params.hash(b"pw")
    assert codec.b64decode(codec.split(first)[1]) == b"0123456789abcdef"


def test_verify_recomputes_with_own_params(cheap_stretched):
    fields = codec.split(cheap_stretched.hash(b"pw"))

    cheap_stretched.verify(fields, b"pw")
    with pytest.raises(MismatchError):
        cheap_stretched.verify(fields, b"nope")


def test_verify_rejects_other_algorithm(cheap_argon2, cheap_scrypt):
    fields = codec.split(cheap_scrypt.hash(b"pw"))
    with pytest.raises(codec.CodecError):
        cheap_argon2.verify(fields, b"pw")


@pytest.mark.parametrize(
    "params",
    [
        ScryptParams(n=3, r=8, p=1),
        ScryptParams(n=1, r=8, p=1),
        ScryptParams(n=2**64, r=8, p=1),
        Argon2Params(time_cost=1, memory_cost=2**40, parallelism=1),
        Argon2Params(time_cost=0, memory_cost=8, parallelism=1),
        Argon2Params(time_cost=1, memory_cost=1, parallelism=1),
    ],
)
def test_bad_costs_raise_algorithm_error(params):
    with pytest.raises(AlgorithmError):
        params.hash(b"pw")


def test_short_argon2_salt_is_algorithm_error(cheap_argon2):
    with pytest.raises(AlgorithmError):
        cheap_argon2.derive(b"pw", b"abc")


def test_bcrypt_bad_cost():
    with pytest.raises(AlgorithmError):
        BcryptParams(cost=3).hash(b"pw")


def test_bcrypt_text_and_cost(cheap_bcrypt):
    text = cheap_bcrypt.hash(b"pw")
    fields = codec.split(text)

    assert text.startswith("$2b$04$")
    assert BcryptParams.from_fields(fields) == BcryptParams(cost=4)
    cheap_bcrypt.verify(fields, b"pw")
    with pytest.raises(MismatchError):
        cheap_bcrypt.verify(fields, b"nope")


def test_bcrypt_verify_garbage_is_mismatch(cheap_bcrypt):
    with pytest.raises(MismatchError):
        cheap_bcrypt.verify(["2b", "04", "tooshort"], b"pw")


def test_from_fields_round_trip():
    text = ScryptParams(n=2**5, r=4, p=2, key_len=24).hash(b"pw")
    assert ScryptParams.from_fields(codec.split(text)) == ScryptParams(n=2**5, r=4, p=2, key_len=24)


def test_from_fields_checks_digest_length(cheap_scrypt):
    fields = codec.split(cheap_scrypt.hash(b"pw"))
    fields[5] = "16"
    with pytest.raises(codec.CodecError):
        ScryptParams.from_fields(fields)


def test_keyed_password():
    assert keyed_password(b"pw", None) == b"pw"
    assert keyed_password(b"pw", b"") == b"pw"

    keyed = keyed_password(b"pw", b"pepper")
    assert len(keyed) == 32
    assert keyed == keyed_password(b"pw", b"pepper")
    assert keyed != keyed_password(b"pw", b"other")


def test_secret_stays_out_of_repr(cheap_scrypt):
    params = dataclasses.replace(cheap_scrypt, secret=b"pepper")
    assert "pepper" not in repr(params)


def test_params_are_frozen(cheap_argon2):
    with pytest.raises(dataclasses.FrozenInstanceError):
        cheap_argon2.salt = b"x" * 16
