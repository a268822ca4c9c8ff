"""
profile.py - Hashing profiles and the verification entry points.

Responsibilities:
- Name the built-in hardness presets (HashProfile) and keep them read-only
- Build Profiles from presets, masked presets or caller parameters
- Route hash / derive / compare calls to the right parameter set
- Verify self-describing (public) hashes without a Profile

Every verification failure, including unreadable stored text, surfaces as
MismatchError with no detail. Details go to the DEBUG log only.

A Profile is cheap to build. Share one between threads only if nobody calls
set_secret on it meanwhile; hash, derive and compare keep no per-call state.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from types import MappingProxyType
from typing import Mapping, Union, assert_never

from argon2.low_level import Type

from . import codec
from .errors import AlgorithmError, MismatchError, UnsupportedError
from .params import Argon2Params, BcryptParams, ScryptParams

log = logging.getLogger(__name__)

ParamSet = Union[Argon2Params, ScryptParams, BcryptParams]
Password = Union[str, bytes]


class HashProfile(enum.Enum):
    ARGON2ID_DEFAULT = 0
    ARGON2ID_PARANOID = 1
    SCRYPT_DEFAULT = 2
    SCRYPT_PARANOID = 3
    BCRYPT_DEFAULT = 4
    BCRYPT_PARANOID = 5
    ARGON2_CUSTOM = 6
    SCRYPT_CUSTOM = 7
    BCRYPT_CUSTOM = 8

    @property
    def is_custom(self) -> bool:
        return self in (HashProfile.ARGON2_CUSTOM, HashProfile.SCRYPT_CUSTOM, HashProfile.BCRYPT_CUSTOM)


# memory_cost is in KiB
PRESETS: Mapping[HashProfile, ParamSet] = MappingProxyType(
    {
        HashProfile.ARGON2ID_DEFAULT: Argon2Params(
            time_cost=2, memory_cost=102400, parallelism=8, type=Type.ID
        ),
        HashProfile.ARGON2ID_PARANOID: Argon2Params(
            time_cost=3, memory_cost=262144, parallelism=8, type=Type.ID
        ),
        HashProfile.SCRYPT_DEFAULT: ScryptParams(n=2**14, r=8, p=1),
        HashProfile.SCRYPT_PARANOID: ScryptParams(n=2**17, r=8, p=1),
        HashProfile.BCRYPT_DEFAULT: BcryptParams(cost=12),
        HashProfile.BCRYPT_PARANOID: BcryptParams(cost=14),
    }
)

MASKABLE = frozenset(
    {
        HashProfile.ARGON2ID_DEFAULT,
        HashProfile.ARGON2ID_PARANOID,
        HashProfile.SCRYPT_DEFAULT,
        HashProfile.SCRYPT_PARANOID,
    }
)

# algorithm id -> family able to rebuild itself from public text
_FAMILIES = {
    codec.ID_ARGON2ID: Argon2Params,
    codec.ID_ARGON2I: Argon2Params,
    codec.ID_SCRYPT: ScryptParams,
    **{i: BcryptParams for i in codec.BCRYPT_IDS},
}


def _to_bytes(password: Password) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    return bytes(password)


class Profile:
    """
    A hashing profile: an algorithm family, its hardness parameters and,
    for Argon2/Scrypt, an optional secret and the masked flag.

    Build one with new(), new_masked() or new_custom().
    """

    def __init__(self, kind: HashProfile, params: ParamSet) -> None:
        self._kind = kind
        self._params = params

    def __repr__(self) -> str:
        return f"Profile(kind={self._kind.name}, params={self._params!r})"

    @property
    def kind(self) -> HashProfile:
        return self._kind

    @property
    def params(self) -> ParamSet:
        return self._params

    @property
    def masked(self) -> bool:
        return not isinstance(self._params, BcryptParams) and self._params.masked

    def set_secret(self, secret: bytes) -> None:
        """Key all following hash/derive/compare calls with secret (a pepper)."""
        params = self._params
        if isinstance(params, BcryptParams):
            raise UnsupportedError("bcrypt does not support a secret")
        elif isinstance(params, (Argon2Params, ScryptParams)):
            self._params = dataclasses.replace(params, secret=bytes(secret))
        else:
            assert_never(params)

    def derive(self, password: Password, salt: bytes) -> bytes:
        """
        Derive a symmetric key (e.g. for AEAD) from password and salt.

        Same password, salt and parameters always give the same key.
        """
        params = self._params
        if isinstance(params, BcryptParams):
            raise UnsupportedError("bcrypt cannot derive keys")
        elif isinstance(params, (Argon2Params, ScryptParams)):
            return params.derive(_to_bytes(password), bytes(salt))
        else:
            assert_never(params)

    def hash(self, password: Password) -> str:
        """Return storable hash text for password."""
        params = self._params
        if isinstance(params, (BcryptParams, Argon2Params, ScryptParams)):
            return params.hash(_to_bytes(password))
        else:
            assert_never(params)

    def compare(self, hashed: Union[str, bytes], password: Password) -> None:
        """
        Check password against hash text produced by this profile.

        This is the only way to check masked hashes, whose text carries no
        parameters. Raises MismatchError on any failure.
        """
        params = self._params
        try:
            fields = codec.split(hashed)
            if isinstance(params, (BcryptParams, Argon2Params, ScryptParams)):
                params.verify(fields, _to_bytes(password))
            else:
                assert_never(params)
        except (codec.CodecError, AlgorithmError) as exc:
            log.debug("profile compare: unusable hash text: %s", exc)
            raise MismatchError() from None


def new(profile: HashProfile) -> Profile:
    """Profile from a built-in preset."""
    if isinstance(profile, HashProfile) and profile.is_custom:
        raise UnsupportedError(f"custom profiles need new_custom(): {profile!r}")
    try:
        preset = PRESETS[profile]
    except (KeyError, TypeError):
        raise UnsupportedError(f"not a built-in profile: {profile!r}") from None
    return Profile(profile, dataclasses.replace(preset))


def new_masked(profile: HashProfile) -> Profile:
    """
    Profile from a built-in preset whose hashes omit the parameters.
    Only Argon2 and Scrypt presets can be masked.
    """
    try:
        maskable = profile in MASKABLE
    except TypeError:
        maskable = False
    if not maskable:
        raise UnsupportedError(f"profile cannot be masked: {profile!r}")
    return Profile(profile, dataclasses.replace(PRESETS[profile], masked=True))


def new_custom(params: ParamSet) -> Profile:
    """Profile from caller-chosen parameters, used as given."""
    if isinstance(params, Argon2Params):
        return Profile(HashProfile.ARGON2_CUSTOM, params)
    if isinstance(params, ScryptParams):
        return Profile(HashProfile.SCRYPT_CUSTOM, params)
    if isinstance(params, BcryptParams):
        return Profile(HashProfile.BCRYPT_CUSTOM, params)
    raise UnsupportedError(f"unsupported parameter set: {type(params).__name__}")


def compare(hashed: Union[str, bytes], password: Password) -> None:
    """
    Check password against public (non-masked, non-keyed) hash text.

    The text describes its own parameters. Raises MismatchError on any failure.
    """
    try:
        fields = codec.split(hashed)
        family = _FAMILIES.get(fields[0])
        if family is None:
            raise codec.CodecError("unknown algorithm id")
        params = family.from_fields(fields)
        params.verify(fields, _to_bytes(password))
    except (codec.CodecError, AlgorithmError) as exc:
        log.debug("compare: unusable hash text: %s", exc)
        raise MismatchError() from None
