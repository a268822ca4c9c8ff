"""
params.py - Hardness parameter sets, one per algorithm family.

Responsibilities:
- Hold the cost parameters of Argon2, Scrypt and Bcrypt
- Hash a password into storable text and check a password against it
- Derive raw keys (Argon2 and Scrypt only)

Primitives come from argon2-cffi, cryptography (Scrypt) and bcrypt. Parameter
sets are frozen: a Profile that needs a different secret gets a new set, so the
preset table and caller-owned sets are never modified behind anyone's back.

Keyed mode: when a secret is attached, HMAC-SHA256(secret, password) is fed to
the primitive instead of the raw password.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Sequence

import bcrypt
from argon2.exceptions import HashingError
from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import constant_time, hashes, hmac
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from . import codec
from .errors import AlgorithmError, MismatchError

log = logging.getLogger(__name__)

SALT_LEN = 16
KEY_LEN = 32  # 256-bit digests and derived keys

_ARGON2_IDS = {Type.ID: codec.ID_ARGON2ID, Type.I: codec.ID_ARGON2I}
_ARGON2_TYPES = {v: k for k, v in _ARGON2_IDS.items()}


def new_salt() -> bytes:
    """Fresh random salt for one hash."""
    return os.urandom(SALT_LEN)


def keyed_password(password: bytes, secret: Optional[bytes]) -> bytes:
    if not secret:
        return password
    mac = hmac.HMAC(secret, hashes.SHA256())
    mac.update(password)
    return mac.finalize()


class _Stretched:
    """
    Shared behaviour of the salted key-stretching families (Argon2, Scrypt).

    Subclasses provide alg_id, costs() and _stretch(); the dataclass fields
    salt, secret, masked and key_len come from the subclass too.
    """

    salt: Optional[bytes]
    secret: Optional[bytes]
    masked: bool
    key_len: int

    @property
    def alg_id(self) -> str:
        raise NotImplementedError

    def costs(self) -> List[int]:
        raise NotImplementedError

    def _stretch(self, password: bytes, salt: bytes) -> bytes:
        raise NotImplementedError

    def derive(self, password: bytes, salt: bytes) -> bytes:
        return self._stretch(keyed_password(password, self.secret), salt)

    def hash(self, password: bytes) -> str:
        salt = self.salt if self.salt is not None else new_salt()
        digest = self.derive(password, salt)
        return codec.encode(self.alg_id, salt, None if self.masked else self.costs(), digest)

    def verify(self, fields: Sequence[str], password: bytes) -> None:
        """
        Check password against split hash text using these parameters.

        Layout problems raise CodecError, a wrong password raises MismatchError.
        The digest is always recomputed with this parameter set; cost fields of
        public text must agree with it.
        """
        if fields[0] != self.alg_id:
            raise codec.CodecError("algorithm id does not match parameters")
        if self.masked:
            salt, digest = codec.decode_masked(fields)
        else:
            salt, costs, digest = codec.decode_public(fields)
            if costs != self.costs():
                raise codec.CodecError("embedded parameters differ")
        if len(digest) != self.key_len:
            raise codec.CodecError("digest length does not match key length")

        try:
            computed = self.derive(password, salt)
        except AlgorithmError as exc:
            log.debug("verify: recomputing digest failed: %s", exc)
            raise MismatchError() from None

        if not constant_time.bytes_eq(computed, digest):
            raise MismatchError()


@dataclass(frozen=True)
class Argon2Params(_Stretched):
    time_cost: int
    memory_cost: int  # KiB
    parallelism: int
    key_len: int = KEY_LEN
    salt: Optional[bytes] = None
    secret: Optional[bytes] = field(default=None, repr=False)
    masked: bool = False
    type: Type = Type.ID

    @property
    def alg_id(self) -> str:
        try:
            return _ARGON2_IDS[self.type]
        except KeyError:
            raise AlgorithmError(f"{self.type.name} has no encoded form") from None

    def costs(self) -> List[int]:
        return [self.time_cost, self.memory_cost, self.parallelism, self.key_len]

    def _stretch(self, password: bytes, salt: bytes) -> bytes:
        try:
            return hash_secret_raw(
                secret=password,
                salt=salt,
                time_cost=self.time_cost,
                memory_cost=self.memory_cost,
                parallelism=self.parallelism,
                hash_len=self.key_len,
                type=self.type,
                version=ARGON2_VERSION,
            )
        except (HashingError, OverflowError) as exc:
            raise AlgorithmError(f"argon2: {exc}") from exc

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Argon2Params":
        """Rebuild parameters from public argon2 text."""
        try:
            argon_type = _ARGON2_TYPES[fields[0]]
        except KeyError:
            raise codec.CodecError("not an argon2 id") from None
        _, (time_cost, memory_cost, parallelism, key_len), digest = codec.decode_public(fields)
        if len(digest) != key_len:
            raise codec.CodecError("digest length does not match key length")
        return cls(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            key_len=key_len,
            type=argon_type,
        )


@dataclass(frozen=True)
class ScryptParams(_Stretched):
    n: int
    r: int
    p: int
    key_len: int = KEY_LEN
    salt: Optional[bytes] = None
    secret: Optional[bytes] = field(default=None, repr=False)
    masked: bool = False

    alg_id: ClassVar[str] = codec.ID_SCRYPT

    def costs(self) -> List[int]:
        return [self.n, self.r, self.p, self.key_len]

    def _stretch(self, password: bytes, salt: bytes) -> bytes:
        try:
            kdf = Scrypt(salt=salt, length=self.key_len, n=self.n, r=self.r, p=self.p)
            return kdf.derive(password)
        except (ValueError, OverflowError, UnsupportedAlgorithm, MemoryError) as exc:
            raise AlgorithmError(f"scrypt: {exc}") from exc

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "ScryptParams":
        """Rebuild parameters from public scrypt text."""
        if fields[0] != codec.ID_SCRYPT:
            raise codec.CodecError("not a scrypt id")
        _, (n, r, p, key_len), digest = codec.decode_public(fields)
        if len(digest) != key_len:
            raise codec.CodecError("digest length does not match key length")
        return cls(n=n, r=r, p=p, key_len=key_len)


@dataclass(frozen=True)
class BcryptParams:
    """Bcrypt keeps salt and cost inside its own text; only the cost is tracked."""

    cost: int = 12

    def hash(self, password: bytes) -> str:
        try:
            return bcrypt.hashpw(password, bcrypt.gensalt(rounds=self.cost)).decode("ascii")
        except (ValueError, TypeError) as exc:
            raise AlgorithmError(f"bcrypt: {exc}") from exc

    def verify(self, fields: Sequence[str], password: bytes) -> None:
        if fields[0] not in codec.BCRYPT_IDS:
            raise codec.CodecError("not a bcrypt id")
        try:
            ok = bcrypt.checkpw(password, codec.join(fields).encode("ascii"))
        except ValueError as exc:
            log.debug("verify: bcrypt refused the input: %s", exc)
            ok = False
        if not ok:
            raise MismatchError()

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "BcryptParams":
        # $2b$12$<22 salt chars><31 digest chars>
        if fields[0] not in codec.BCRYPT_IDS or len(fields) != 3:
            raise codec.CodecError("not bcrypt text")
        return cls(cost=codec.decode_int(fields[1]))
