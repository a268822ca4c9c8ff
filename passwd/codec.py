"""
codec.py - Dollar-delimited encoded hash text.

Responsibilities:
- Split stored hash text into fields and join fields back into text
- Base64 for binary fields (salt, digest), decimal for cost parameters
- Know the field layout of every algorithm id

Layouts (field 0 is always the algorithm id):
- scrypt  public: $1s$<salt>$<N>$<r>$<p>$<keylen>$<digest>
- argon2  public: $2s$<salt>$<time>$<memory>$<threads>$<keylen>$<digest>
  (argon2i uses id 2i)
- masked:         $<id>$<salt>$<digest>
- bcrypt:         bcrypt's own text ($2b$12$...), left as is

Stored hashes must stay readable forever, so nothing here may change shape.
"""

from __future__ import annotations

import base64
import binascii
from typing import List, Optional, Sequence, Tuple, Union

SEPARATOR = "$"

ID_SCRYPT = "1s"
ID_ARGON2I = "2i"
ID_ARGON2ID = "2s"
BCRYPT_IDS = frozenset({"2a", "2b", "2y"})

# id, salt, 4 costs, digest
PUBLIC_FIELD_COUNT = 7
# id, salt, digest
MASKED_FIELD_COUNT = 3
COST_FIELD_COUNT = PUBLIC_FIELD_COUNT - MASKED_FIELD_COUNT
# 2**64 has 20 digits; no cost field needs more
MAX_DECIMAL_DIGITS = 20


class CodecError(ValueError):
    """Stored hash text does not follow the expected layout."""


def b64encode(data: bytes) -> str:
    """Standard alphabet, no '=' padding."""
    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64decode(text: str) -> bytes:
    if not text or len(text) % 4 == 1:
        raise CodecError("invalid base64 length")
    try:
        return base64.b64decode(text + "=" * (-len(text) % 4), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CodecError("invalid base64 field") from exc


def decode_int(field: str) -> int:
    # int() would also take "+5", " 5" and "1_000"
    if not (field.isascii() and field.isdigit()) or len(field) > MAX_DECIMAL_DIGITS:
        raise CodecError("invalid decimal field")
    try:
        return int(field)
    except ValueError as exc:
        raise CodecError("invalid decimal field") from exc


def as_text(hashed: Union[str, bytes]) -> str:
    if isinstance(hashed, bytes):
        try:
            return hashed.decode("ascii")
        except UnicodeDecodeError as exc:
            raise CodecError("hash text is not ascii") from exc
    if not isinstance(hashed, str):
        raise CodecError("hash text must be str or bytes")
    return hashed


def split(hashed: Union[str, bytes]) -> List[str]:
    """Split hash text into its fields, dropping the leading separator."""
    text = as_text(hashed)
    if not text.startswith(SEPARATOR):
        raise CodecError("missing leading separator")
    fields = text[len(SEPARATOR):].split(SEPARATOR)
    if any(not f for f in fields):
        raise CodecError("empty field")
    return fields


def join(fields: Sequence[str]) -> str:
    return SEPARATOR + SEPARATOR.join(fields)


def encode(alg_id: str, salt: bytes, costs: Optional[Sequence[int]], digest: bytes) -> str:
    """
    Build storable text. costs=None produces the masked layout where the
    verifier must already know the parameters.
    """
    fields = [alg_id, b64encode(salt)]
    if costs is not None:
        if len(costs) != COST_FIELD_COUNT:
            raise ValueError(f"expected {COST_FIELD_COUNT} cost values, got {len(costs)}")
        fields.extend(str(int(c)) for c in costs)
    fields.append(b64encode(digest))
    return join(fields)


def decode_public(fields: Sequence[str]) -> Tuple[bytes, List[int], bytes]:
    """Return (salt, costs, digest) from a public layout."""
    if len(fields) != PUBLIC_FIELD_COUNT:
        raise CodecError("wrong field count for public layout")
    salt = b64decode(fields[1])
    costs = [decode_int(f) for f in fields[2:-1]]
    digest = b64decode(fields[-1])
    return salt, costs, digest


def decode_masked(fields: Sequence[str]) -> Tuple[bytes, bytes]:
    """Return (salt, digest) from a masked layout."""
    if len(fields) != MASKED_FIELD_COUNT:
        raise CodecError("wrong field count for masked layout")
    return b64decode(fields[1]), b64decode(fields[2])

