"""
passwd - password hashing profiles for Argon2, Scrypt and Bcrypt.

Typical use:

    profile = passwd.new(passwd.HashProfile.ARGON2ID_DEFAULT)
    stored = profile.hash("hunter2")
    passwd.compare(stored, "hunter2")      # raises MismatchError on failure

Masked profiles leave the parameters out of the stored text; verify those with
the profile itself (profile.compare).
"""

from .errors import AlgorithmError, MismatchError, PasswdError, UnsupportedError
from .params import Argon2Params, BcryptParams, ScryptParams
from .profile import PRESETS, HashProfile, ParamSet, Profile, compare, new, new_custom, new_masked

__all__ = [
    "AlgorithmError",
    "Argon2Params",
    "BcryptParams",
    "HashProfile",
    "MismatchError",
    "PRESETS",
    "ParamSet",
    "PasswdError",
    "Profile",
    "ScryptParams",
    "UnsupportedError",
    "compare",
    "new",
    "new_custom",
    "new_masked",
]
