"""
Shared fixtures: parameter sets cheap enough to hash hundreds of times.
"""

import pytest

from passwd import Argon2Params, BcryptParams, ScryptParams


@pytest.fixture
def cheap_argon2():
    return Argon2Params(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def cheap_scrypt():
    return ScryptParams(n=2**4, r=8, p=1)


@pytest.fixture
def cheap_bcrypt():
    return BcryptParams(cost=4)


@pytest.fixture(params=["argon2", "scrypt"])
def cheap_stretched(request, cheap_argon2, cheap_scrypt):
    return {"argon2": cheap_argon2, "scrypt": cheap_scrypt}[request.param]
