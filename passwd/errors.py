"""
errors.py - Exceptions raised by the passwd package.

MismatchError is deliberately vague: a wrong password and an unreadable stored
hash look the same to the caller.
"""

from __future__ import annotations


class PasswdError(Exception):
    """Base class for every error raised by this package."""


class UnsupportedError(PasswdError):
    """The operation is not available for this profile or algorithm."""


class MismatchError(PasswdError):
    """Password verification failed."""

    def __init__(self) -> None:
        super().__init__("password does not match")


class AlgorithmError(PasswdError):
    """The underlying primitive refused the input (bad costs, bad lengths...)."""
