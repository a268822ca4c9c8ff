"""
app.py - CLI entrypoint

Commands list:
- profiles: list the built-in presets and their parameters
- hash: hash a password with a profile and print the storable text
- compare: check a password against stored text (profile-bound or self-describing)
- derive: derive a hex key from a password and a hex salt
- bench: time hash/compare for the built-in presets

Passwords are always prompted for, never taken from the command line. A secret
(pepper) is read from the environment variable named by --secret-env.
"""

from __future__ import annotations

import argparse
import binascii
import getpass
import logging
import os
import sys
from typing import List, Optional

from . import bench
from .errors import AlgorithmError, MismatchError, UnsupportedError
from .profile import PRESETS, HashProfile, Profile, compare, new, new_masked

DEFAULT_PROFILE = "argon2id-default"
DEFAULT_SECRET_ENV = "PASSWD_SECRET"


def _profile_name(kind: HashProfile) -> str:
    return kind.name.lower().replace("_", "-")


def _profile_kind(name: str) -> HashProfile:
    return HashProfile[name.upper().replace("-", "_")]


PROFILE_CHOICES = [_profile_name(k) for k in PRESETS]


def _prompt_secret(prompt: str = "Password: ") -> str:
    return getpass.getpass(prompt)


def _build_profile(args: argparse.Namespace) -> Profile:
    kind = _profile_kind(args.profile)
    profile = new_masked(kind) if args.masked else new(kind)

    secret = os.environ.get(args.secret_env, "")
    if secret:
        profile.set_secret(secret.encode("utf-8"))
    return profile


def cmd_profiles(args: argparse.Namespace) -> int:
    for kind, params in PRESETS.items():
        print(f"{_profile_name(kind):<20} {params!r}")
    return 0


def cmd_hash(args: argparse.Namespace) -> int:
    try:
        profile = _build_profile(args)
        print(profile.hash(_prompt_secret()))
    except (UnsupportedError, AlgorithmError) as e:
        print(f"FAIL: {e}")
        return 1
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    try:
        if args.profile:
            profile = _build_profile(args)
            profile.compare(args.hashed, _prompt_secret())
        else:
            compare(args.hashed, _prompt_secret())
    except UnsupportedError as e:
        print(f"FAIL: {e}")
        return 1
    except MismatchError:
        print("FAIL: password does not match")
        return 1
    print("OK: password matches")
    return 0


def cmd_derive(args: argparse.Namespace) -> int:
    try:
        salt = bytes.fromhex(args.salt)
    except ValueError:
        print("FAIL: --salt must be hex")
        return 1

    try:
        profile = _build_profile(args)
        key = profile.derive(_prompt_secret(), salt)
    except (UnsupportedError, AlgorithmError) as e:
        print(f"FAIL: {e}")
        return 1
    print(binascii.hexlify(key).decode("ascii"))
    return 0


def cmd_bench(args: argparse.Namespace) -> int:
    secret = args.secret if args.secret else "correct horse battery staple"
    names = args.profiles.split(",") if args.profiles else PROFILE_CHOICES
    try:
        kinds = [_profile_kind(n.strip()) for n in names]
    except KeyError as e:
        print(f"FAIL: unknown profile {e}")
        return 1

    print("== PROFILE BENCH ==")
    try:
        for r in bench.bench_presets(kinds, secret, rounds=args.rounds):
            print(r)
    except UnsupportedError as e:
        print(f"FAIL: {e}")
        return 1
    return 0


def _add_profile_args(s: argparse.ArgumentParser, required: bool = True) -> None:
    s.add_argument(
        "--profile",
        choices=PROFILE_CHOICES,
        default=DEFAULT_PROFILE if required else None,
        help="Hashing profile",
    )
    s.add_argument("--masked", action="store_true", help="Leave parameters out of the hash text")
    s.add_argument(
        "--secret-env",
        default=DEFAULT_SECRET_ENV,
        help="Environment variable holding an optional secret (pepper)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="passwd")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("profiles", help="List built-in profiles")
    s.set_defaults(func=cmd_profiles)

    s = sub.add_parser("hash", help="Hash a password")
    _add_profile_args(s)
    s.set_defaults(func=cmd_hash)

    s = sub.add_parser("compare", help="Check a password against stored hash text")
    s.add_argument("hashed")
    _add_profile_args(s, required=False)
    s.set_defaults(func=cmd_compare)

    s = sub.add_parser("derive", help="Derive a key (argon2/scrypt profiles only)")
    _add_profile_args(s)
    s.add_argument("--salt", required=True, help="Salt as hex")
    s.set_defaults(func=cmd_derive)

    s = sub.add_parser("bench", help="Run benchmarks")
    s.add_argument("--rounds", type=int, default=5)
    s.add_argument("--profiles", default="", help="Comma-separated profiles (default: all)")
    s.add_argument("--secret", default="", help="Optional fixed password for bench")
    s.set_defaults(func=cmd_bench)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
