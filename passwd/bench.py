"""
bench.py - Measure how expensive each hashing profile is.

Responsibilities:
- Time hash and compare for a profile (median over several rounds)
- Return results as plain dicts for printing/reporting
"""

from __future__ import annotations

import statistics
import time
from typing import Any, Dict, Iterable, List

from .profile import HashProfile, Profile, new


def _time_ms(fn, rounds: int) -> float:
    timings = []
    for _ in range(rounds):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        timings.append((t1 - t0) * 1000.0)
    return float(statistics.median(timings))


def bench_profile(profile: Profile, secret: str, rounds: int = 5) -> Dict[str, Any]:
    """Median hash and compare time for one profile."""
    stored = profile.hash(secret)

    hash_ms = _time_ms(lambda: profile.hash(secret), rounds)
    compare_ms = _time_ms(lambda: profile.compare(stored, secret), rounds)

    return {
        "profile": profile.kind.name,
        "rounds": rounds,
        "hash_median_ms": hash_ms,
        "compare_median_ms": compare_ms,
    }


def bench_presets(kinds: Iterable[HashProfile], secret: str, rounds: int = 5) -> List[Dict[str, Any]]:
    return [bench_profile(new(kind), secret, rounds=rounds) for kind in kinds]
