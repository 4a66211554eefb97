"""Process-local counters served by GET /metrics"""

from __future__ import annotations

import threading
from collections import Counter

COUNTER_NAMES = ("requests_total", "status_4xx", "status_5xx", "conversions_total")

_lock = threading.Lock()
_counts: Counter[str] = Counter(dict.fromkeys(COUNTER_NAMES, 0))


def inc_counter(name: str) -> None:
    with _lock:
        _counts[name] += 1


def snapshot() -> dict[str, int]:
    with _lock:
        return dict(_counts)


def reset() -> None:
    """Zero every counter (tests)"""
    with _lock:
        _counts.clear()
        _counts.update(dict.fromkeys(COUNTER_NAMES, 0))
