"""
In-process timing and counting for the convert pipeline.

Enablement:
- PSEUDOCONV_TELEMETRY in {"1", "true", "yes"} (case-insensitive) turns the
  recorder on. Otherwise a no-op recorder is returned and every call is free.
- PSEUDOCONV_TELEMETRY_LOG (same truthy values) additionally logs one INFO
  line per recorded event on the "pseudocode_converter.telemetry" logger.

Snapshot schema (JSON-serializable):
{
  "telemetry_enabled": true,
  "pid": <int>,
  "start_time": <ISO-8601 UTC string>,
  "events": {
    "<name>": {"count": <int>, "total_ms": <float>, "min_ms": <float|None>,
               "max_ms": <float|None>, "counters": {<name>: <int>}}
  }
}
The "counters" key is only present for events that were given counters.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

_TRUTHY = {"1", "true", "yes"}

logger = logging.getLogger("pseudocode_converter.telemetry")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in _TRUTHY


def telemetry_enabled() -> bool:
    """Return True if PSEUDOCONV_TELEMETRY is set to a truthy value"""
    return _env_flag("PSEUDOCONV_TELEMETRY")


@dataclass
class _EventStats:
    count: int = 0
    total_ms: float = 0.0
    min_ms: float | None = None
    max_ms: float | None = None
    counters: Counter = field(default_factory=Counter)

    def add(self, duration_ms: float | None, counters: dict[str, int] | None) -> None:
        self.count += 1
        if duration_ms is not None:
            self.total_ms += duration_ms
            self.min_ms = duration_ms if self.min_ms is None else min(self.min_ms, duration_ms)
            self.max_ms = duration_ms if self.max_ms is None else max(self.max_ms, duration_ms)
        for key, value in (counters or {}).items():
            self.counters[key] += int(value)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "count": self.count,
            "total_ms": self.total_ms,
            "min_ms": self.min_ms,
            "max_ms": self.max_ms,
        }
        if self.counters:
            data["counters"] = dict(self.counters)
        return data


class TelemetryRecorder:
    """Aggregates timings and counters per event name (parse, generate, convert)"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: dict[str, _EventStats] = {}
        self._pid = os.getpid()
        self._started = datetime.now(timezone.utc).isoformat()
        self._log_events = _env_flag("PSEUDOCONV_TELEMETRY_LOG")

    @contextmanager
    def timed_section(self, name: str, extra: dict | None = None):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record_event(name, duration_ms=(time.perf_counter() - start) * 1000.0, extra=extra)

    def record_event(
        self,
        name: str,
        duration_ms: float | None = None,
        extra: dict | None = None,
        counters: dict[str, int] | None = None,
    ) -> None:
        duration = float(duration_ms) if duration_ms is not None else None
        with self._lock:
            self._events.setdefault(name, _EventStats()).add(duration, counters)

        if self._log_events:
            logger.info(
                "telemetry event %s",
                name,
                extra={"event": name, "duration_ms": duration, "details": extra, "counters": counters},
            )

    def snapshot(self) -> dict:
        with self._lock:
            events = {name: stats.to_dict() for name, stats in self._events.items()}
        return {
            "telemetry_enabled": True,
            "pid": self._pid,
            "start_time": self._started,
            "events": events,
        }


class NoOpTelemetryRecorder:
    """Stand-in used when telemetry is off"""

    @contextmanager
    def timed_section(self, name: str, extra: dict | None = None):
        yield

    def record_event(self, name: str, duration_ms=None, extra=None, counters=None) -> None:
        return None

    def snapshot(self) -> dict:
        return {}


_recorder: TelemetryRecorder | NoOpTelemetryRecorder | None = None
_recorder_lock = threading.Lock()


def get_recorder() -> TelemetryRecorder | NoOpTelemetryRecorder:
    """
    Return the process-wide recorder.

    PSEUDOCONV_TELEMETRY is read on first call only; reset_recorder() makes
    the next call read it again.
    """
    global _recorder
    if _recorder is None:
        with _recorder_lock:
            if _recorder is None:
                _recorder = TelemetryRecorder() if telemetry_enabled() else NoOpTelemetryRecorder()
    return _recorder


def reset_recorder() -> None:
    """Drop the cached recorder (tests and config reloads)"""
    global _recorder
    with _recorder_lock:
        _recorder = None


__all__ = [
    "telemetry_enabled",
    "TelemetryRecorder",
    "NoOpTelemetryRecorder",
    "get_recorder",
    "reset_recorder",
]
