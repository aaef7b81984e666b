"""Elapsed-time bucketing for event age labels."""

from __future__ import annotations

import math
from typing import NamedTuple

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# (threshold seconds, unit seconds, label), checked top-down.
_BUCKETS: tuple[tuple[int, int, str], ...] = (
    (SECONDS_PER_DAY, SECONDS_PER_DAY, "days"),
    (SECONDS_PER_HOUR, SECONDS_PER_HOUR, "hrs"),
    (SECONDS_PER_MINUTE, SECONDS_PER_MINUTE, "mins"),
)


class EventAge(NamedTuple):
    elapsed_seconds: float
    label: str


def format_age(elapsed_seconds: float) -> str:
    """Render elapsed seconds as a ceiling-rounded secs/mins/hrs/days label.

    Negative values (clock skew) render as ``"0 secs"``.
    """
    if elapsed_seconds <= 0:
        return "0 secs"
    for threshold, unit, label in _BUCKETS:
        if elapsed_seconds >= threshold:
            return f"{math.ceil(elapsed_seconds / unit)} {label}"
    return f"{math.ceil(elapsed_seconds)} secs"


def compute_age(event_clock: float, now: float) -> EventAge:
    """Return the raw elapsed seconds and its display label."""
    elapsed = now - event_clock
    return EventAge(elapsed_seconds=elapsed, label=format_age(elapsed))
