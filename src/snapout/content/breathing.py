"""Guided breathing patterns and the meditation types built on them.

A pattern is one inhale, one hold and one exhale, repeated. Clients drive
their own animation; the phase lookup lets them resync after backgrounding.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

PHASES = ("inhale", "hold", "exhale")


@dataclass(frozen=True)
class BreathingPattern:
    key: str
    name: str
    description: str
    inhale_seconds: float
    hold_seconds: float
    exhale_seconds: float

    @property
    def cycle_seconds(self) -> float:
        return self.inhale_seconds + self.hold_seconds + self.exhale_seconds


class BreathingPhase(NamedTuple):
    phase: str
    remaining_seconds: float
    completed_cycles: int


RELAXED = BreathingPattern(
    key="relaxed",
    name="4-4-4 Breathing",
    description="Box breathing technique for relaxation and stress relief",
    inhale_seconds=4,
    hold_seconds=4,
    exhale_seconds=4,
)
ENERGIZING = BreathingPattern(
    key="energizing",
    name="4-7-8 Breathing",
    description="Energizing breath to increase alertness and focus",
    inhale_seconds=4,
    hold_seconds=7,
    exhale_seconds=8,
)
CALMING = BreathingPattern(
    key="calming",
    name="5-2-6 Breathing",
    description="Calming breath to reduce anxiety and promote relaxation",
    inhale_seconds=5,
    hold_seconds=2,
    exhale_seconds=6,
)

PATTERNS: dict[str, BreathingPattern] = {p.key: p for p in (RELAXED, ENERGIZING, CALMING)}

# slug -> (display name, pattern)
MEDITATIONS: dict[str, tuple[str, BreathingPattern]] = {
    "relaxation": ("Relaxation", RELAXED),
    "focus": ("Focus", ENERGIZING),
    "anxiety-relief": ("Anxiety Relief", CALMING),
    "urge": ("Urge Meditation", ENERGIZING),
}


def breathing_phase_at(pattern: BreathingPattern, elapsed: float) -> BreathingPhase:
    """Where a session of `pattern` is after `elapsed` seconds.

    Negative elapsed time is treated as the very start of the session.
    """
    if not math.isfinite(elapsed) or elapsed < 0:
        elapsed = 0.0
    cycles, offset = divmod(elapsed, pattern.cycle_seconds)

    durations = (pattern.inhale_seconds, pattern.hold_seconds, pattern.exhale_seconds)
    for phase, duration in zip(PHASES, durations):
        if offset < duration:
            return BreathingPhase(phase, round(duration - offset, 3), int(cycles))
        offset -= duration

    # Floating point can leave offset a hair past the last boundary.
    return BreathingPhase("inhale", pattern.inhale_seconds, int(cycles) + 1)
