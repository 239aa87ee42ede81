"""Breathing phase lookup."""

import pytest

from snapout.content.breathing import CALMING, ENERGIZING, MEDITATIONS, RELAXED, breathing_phase_at


class TestPatterns:
    def test_cycle_lengths(self):
        assert RELAXED.cycle_seconds == 12
        assert ENERGIZING.cycle_seconds == 19
        assert CALMING.cycle_seconds == 13

    def test_meditations_map_to_patterns(self):
        assert MEDITATIONS["relaxation"][1] is RELAXED
        assert MEDITATIONS["focus"][1] is ENERGIZING
        assert MEDITATIONS["anxiety-relief"][1] is CALMING
        assert MEDITATIONS["urge"][1] is ENERGIZING


class TestPhaseAt:
    def test_session_starts_inhaling(self):
        phase = breathing_phase_at(RELAXED, 0)
        assert phase.phase == "inhale"
        assert phase.remaining_seconds == 4
        assert phase.completed_cycles == 0

    @pytest.mark.parametrize(
        ("elapsed", "expected", "remaining"),
        [(3.5, "inhale", 0.5), (4, "hold", 7), (10.5, "hold", 0.5), (11, "exhale", 8), (18, "exhale", 1)],
    )
    def test_energizing_phases(self, elapsed, expected, remaining):
        phase = breathing_phase_at(ENERGIZING, elapsed)
        assert phase.phase == expected
        assert phase.remaining_seconds == pytest.approx(remaining)

    def test_wraps_into_next_cycle(self):
        phase = breathing_phase_at(CALMING, 13 * 3 + 6)
        assert phase.phase == "hold"
        assert phase.completed_cycles == 3

    def test_negative_elapsed_is_start(self):
        assert breathing_phase_at(RELAXED, -5) == breathing_phase_at(RELAXED, 0)
