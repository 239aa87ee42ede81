"""Relapse tag normalization and statistics."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from snapout.relapses.service import MAX_TAGS, normalize_tags, summarize_relapses, time_period


def _entry(day: int, hour: int, triggers=(), emotions=()):
    return SimpleNamespace(
        occurred_at=datetime(2026, 1, day, hour, 0, tzinfo=timezone.utc),
        triggers=list(triggers),
        emotions=list(emotions),
    )


class TestNormalizeTags:
    def test_strips_and_drops_empty(self):
        assert normalize_tags(["  Stress ", "", "   "]) == ["Stress"]

    def test_dedupes_case_insensitively_keeping_first(self):
        assert normalize_tags(["Boredom", "boredom", "BOREDOM", "Late night"]) == ["Boredom", "Late night"]

    def test_none_is_empty(self):
        assert normalize_tags(None) == []

    def test_too_many_tags_rejected(self):
        with pytest.raises(ValueError):
            normalize_tags([f"tag{i}" for i in range(MAX_TAGS + 1)])


class TestTimePeriod:
    @pytest.mark.parametrize(
        ("hour", "period"),
        [(5, "morning"), (11, "morning"), (12, "afternoon"), (16, "afternoon"),
         (17, "evening"), (20, "evening"), (21, "night"), (0, "night"), (4, "night")],
    )
    def test_period_boundaries(self, hour, period):
        assert time_period(hour) == period

    def test_invalid_hour(self):
        with pytest.raises(ValueError):
            time_period(24)


class TestSummarize:
    def test_empty_journal(self):
        stats = summarize_relapses([])
        assert stats["total"] == 0
        assert stats["most_vulnerable_period"] is None
        assert stats["insight"] is None
        assert stats["longest_gap_days"] == 0
        assert stats["first_relapse_at"] is None

    def test_counts_and_vulnerable_period(self):
        entries = [
            _entry(1, 22, triggers=["Stress"], emotions=["Lonely"]),
            _entry(5, 23, triggers=["Stress", "Boredom"]),
            _entry(6, 9, triggers=["Boredom"], emotions=["Lonely"]),
            _entry(20, 2, triggers=["Stress"]),
        ]
        stats = summarize_relapses(entries)

        assert stats["total"] == 4
        assert stats["top_triggers"][0] == {"name": "Stress", "count": 3}
        assert stats["top_emotions"] == [{"name": "Lonely", "count": 2}]
        assert stats["time_distribution"] == {"morning": 1, "afternoon": 0, "evening": 0, "night": 3}
        assert stats["most_vulnerable_period"] == "night"
        assert "75%" in stats["insight"]

    def test_longest_gap_between_consecutive_relapses(self):
        entries = [_entry(20, 12), _entry(1, 12), _entry(4, 12)]
        stats = summarize_relapses(entries)
        assert stats["longest_gap_days"] == 16
        assert stats["first_relapse_at"].day == 1
        assert stats["last_relapse_at"].day == 20
