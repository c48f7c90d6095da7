"""
Unit tests for skill_engine/common/utils.py
"""

from datetime import datetime, timedelta, timezone

import pytest

from skill_engine.common.utils import clamp, ensure_utc, round_half_up, safe_ratio, skill_key


class TestSkillKey:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("TypeScript", "typescript"),
            ("  Shell   Scripting ", "shell scripting"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalizes(self, name, expected):
        assert skill_key(name) == expected


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,expected",
        [(67.5, 68), (66.5, 67), (12.5, 13), (0.4, 0), (99.49, 99), (-2.5, -3), (0.0, 0)],
    )
    def test_halves_round_away_from_zero(self, value, expected):
        assert round_half_up(value) == expected


class TestSafeRatio:
    def test_regular_division(self):
        assert safe_ratio(1, 4) == 0.25

    @pytest.mark.parametrize("denominator", [0, -1])
    def test_non_positive_denominator(self, denominator):
        assert safe_ratio(5, denominator) == 0.0

    def test_non_finite_results(self):
        assert safe_ratio(float("inf"), 1) == 0.0
        assert safe_ratio(float("nan"), 1) == 0.0


class TestClamp:
    def test_bounds(self):
        assert clamp(1.2) == 1.0
        assert clamp(-0.1) == 0.0
        assert clamp(0.3) == 0.3
        assert clamp(15, 0, 10) == 10


class TestEnsureUtc:
    def test_naive_is_assumed_utc(self):
        value = ensure_utc(datetime(2024, 1, 1, 9, 0))
        assert value == datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def test_aware_is_converted(self):
        offset = timezone(timedelta(hours=2))
        value = ensure_utc(datetime(2024, 1, 1, 11, 0, tzinfo=offset))
        assert value.hour == 9
        assert value.tzinfo == timezone.utc
