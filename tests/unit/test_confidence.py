"""
Unit tests for skill_engine/detection/confidence.py

Tests the five-factor confidence score:
- Recency step function and its boundaries
- Saturation caps
- Bounds, monotonicity and determinism
- Substituted weight tables
"""

from datetime import timedelta

import pytest

from skill_engine.detection.confidence import ConfidenceScorer
from skill_engine.detection.levels import LevelClassifier
from skill_engine.detection.scoring_config import ConfidenceWeights, ScoringConfig
from skill_engine.detection.types import SkillLevel


@pytest.fixture
def scorer():
    return ConfidenceScorer()


class TestRecencyScore:
    """Tests for the days-since-last-use step function."""

    @pytest.mark.parametrize(
        "days_ago,expected",
        [
            (0, 1.0),
            (30, 1.0),
            (31, 0.8),
            (90, 0.8),
            (91, 0.6),
            (180, 0.6),
            (365, 0.4),
            (366, 0.2),
            (730, 0.2),
            (731, 0.1),
            (5000, 0.1),
        ],
    )
    def test_buckets(self, scorer, as_of, days_ago, expected):
        """Each bucket boundary is inclusive."""
        assert scorer.recency_score(as_of - timedelta(days=days_ago), as_of) == expected

    def test_future_observation_counts_as_fresh(self, scorer, as_of):
        assert scorer.recency_score(as_of + timedelta(days=3), as_of) == 1.0

    def test_naive_datetimes_are_treated_as_utc(self, scorer, as_of):
        naive = (as_of - timedelta(days=100)).replace(tzinfo=None)
        assert scorer.recency_score(naive, as_of) == 0.6


class TestFactorScores:
    """Tests for normalization of the raw metrics."""

    def test_metrics_saturate_at_caps(self, scorer, as_of, aggregate_factory):
        factors = scorer.factor_scores(
            aggregate_factory(frequency=50000, projects=40, lines=90000, complexity=1.0), as_of
        )

        assert factors["frequency"] == 1.0
        assert factors["duration"] == 1.0
        assert factors["depth"] == 1.0

    def test_metrics_scale_linearly_below_caps(self, scorer, as_of, aggregate_factory):
        factors = scorer.factor_scores(
            aggregate_factory(frequency=2500, projects=4, lines=1000, complexity=0.3), as_of
        )

        assert factors["frequency"] == pytest.approx(0.25)
        assert factors["duration"] == pytest.approx(0.4)
        assert factors["depth"] == pytest.approx(0.1)
        assert factors["complexity"] == pytest.approx(0.3)


class TestScore:
    """Tests for the weighted combination."""

    def test_saturated_aggregate_scores_one_and_is_expert(self, scorer, as_of, aggregate_factory):
        """Everything at its cap, used today."""
        aggregate = aggregate_factory(frequency=10000, days_ago=0, complexity=1.0, projects=10, lines=10000)

        confidence = scorer.score(aggregate, as_of)

        assert confidence == pytest.approx(1.0)
        assert LevelClassifier().classify(confidence, aggregate) == SkillLevel.EXPERT

    def test_stale_small_aggregate_scores_low_and_is_beginner(self, scorer, as_of, aggregate_factory):
        """500 bytes, 400 days old, one small project."""
        aggregate = aggregate_factory(frequency=500, days_ago=400, complexity=0.1, projects=1, lines=200)

        confidence = scorer.score(aggregate, as_of)

        # 0.05*0.25 + 0.2*0.2 + 0.1*0.2 + 0.1*0.15 + 0.02*0.2
        assert confidence == pytest.approx(0.0915)
        assert confidence < 0.3
        assert LevelClassifier().classify(confidence, aggregate) == SkillLevel.BEGINNER

    def test_score_stays_in_unit_interval(self, scorer, as_of, aggregate_factory):
        for aggregate in (
            aggregate_factory(),
            aggregate_factory(frequency=10**9, projects=10**6, lines=10**9, complexity=1.0),
            aggregate_factory(days_ago=-30, complexity=1.0),
        ):
            assert 0.0 <= scorer.score(aggregate, as_of) <= 1.0

    def test_score_is_deterministic(self, scorer, as_of, aggregate_factory):
        aggregate = aggregate_factory(frequency=1234, days_ago=45, complexity=0.4, projects=3, lines=2000)
        assert scorer.score(aggregate, as_of) == scorer.score(aggregate, as_of)

    @pytest.mark.parametrize("field", ["frequency", "complexity", "projects", "lines"])
    def test_more_evidence_never_lowers_score(self, scorer, as_of, aggregate_factory, field):
        base = {"frequency": 100, "days_ago": 60, "complexity": 0.2, "projects": 1, "lines": 100}
        lower = scorer.score(aggregate_factory(**base), as_of)

        raised = dict(base)
        raised[field] = base[field] * 3
        assert scorer.score(aggregate_factory(**raised), as_of) >= lower

    def test_more_recent_use_never_lowers_score(self, scorer, as_of, aggregate_factory):
        previous = 0.0
        for days_ago in (2000, 700, 300, 120, 60, 10):
            current = scorer.score(aggregate_factory(frequency=100, days_ago=days_ago), as_of)
            assert current >= previous
            previous = current


class TestSubstitutedWeights:
    """Alternate weight tables are injected, not patched."""

    def test_all_zero_weights_score_zero(self, as_of, aggregate_factory):
        config = ScoringConfig(
            weights=ConfidenceWeights(frequency=0, recency=0, complexity=0, duration=0, depth=0)
        )
        scorer = ConfidenceScorer(config)

        assert scorer.score(aggregate_factory(frequency=10000, complexity=1.0), as_of) == 0.0

    def test_single_factor_weight_returns_that_factor(self, as_of, aggregate_factory):
        config = ScoringConfig(
            weights=ConfidenceWeights(frequency=0, recency=0, complexity=1, duration=0, depth=0)
        )
        scorer = ConfidenceScorer(config)

        assert scorer.score(aggregate_factory(complexity=0.35), as_of) == pytest.approx(0.35)

    def test_weights_need_not_sum_to_one(self, as_of, aggregate_factory):
        """Weights are divided by their sum."""
        doubled = ScoringConfig(
            weights=ConfidenceWeights(frequency=0.5, recency=0.4, complexity=0.4, duration=0.3, depth=0.4)
        )
        aggregate = aggregate_factory(frequency=3000, days_ago=100, complexity=0.6, projects=3, lines=2500)

        assert ConfidenceScorer(doubled).score(aggregate, as_of) == pytest.approx(
            ConfidenceScorer().score(aggregate, as_of)
        )
