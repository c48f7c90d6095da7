"""
Confidence scoring.

Five factors, each normalized to [0, 1], combined by a weighted average:

    factor       default weight   normalization
    frequency    0.25             min(total_frequency / 10000, 1)
    recency      0.20             step function of days since last observation
    complexity   0.20             mean_complexity as is
    duration     0.15             min(total_projects / 10, 1)
    depth        0.20             min(total_lines / 10000, 1)

The result is divided by the sum of weights so partial weight tables still
produce a value in [0, 1]. Pure: the reference time is passed in, never read
from the clock, so historical snapshots are reproducible.
"""

from datetime import datetime
from typing import Dict, Optional

from skill_engine.common.utils import clamp, ensure_utc, safe_ratio
from skill_engine.detection.scoring_config import ScoringConfig
from skill_engine.detection.types import SkillAggregate

SECONDS_PER_DAY = 86400.0


class ConfidenceScorer:
    """Turns a SkillAggregate into a confidence value in [0, 1]."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig.default()

    def normalize(self, value: float, cap: float) -> float:
        """min(value / cap, 1), with 0 for a non-positive cap."""
        return min(safe_ratio(value, cap), 1.0)

    def recency_score(self, observed_at: datetime, as_of: datetime) -> float:
        """
        Step score for how long ago the skill was last observed.

        Observations in the future relative to ``as_of`` count as fresh.
        """
        days_since = (ensure_utc(as_of) - ensure_utc(observed_at)).total_seconds() / SECONDS_PER_DAY
        for bucket in self.config.recency.buckets:
            if days_since <= bucket.max_days:
                return bucket.score
        return self.config.recency.floor

    def factor_scores(self, aggregate: SkillAggregate, as_of: datetime) -> Dict[str, float]:
        """Each factor's normalized value, keyed like ConfidenceWeights."""
        caps = self.config.caps
        return {
            "frequency": self.normalize(aggregate.total_frequency, caps.frequency),
            "recency": self.recency_score(aggregate.most_recent_observation, as_of),
            "complexity": clamp(aggregate.mean_complexity),
            "duration": self.normalize(aggregate.total_projects, caps.projects),
            "depth": self.normalize(aggregate.total_lines, caps.lines),
        }

    def score(self, aggregate: SkillAggregate, as_of: datetime) -> float:
        """
        Weighted average of the factor scores.

        Args:
            aggregate: Merged evidence for one skill
            as_of: Reference time for the recency factor

        Returns:
            Confidence in [0, 1]; 0.0 when every weight is zero
        """
        scores = self.factor_scores(aggregate, as_of)

        weighted_sum = 0.0
        total_weight = 0.0
        for factor, weight in self.config.weights.as_dict().items():
            weighted_sum += scores[factor] * weight
            total_weight += weight

        return clamp(safe_ratio(weighted_sum, total_weight))
