"""
Level classification.

Levels use conjunctive thresholds evaluated from the highest level down;
the first level whose confidence, project and line minimums all hold wins.
Requiring all three keeps one huge generated file, or many tiny projects,
from being read as expertise. Thresholds are inclusive (>=).

    level          confidence   projects   lines
    EXPERT         0.80         10         10,000
    ADVANCED       0.60         5          5,000
    INTERMEDIATE   0.40         2          1,000
    BEGINNER       (default)
"""

from typing import Optional

from skill_engine.detection.scoring_config import ScoringConfig
from skill_engine.detection.types import SkillAggregate, SkillLevel


class LevelClassifier:
    """Maps confidence plus aggregate volume to a SkillLevel."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig.default()

    def classify(self, confidence: float, aggregate: SkillAggregate) -> SkillLevel:
        for threshold in self.config.levels:
            if (
                confidence >= threshold.min_confidence
                and aggregate.total_projects >= threshold.min_projects
                and aggregate.total_lines >= threshold.min_lines
            ):
                return threshold.level

        return SkillLevel.BEGINNER
