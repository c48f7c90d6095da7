"""
Unit tests for skill_engine/detection/scoring_config.py

Tests the frozen weight/threshold tables and JSON loading.
"""

import json

import pytest
from pydantic import ValidationError

from skill_engine.common.error_handling import InvalidArgument
from skill_engine.detection.scoring_config import (
    ConfidenceWeights,
    LevelThreshold,
    MatchWeights,
    RecencyBucket,
    RecencyTable,
    ScoringConfig,
)
from skill_engine.detection.types import SkillLevel


class TestDefaults:
    """Tests for the built-in tables."""

    def test_default_confidence_weights(self):
        weights = ScoringConfig.default().weights.as_dict()
        assert weights == {
            "frequency": 0.25,
            "recency": 0.20,
            "complexity": 0.20,
            "duration": 0.15,
            "depth": 0.20,
        }
        assert sum(weights.values()) == pytest.approx(1.0)

    def test_default_levels_highest_first(self):
        levels = [t.level for t in ScoringConfig.default().levels]
        assert levels == [SkillLevel.EXPERT, SkillLevel.ADVANCED, SkillLevel.INTERMEDIATE]

    def test_default_match_weights(self):
        matching = ScoringConfig.default().matching
        assert matching.level_weights[SkillLevel.EXPERT] == 1.0
        assert matching.level_weights[SkillLevel.ADVANCED] == 0.75
        assert matching.level_weights[SkillLevel.INTERMEDIATE] == 0.5
        assert matching.level_weights[SkillLevel.BEGINNER] == 0.25
        assert matching.required_multiplier == 1.5
        assert matching.missing_confidence == 0.5

    def test_project_cap_is_independent_of_level_minimums(self):
        config = ScoringConfig(caps={"projects": 20})
        assert config.caps.projects == 20
        assert config.levels[0].min_projects == 10


class TestValidation:
    """Tests for table validation."""

    def test_tables_are_frozen(self):
        config = ScoringConfig.default()
        with pytest.raises(ValidationError):
            config.weights.frequency = 0.9

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            ConfidenceWeights(frequency=-0.1)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ConfidenceWeights(popularity=0.1)

    def test_recency_buckets_must_ascend(self):
        with pytest.raises(ValidationError, match="ascending"):
            RecencyTable(
                buckets=[RecencyBucket(max_days=90, score=0.8), RecencyBucket(max_days=30, score=1.0)]
            )

    def test_recency_scores_must_not_increase_with_age(self):
        with pytest.raises(ValidationError, match="increase"):
            RecencyTable(
                buckets=[RecencyBucket(max_days=30, score=0.5), RecencyBucket(max_days=90, score=0.8)]
            )

    def test_recency_floor_not_above_last_bucket(self):
        with pytest.raises(ValidationError, match="floor"):
            RecencyTable(buckets=[RecencyBucket(max_days=30, score=0.3)], floor=0.5)

    def test_levels_must_be_ordered_highest_first(self):
        with pytest.raises(ValidationError, match="highest level first"):
            ScoringConfig(
                levels=[
                    LevelThreshold(level=SkillLevel.INTERMEDIATE, min_confidence=0.4, min_projects=2, min_lines=1000),
                    LevelThreshold(level=SkillLevel.EXPERT, min_confidence=0.8, min_projects=10, min_lines=10000),
                ]
            )

    def test_beginner_threshold_rejected(self):
        with pytest.raises(ValidationError, match="BEGINNER"):
            ScoringConfig(
                levels=[LevelThreshold(level=SkillLevel.BEGINNER, min_confidence=0, min_projects=0, min_lines=0)]
            )

    def test_level_weights_must_cover_every_level(self):
        with pytest.raises(ValidationError, match="missing levels"):
            MatchWeights(level_weights={SkillLevel.EXPERT: 1.0})


class TestJsonLoading:
    """Tests for from_json_file / load."""

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "scoring.json"
        path.write_text(json.dumps({"weights": {"frequency": 0.5}, "matching": {"required_multiplier": 2.0}}))

        config = ScoringConfig.from_json_file(path)

        assert config.weights.frequency == 0.5
        assert config.weights.recency == 0.20
        assert config.matching.required_multiplier == 2.0
        assert config.matching.level_weights[SkillLevel.ADVANCED] == 0.75

    def test_level_weights_by_name(self, tmp_path):
        path = tmp_path / "scoring.json"
        path.write_text(
            json.dumps(
                {
                    "matching": {
                        "level_weights": {"EXPERT": 1.0, "ADVANCED": 0.8, "INTERMEDIATE": 0.6, "BEGINNER": 0.1}
                    }
                }
            )
        )

        config = ScoringConfig.from_json_file(path)

        assert config.matching.level_weights[SkillLevel.BEGINNER] == 0.1

    def test_invalid_file_raises_invalid_argument(self, tmp_path):
        path = tmp_path / "scoring.json"
        path.write_text(json.dumps({"weights": {"frequency": "lots"}}))

        with pytest.raises(InvalidArgument, match="Invalid scoring config"):
            ScoringConfig.from_json_file(path)

    def test_load_without_path_uses_defaults(self):
        assert ScoringConfig.load(None) == ScoringConfig.default()
