"""
Weight and threshold tables for scoring, levelling and matching.

All tables are frozen pydantic models injected into the scorer, classifier
and matcher at construction time. Tests and deployments substitute
alternate tables by building a ScoringConfig (or loading one from JSON)
instead of patching module globals.

Usage:
    config = ScoringConfig.default()
    scorer = ConfidenceScorer(config)

    custom = ScoringConfig.from_json_file(Path("scoring.json"))
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from skill_engine.common.error_handling import InvalidArgument
from skill_engine.detection.types import SkillLevel


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ConfidenceWeights(_Frozen):
    """Weight of each normalized factor in the confidence average."""

    frequency: float = Field(default=0.25, ge=0)
    recency: float = Field(default=0.20, ge=0)
    complexity: float = Field(default=0.20, ge=0)
    duration: float = Field(default=0.15, ge=0)
    depth: float = Field(default=0.20, ge=0)

    def as_dict(self) -> Dict[str, float]:
        return {
            "frequency": self.frequency,
            "recency": self.recency,
            "complexity": self.complexity,
            "duration": self.duration,
            "depth": self.depth,
        }


class NormalizationCaps(_Frozen):
    """
    Values at which each raw metric saturates to 1.0.

    ``projects`` is independent from the project minimums in LevelThreshold.
    """

    frequency: float = Field(default=10000, gt=0)
    projects: float = Field(default=10, gt=0)
    lines: float = Field(default=10000, gt=0)


class RecencyBucket(_Frozen):
    max_days: float = Field(gt=0)
    score: float = Field(ge=0, le=1)


def _default_recency_buckets() -> List[RecencyBucket]:
    return [
        RecencyBucket(max_days=30, score=1.0),
        RecencyBucket(max_days=90, score=0.8),
        RecencyBucket(max_days=180, score=0.6),
        RecencyBucket(max_days=365, score=0.4),
        RecencyBucket(max_days=730, score=0.2),
    ]


class RecencyTable(_Frozen):
    """Step function over days since the last observation."""

    buckets: List[RecencyBucket] = Field(default_factory=_default_recency_buckets)
    floor: float = Field(default=0.1, ge=0, le=1)

    @field_validator("buckets")
    @classmethod
    def _buckets_ascending(cls, buckets: List[RecencyBucket]) -> List[RecencyBucket]:
        days = [b.max_days for b in buckets]
        if days != sorted(days):
            raise ValueError("recency buckets must be ordered by max_days ascending")
        scores = [b.score for b in buckets]
        if scores != sorted(scores, reverse=True):
            # Older observations must never score higher
            raise ValueError("recency bucket scores must not increase with age")
        return buckets

    @model_validator(mode="after")
    def _floor_below_buckets(self) -> "RecencyTable":
        if self.buckets and self.floor > self.buckets[-1].score:
            raise ValueError("recency floor must not exceed the oldest bucket score")
        return self


class LevelThreshold(_Frozen):
    """Conjunctive minimums for one level: all three must hold."""

    level: SkillLevel
    min_confidence: float = Field(ge=0, le=1)
    min_projects: int = Field(ge=0)
    min_lines: int = Field(ge=0)


def _default_level_thresholds() -> List[LevelThreshold]:
    return [
        LevelThreshold(level=SkillLevel.EXPERT, min_confidence=0.80, min_projects=10, min_lines=10000),
        LevelThreshold(level=SkillLevel.ADVANCED, min_confidence=0.60, min_projects=5, min_lines=5000),
        LevelThreshold(level=SkillLevel.INTERMEDIATE, min_confidence=0.40, min_projects=2, min_lines=1000),
    ]


class MatchWeights(_Frozen):
    """Per-requirement weighting used by the team matcher."""

    level_weights: Dict[SkillLevel, float] = Field(
        default_factory=lambda: {
            SkillLevel.EXPERT: 1.0,
            SkillLevel.ADVANCED: 0.75,
            SkillLevel.INTERMEDIATE: 0.5,
            SkillLevel.BEGINNER: 0.25,
        }
    )
    required_multiplier: float = Field(default=1.5, gt=0)
    optional_multiplier: float = Field(default=1.0, gt=0)
    # Used when a matched skill carries no confidence (e.g. manually entered)
    missing_confidence: float = Field(default=0.5, ge=0, le=1)

    @field_validator("level_weights")
    @classmethod
    def _weights_cover_levels(cls, weights: Dict[SkillLevel, float]) -> Dict[SkillLevel, float]:
        missing = [level.value for level in SkillLevel if level not in weights]
        if missing:
            raise ValueError(f"level_weights missing levels: {', '.join(missing)}")
        if any(not 0 <= value <= 1 for value in weights.values()):
            raise ValueError("level weights must be in [0, 1]")
        return weights


class ScoringConfig(_Frozen):
    """Every tunable table the engine uses, bundled."""

    weights: ConfidenceWeights = Field(default_factory=ConfidenceWeights)
    caps: NormalizationCaps = Field(default_factory=NormalizationCaps)
    recency: RecencyTable = Field(default_factory=RecencyTable)
    levels: List[LevelThreshold] = Field(default_factory=_default_level_thresholds)
    matching: MatchWeights = Field(default_factory=MatchWeights)

    @field_validator("levels")
    @classmethod
    def _levels_highest_first(cls, levels: List[LevelThreshold]) -> List[LevelThreshold]:
        ranks = [t.level.rank for t in levels]
        if ranks != sorted(ranks, reverse=True) or len(set(ranks)) != len(ranks):
            raise ValueError("level thresholds must be unique and ordered highest level first")
        if any(t.level == SkillLevel.BEGINNER for t in levels):
            raise ValueError("BEGINNER is the default level and takes no threshold")
        return levels

    @classmethod
    def default(cls) -> "ScoringConfig":
        return cls()

    @classmethod
    def from_json_file(cls, path: Path) -> "ScoringConfig":
        """
        Load tables from a JSON file; omitted sections keep their defaults.

        Raises:
            InvalidArgument: If the file content does not describe valid tables
        """
        try:
            return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
        except ValidationError as e:
            raise InvalidArgument(f"Invalid scoring config {path}: {e}") from e

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ScoringConfig":
        """Tables from ``path`` when given, built-in defaults otherwise."""
        if path is None:
            return cls.default()
        return cls.from_json_file(path)
