"""
Data types for skill detection.

These types represent the stages of turning evidence into a skill profile:
- Evidence: one immutable observation of a skill signal
- SkillAggregate: the merge of all evidence for one (person, skill)
- SkillProfileEntry: scored, levelled result for one (person, skill)
- RepositorySummary: the coarse per-repository facts practice detection needs
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from skill_engine.common.error_handling import InvalidArgument
from skill_engine.common.utils import ensure_utc


class EvidenceKind(str, Enum):
    """What sort of skill an observation points at."""
    LANGUAGE = "language"
    FRAMEWORK = "framework"
    TOOL = "tool"
    PRACTICE = "practice"

    def category(self) -> str:
        """Master-record category for skills detected through this kind."""
        return _KIND_CATEGORIES[self]


_KIND_CATEGORIES = {
    EvidenceKind.LANGUAGE: "Programming Language",
    EvidenceKind.FRAMEWORK: "Framework",
    EvidenceKind.TOOL: "Tool",
    EvidenceKind.PRACTICE: "Practice",
}


class EvidenceSource(str, Enum):
    """Where an observation came from."""
    REPOSITORY_SCAN = "repository_scan"
    COMMIT_DIFF = "commit_diff"
    MANUAL = "manual"
    TRAINING = "training"


class SkillLevel(str, Enum):
    """Discrete proficiency tier, ordered Beginner < Intermediate < Advanced < Expert."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    SkillLevel.BEGINNER: 0,
    SkillLevel.INTERMEDIATE: 1,
    SkillLevel.ADVANCED: 2,
    SkillLevel.EXPERT: 3,
}


@dataclass(frozen=True)
class Evidence:
    """
    One observation linking a person to a skill.

    Immutable: a new observation creates a new Evidence, it never edits an
    old one. Construction validates the numeric ranges so bad extractor
    output fails at the boundary rather than skewing a score.
    """

    skill_name: str
    kind: EvidenceKind
    source: EvidenceSource
    frequency: float                   # Signal magnitude (bytes, commit touches, ...)
    recency: datetime                  # Last time the signal was observed
    complexity: float                  # Project richness in [0, 1]
    project_count: int = 1
    lines_of_code: int = 0

    def __post_init__(self):
        if not self.skill_name or not self.skill_name.strip():
            raise InvalidArgument("Evidence requires a skill name")
        if not 0.0 <= self.complexity <= 1.0:
            raise InvalidArgument(
                f"Evidence complexity must be in [0, 1], got {self.complexity} for {self.skill_name}"
            )
        if self.frequency < 0 or self.lines_of_code < 0 or self.project_count < 0:
            raise InvalidArgument(f"Evidence metrics must be non-negative for {self.skill_name}")
        # Normalise once so aggregation can compare recency safely
        object.__setattr__(self, "recency", ensure_utc(self.recency))


@dataclass(frozen=True)
class SkillAggregate:
    """Numeric summary of all evidence for one (person, skill)."""

    total_projects: int
    total_lines: int
    total_frequency: float
    mean_complexity: float
    most_recent_observation: datetime
    contributing_projects: Optional[int] = None  # Sum of Evidence.project_count

    @property
    def projects_used(self) -> int:
        if self.contributing_projects is None:
            return self.total_projects
        return self.contributing_projects

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_projects": self.total_projects,
            "total_lines": self.total_lines,
            "total_frequency": self.total_frequency,
            "mean_complexity": self.mean_complexity,
            "most_recent_observation": self.most_recent_observation,
            "contributing_projects": self.projects_used,
        }


@dataclass
class SkillProfileEntry:
    """
    Engine output for one (person, skill).

    ``aggregate`` is None for fixed-confidence practice skills, which bypass
    the numeric scorer.
    """

    person_id: str
    skill_name: str
    category: str
    confidence: float
    level: SkillLevel
    source: EvidenceSource
    aggregate: Optional[SkillAggregate] = None
    kind: EvidenceKind = EvidenceKind.LANGUAGE

    @property
    def lines_of_code(self) -> int:
        return self.aggregate.total_lines if self.aggregate else 0

    @property
    def projects_used(self) -> int:
        return self.aggregate.projects_used if self.aggregate else 0

    @property
    def last_used(self) -> Optional[datetime]:
        return self.aggregate.most_recent_observation if self.aggregate else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "person_id": self.person_id,
            "skill_name": self.skill_name,
            "category": self.category,
            "confidence": self.confidence,
            "level": self.level.value,
            "source": self.source.value,
            "kind": self.kind.value,
            "aggregate": self.aggregate.to_dict() if self.aggregate else None,
        }


@dataclass(frozen=True)
class RepositorySummary:
    """Coarse facts about one repository a person contributes to."""

    name: str
    size: int = 0
    languages: Dict[str, int] = field(default_factory=dict)   # language -> bytes
    frameworks: tuple = ()
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    last_activity_at: Optional[datetime] = None
