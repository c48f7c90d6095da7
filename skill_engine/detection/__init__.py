"""
Skill detection: evidence -> aggregate -> confidence -> level -> profile.

Exports:
- Evidence, SkillAggregate, SkillProfileEntry and their enums
- aggregate: Evidence merge
- ConfidenceScorer / LevelClassifier: pure scoring
- SkillProfileBuilder: orchestration and persistence
- EvidenceExtractor / PracticeDetector: input-side helpers
"""

from skill_engine.detection.types import (
    Evidence,
    EvidenceKind,
    EvidenceSource,
    RepositorySummary,
    SkillAggregate,
    SkillLevel,
    SkillProfileEntry,
)
from skill_engine.detection.aggregator import aggregate
from skill_engine.detection.confidence import ConfidenceScorer
from skill_engine.detection.levels import LevelClassifier
from skill_engine.detection.scoring_config import ScoringConfig
from skill_engine.detection.extractor import EvidenceExtractor, merge_evidence
from skill_engine.detection.practices import PracticeDetector
from skill_engine.detection.profile_builder import SkillProfileBuilder

__all__ = [
    "Evidence",
    "EvidenceKind",
    "EvidenceSource",
    "RepositorySummary",
    "SkillAggregate",
    "SkillLevel",
    "SkillProfileEntry",
    "aggregate",
    "ConfidenceScorer",
    "LevelClassifier",
    "ScoringConfig",
    "EvidenceExtractor",
    "merge_evidence",
    "PracticeDetector",
    "SkillProfileBuilder",
]
