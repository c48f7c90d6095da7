"""
Data types for team matching.

- ProjectRequirement: one skill a project needs, with priority and required flag
- CandidateSkill / Candidate: a person's current profile as the matcher sees it
- RequirementMatch: one requirement a candidate satisfies and what it contributed
- MatchResult: a candidate's score against the whole requirement set
- CoverageReport: which requirements the recommended team covers
- TeamRecommendation: everything the matcher returns
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from skill_engine.common.types import SkillRecordDocument
from skill_engine.common.utils import round_half_up
from skill_engine.detection.types import SkillLevel, SkillProfileEntry


@dataclass(frozen=True)
class ProjectRequirement:
    skill_name: str
    is_required: bool = False
    priority: int = 1                  # 1 = highest; weighted as 1 / priority


@dataclass(frozen=True)
class CandidateSkill:
    skill_name: str
    level: SkillLevel
    confidence: Optional[float] = None  # None for manually entered skills

    @classmethod
    def from_profile_entry(cls, entry: SkillProfileEntry) -> "CandidateSkill":
        return cls(skill_name=entry.skill_name, level=entry.level, confidence=entry.confidence)

    @classmethod
    def from_record(cls, record: SkillRecordDocument) -> "CandidateSkill":
        """Build from a stored skill record joined with its master skill name."""
        return cls(
            skill_name=record.get("skill_name") or record["skill_id"],
            level=SkillLevel(record["level"]),
            confidence=record.get("confidence"),
        )


@dataclass
class Candidate:
    """A person in the pool, with current skills and workload."""

    person_id: str
    skills: List[CandidateSkill] = field(default_factory=list)
    active_assignments: int = 0        # Current active project count, for tie-breaks
    display_name: Optional[str] = None

    @classmethod
    def from_profile(
        cls,
        person_id: str,
        entries: Iterable[SkillProfileEntry],
        active_assignments: int = 0,
        display_name: Optional[str] = None,
    ) -> "Candidate":
        """Build from freshly computed profile entries."""
        return cls(
            person_id=person_id,
            skills=[CandidateSkill.from_profile_entry(entry) for entry in entries],
            active_assignments=active_assignments,
            display_name=display_name,
        )

    @property
    def name(self) -> str:
        return self.display_name or self.person_id


@dataclass(frozen=True)
class RequirementMatch:
    """A requirement the candidate covers."""

    skill_name: str
    level: SkillLevel
    confidence: Optional[float]
    is_required: bool
    priority: int
    contribution: float                # levelWeight * confidence * priorityWeight * requiredWeight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skill_name": self.skill_name,
            "level": self.level.value,
            "confidence": self.confidence,
            "is_required": self.is_required,
            "priority": self.priority,
            "contribution": self.contribution,
        }


@dataclass
class MatchResult:
    """One candidate's score against a requirement set."""

    person_id: str
    name: str
    match_score: float
    matched: List[RequirementMatch]
    active_assignments: int = 0
    is_already_member: bool = False

    @property
    def match_percentage(self) -> int:
        return round_half_up(self.match_score * 100)

    @property
    def required_matched(self) -> int:
        return sum(1 for m in self.matched if m.is_required)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "person_id": self.person_id,
            "name": self.name,
            "match_score": round(self.match_score, 2),
            "match_percentage": self.match_percentage,
            "matched_skills": [m.to_dict() for m in self.matched],
            "active_assignments": self.active_assignments,
        }


@dataclass
class RequirementCoverage:
    skill_name: str
    is_required: bool
    covered_by: List[Dict[str, str]] = field(default_factory=list)  # person_id, name, level

    @property
    def is_covered(self) -> bool:
        return bool(self.covered_by)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skill_name": self.skill_name,
            "is_required": self.is_required,
            "covered_by": list(self.covered_by),
        }


@dataclass
class CoverageReport:
    breakdown: List[RequirementCoverage]

    @property
    def total(self) -> int:
        return len(self.breakdown)

    @property
    def covered(self) -> int:
        return sum(1 for item in self.breakdown if item.is_covered)

    @property
    def gaps(self) -> List[RequirementCoverage]:
        return [item for item in self.breakdown if not item.is_covered]

    @property
    def coverage_percentage(self) -> int:
        if self.total == 0:
            return 0
        return round_half_up(self.covered / self.total * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_skills": self.total,
            "covered_skills": self.covered,
            "uncovered_skills": self.total - self.covered,
            "coverage_percentage": self.coverage_percentage,
            "skill_breakdown": [item.to_dict() for item in self.breakdown],
            "gaps": [
                {"skill_name": gap.skill_name, "is_required": gap.is_required}
                for gap in self.gaps
            ],
        }


@dataclass
class TeamRecommendation:
    recommendations: List[MatchResult]
    already_assigned: List[MatchResult]
    coverage: CoverageReport
    total_candidates: int              # Size of the available (non-member) pool
    requested_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "already_assigned": [r.to_dict() for r in self.already_assigned],
            "coverage": self.coverage.to_dict(),
            "total_candidates": self.total_candidates,
            "requested_size": self.requested_size,
        }
