"""
Team matching: score candidate profiles against project requirements.

Exports:
- TeamMatcher: ranking, filtering and coverage
- ProjectRequirement, Candidate, CandidateSkill: inputs
- MatchResult, CoverageReport, TeamRecommendation: outputs
"""

from skill_engine.matching.types import (
    Candidate,
    CandidateSkill,
    CoverageReport,
    MatchResult,
    ProjectRequirement,
    RequirementCoverage,
    RequirementMatch,
    TeamRecommendation,
)
from skill_engine.matching.team_matcher import TeamMatcher

__all__ = [
    "Candidate",
    "CandidateSkill",
    "CoverageReport",
    "MatchResult",
    "ProjectRequirement",
    "RequirementCoverage",
    "RequirementMatch",
    "TeamRecommendation",
    "TeamMatcher",
]
