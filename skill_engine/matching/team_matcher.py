"""
Team Matcher.

Scores candidates against a project's required-skill set and assembles a
ranked recommendation plus a coverage/gap report.

Per requirement r and candidate c:

    priority_weight = 1 / r.priority
    required_weight = 1.5 if r.is_required else 1.0
    max_possible   += priority_weight * required_weight
    if c has r.skill_name:
        total += level_weight[level] * confidence * priority_weight * required_weight

    match_score = total / max_possible

Candidates with no matched requirement are dropped. With partial matches
disabled, candidates missing any required skill are dropped too. Ranking is
by score descending, then fewer active assignments. Existing project members
are reported apart from the team_size-limited recommendation list.

Usage:
    matcher = TeamMatcher()
    result = matcher.recommend(requirements, candidates, team_size=5)
    result.coverage.gaps
"""

from typing import Dict, Iterable, List, Optional, Sequence

from skill_engine.common.error_handling import InvalidArgument
from skill_engine.common.logger import get_logger
from skill_engine.common.utils import safe_ratio, skill_key
from skill_engine.detection.scoring_config import ScoringConfig
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


class TeamMatcher:
    """Weighted, priority-adjusted matching of candidates to requirements."""

    def __init__(self, config: Optional[ScoringConfig] = None, run_id: Optional[str] = None):
        self.config = config or ScoringConfig.default()
        self.logger = get_logger(__name__, run_id=run_id, component="team_matcher")

    def validate_request(self, requirements: Sequence[ProjectRequirement], team_size: int) -> None:
        if not requirements:
            raise InvalidArgument("Project has no skill requirements defined")
        if team_size <= 0:
            raise InvalidArgument(f"team_size must be positive, got {team_size}")

        seen = set()
        for requirement in requirements:
            if requirement.priority < 1:
                raise InvalidArgument(
                    f"Requirement {requirement.skill_name} has non-positive priority {requirement.priority}"
                )
            key = skill_key(requirement.skill_name)
            if key in seen:
                raise InvalidArgument(f"Duplicate requirement for skill {requirement.skill_name}")
            seen.add(key)

    def requirement_weight(self, requirement: ProjectRequirement) -> float:
        """priority_weight * required_weight for one requirement."""
        weights = self.config.matching
        priority_weight = 1 / requirement.priority
        required_weight = weights.required_multiplier if requirement.is_required else weights.optional_multiplier
        return priority_weight * required_weight

    def score_candidate(
        self,
        requirements: Sequence[ProjectRequirement],
        candidate: Candidate,
    ) -> MatchResult:
        """Score one candidate; pure."""
        weights = self.config.matching
        skills: Dict[str, CandidateSkill] = {}
        for skill in candidate.skills:
            skills.setdefault(skill_key(skill.skill_name), skill)

        total = 0.0
        max_possible = 0.0
        matched: List[RequirementMatch] = []

        for requirement in requirements:
            weight = self.requirement_weight(requirement)
            max_possible += weight

            skill = skills.get(skill_key(requirement.skill_name))
            if skill is None:
                continue

            confidence = skill.confidence if skill.confidence is not None else weights.missing_confidence
            contribution = weights.level_weights[skill.level] * confidence * weight
            total += contribution
            matched.append(
                RequirementMatch(
                    skill_name=requirement.skill_name,
                    level=skill.level,
                    confidence=skill.confidence,
                    is_required=requirement.is_required,
                    priority=requirement.priority,
                    contribution=contribution,
                )
            )

        return MatchResult(
            person_id=candidate.person_id,
            name=candidate.name,
            match_score=safe_ratio(total, max_possible),
            matched=matched,
            active_assignments=candidate.active_assignments,
        )

    def build_coverage(
        self,
        requirements: Sequence[ProjectRequirement],
        team: Iterable[MatchResult],
    ) -> CoverageReport:
        """Which requirements the given team covers, in requirement order."""
        breakdown = {
            skill_key(r.skill_name): RequirementCoverage(skill_name=r.skill_name, is_required=r.is_required)
            for r in requirements
        }
        for member in team:
            for match in member.matched:
                breakdown[skill_key(match.skill_name)].covered_by.append(
                    {"person_id": member.person_id, "name": member.name, "level": match.level.value}
                )
        return CoverageReport(breakdown=list(breakdown.values()))

    def recommend(
        self,
        requirements: Sequence[ProjectRequirement],
        candidates: Iterable[Candidate],
        team_size: int,
        include_partial_matches: bool = True,
        existing_member_ids: Optional[Iterable[str]] = None,
    ) -> TeamRecommendation:
        """
        Rank candidates for a project.

        Args:
            requirements: The project's skill requirements (at least one)
            candidates: Read-only snapshot of the candidate pool
            team_size: Maximum number of recommendations (must be positive)
            include_partial_matches: When False, drop candidates missing any required skill
            existing_member_ids: People already assigned to the project

        Raises:
            InvalidArgument: No requirements, non-positive team_size, bad priorities
        """
        self.validate_request(requirements, team_size)
        members = set(existing_member_ids or ())
        required_count = sum(1 for r in requirements if r.is_required)

        results = []
        pool_size = 0
        for candidate in candidates:
            pool_size += 1
            result = self.score_candidate(requirements, candidate)
            if not result.matched:
                continue
            if not include_partial_matches and result.required_matched < required_count:
                continue
            result.is_already_member = candidate.person_id in members
            results.append(result)

        results.sort(key=lambda r: (-r.match_score, r.active_assignments))

        already_assigned = [r for r in results if r.is_already_member]
        available = [r for r in results if not r.is_already_member]
        recommendations = available[:team_size]
        coverage = self.build_coverage(requirements, recommendations)

        self.logger.info(
            f"Scored {pool_size} candidates against {len(requirements)} requirements: "
            f"{len(available)} available, {len(already_assigned)} already assigned, "
            f"coverage {coverage.coverage_percentage}% ({len(coverage.gaps)} gaps)"
        )

        return TeamRecommendation(
            recommendations=recommendations,
            already_assigned=already_assigned,
            coverage=coverage,
            total_candidates=len(available),
            requested_size=team_size,
        )
