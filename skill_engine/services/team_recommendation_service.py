"""
Team Recommendation Service.

Loads the candidate pool's current skill records from the repository, turns
them into matcher candidates and runs TeamMatcher. Defaults for team size and
partial matching come from Config.

Usage:
    service = TeamRecommendationService()
    result = service.recommend(
        requirements=[ProjectRequirement("Python", is_required=True, priority=1)],
        candidate_ids=["emp-1", "emp-2"],
        assignment_counts={"emp-1": 2},
    )
    result.to_dict()
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from skill_engine.common.config import Config
from skill_engine.common.repositories import SkillRepositoryInterface, get_skill_repository
from skill_engine.common.types import SkillRecordDocument
from skill_engine.common.logger import get_logger
from skill_engine.detection.scoring_config import ScoringConfig
from skill_engine.matching.team_matcher import TeamMatcher
from skill_engine.matching.types import (
    Candidate,
    CandidateSkill,
    ProjectRequirement,
    TeamRecommendation,
)


def candidates_from_records(
    candidate_ids: Sequence[str],
    records: Iterable[SkillRecordDocument],
    assignment_counts: Optional[Mapping[str, int]] = None,
    display_names: Optional[Mapping[str, str]] = None,
) -> List[Candidate]:
    """
    Group stored skill records by person.

    Every requested id yields a Candidate (possibly with no skills), in the
    order given. Records for people outside candidate_ids are ignored.
    """
    assignment_counts = assignment_counts or {}
    display_names = display_names or {}

    skills: Dict[str, List[CandidateSkill]] = {pid: [] for pid in candidate_ids}
    for record in records:
        if record["person_id"] in skills:
            skills[record["person_id"]].append(CandidateSkill.from_record(record))

    return [
        Candidate(
            person_id=pid,
            skills=person_skills,
            active_assignments=assignment_counts.get(pid, 0),
            display_name=display_names.get(pid),
        )
        for pid, person_skills in skills.items()
    ]


class TeamRecommendationService:
    """Repository-backed entry point for team recommendations."""

    def __init__(
        self,
        repository: Optional[SkillRepositoryInterface] = None,
        matcher: Optional[TeamMatcher] = None,
    ):
        self._repository = repository
        self.matcher = matcher or TeamMatcher(ScoringConfig.load(Config.get_scoring_config_path()))
        self.logger = get_logger(__name__, component="team_recommendation")

    def _get_repository(self) -> SkillRepositoryInterface:
        """Get the skill repository instance."""
        if self._repository is not None:
            return self._repository
        return get_skill_repository()

    def recommend(
        self,
        requirements: Sequence[ProjectRequirement],
        candidate_ids: Sequence[str],
        assignment_counts: Optional[Mapping[str, int]] = None,
        existing_member_ids: Optional[Iterable[str]] = None,
        team_size: Optional[int] = None,
        include_partial_matches: Optional[bool] = None,
        display_names: Optional[Mapping[str, str]] = None,
    ) -> TeamRecommendation:
        """
        Recommend a team from the given candidate pool.

        Raises:
            InvalidArgument: No requirements or non-positive team_size
            PersistenceFailure: Skill records could not be read
        """
        if team_size is None:
            team_size = Config.DEFAULT_TEAM_SIZE
        if include_partial_matches is None:
            include_partial_matches = Config.DEFAULT_INCLUDE_PARTIAL_MATCHES

        # Validate before touching the store
        self.matcher.validate_request(requirements, team_size)

        unique_ids = list(dict.fromkeys(candidate_ids))
        records = self._get_repository().find_skill_records(unique_ids)
        self.logger.debug(f"Loaded {len(records)} skill records for {len(unique_ids)} candidates")

        candidates = candidates_from_records(unique_ids, records, assignment_counts, display_names)
        return self.matcher.recommend(
            requirements,
            candidates,
            team_size=team_size,
            include_partial_matches=include_partial_matches,
            existing_member_ids=existing_member_ids,
        )
