"""
Profile Refresh Service - batch profile rebuilds.

Rebuilds skill profiles for many people in parallel. Each person is an
independent unit of work: one SkillProfileBuilder.build_profile call inside
its own transaction. A person whose persistence fails transiently is retried
a bounded number of times with exponential backoff; caller bugs
(InvalidArgument) are never retried. Failures are collected per person so one
bad profile does not stop the batch.

Usage:
    service = ProfileRefreshService()
    result = service.refresh_many({"emp-1": evidence_1, "emp-2": evidence_2})
    result.failed          # ["emp-2"]
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from skill_engine.common.config import Config
from skill_engine.common.error_handling import ErrorCollector, PersistenceFailure
from skill_engine.common.logger import get_logger
from skill_engine.common.repositories import get_skill_repository
from skill_engine.detection.profile_builder import SkillProfileBuilder
from skill_engine.detection.scoring_config import ScoringConfig
from skill_engine.detection.types import Evidence, SkillProfileEntry

EvidenceBySkill = Mapping[str, Sequence[Evidence]]


@dataclass
class RefreshResult:
    """Outcome of a batch refresh."""

    profiles: Dict[str, List[SkillProfileEntry]] = field(default_factory=dict)
    errors: ErrorCollector = field(default_factory=ErrorCollector)

    @property
    def succeeded(self) -> List[str]:
        return sorted(self.profiles)

    @property
    def failed(self) -> List[str]:
        return self.errors.subjects()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skills_per_person": {pid: len(entries) for pid, entries in self.profiles.items()},
            "errors": [e.to_dict() for e in self.errors.errors],
            "error_summary": self.errors.summary(),
        }


class ProfileRefreshService:
    """Parallel, retrying wrapper around SkillProfileBuilder."""

    def __init__(
        self,
        builder: Optional[SkillProfileBuilder] = None,
        max_workers: Optional[int] = None,
        max_attempts: Optional[int] = None,
        backoff_max_seconds: float = 8.0,
    ):
        self._builder = builder
        self.max_workers = max_workers or Config.PROFILE_BUILD_WORKERS
        self.max_attempts = max_attempts or Config.PERSISTENCE_MAX_ATTEMPTS
        self.backoff_max_seconds = backoff_max_seconds
        self.logger = get_logger(__name__, component="profile_refresh")

    def _get_builder(self) -> SkillProfileBuilder:
        """Get the profile builder, creating one on the shared repository if needed."""
        if self._builder is None:
            config = ScoringConfig.load(Config.get_scoring_config_path())
            self._builder = SkillProfileBuilder(get_skill_repository(), config=config)
        return self._builder

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(min=0, max=self.backoff_max_seconds),
            retry=retry_if_exception_type(PersistenceFailure),
            reraise=True,
        )

    def refresh_one(self, person_id: str, evidence_by_skill: EvidenceBySkill) -> List[SkillProfileEntry]:
        """Build one profile, retrying transient persistence failures."""
        builder = self._get_builder()
        for attempt in self._retrying():
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                if attempt_number > 1:
                    self.logger.bind(person_id=person_id).warning(
                        f"Retrying profile build (attempt {attempt_number}/{self.max_attempts})"
                    )
                return builder.build_profile(person_id, evidence_by_skill)

    def refresh_many(self, jobs: Mapping[str, EvidenceBySkill]) -> RefreshResult:
        """
        Rebuild profiles for every person in jobs.

        Args:
            jobs: person_id -> evidence grouped by skill name

        Returns:
            RefreshResult with per-person profiles and collected errors
        """
        result = RefreshResult()
        if not jobs:
            return result

        self.logger.info(f"Refreshing {len(jobs)} profiles with {self.max_workers} workers")
        # Resolve once so worker threads share a single builder
        self._get_builder()

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self.refresh_one, person_id, evidence): person_id
                for person_id, evidence in jobs.items()
            }
            for future in as_completed(futures):
                person_id = futures[future]
                try:
                    result.profiles[person_id] = future.result()
                except Exception as e:
                    # Recorded per person; the rest of the batch continues
                    result.errors.add_exception("profile_builder", person_id, e)
                    self.logger.bind(person_id=person_id).error(f"Profile refresh failed: {e}")

        self.logger.info(
            f"Refresh complete: {len(result.succeeded)} succeeded, {len(result.failed)} failed"
        )
        return result
