"""
Skill Profile Builder.

Orchestrates aggregate -> score -> classify for every skill detected for one
person, then persists the result:

1. Upsert the master skill record (insert-or-get by name)
2. Upsert the person's current skill record
3. Append an immutable snapshot to the evolution log

Steps 1-3 for all of a person's skills run inside one repository
transaction, so a failure leaves no half-written profile behind. The
scoring half (compute_profile) is pure and needs no repository.

Usage:
    builder = SkillProfileBuilder(get_skill_repository())
    entries = builder.build_profile("emp-42", evidence_by_skill)
    practices = builder.record_practices("emp-42", repositories)
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from skill_engine.common.error_handling import InvalidArgument, log_on_exception
from skill_engine.common.logger import get_logger
from skill_engine.common.repositories import SkillRepositoryInterface
from skill_engine.common.types import EvolutionSnapshotDocument
from skill_engine.common.utils import skill_key, utc_now
from skill_engine.detection.aggregator import aggregate, dominant_kind, dominant_source
from skill_engine.detection.confidence import ConfidenceScorer
from skill_engine.detection.extractor import merge_evidence
from skill_engine.detection.levels import LevelClassifier
from skill_engine.detection.practices import PracticeDetector
from skill_engine.detection.scoring_config import ScoringConfig
from skill_engine.detection.types import Evidence, RepositorySummary, SkillProfileEntry


def rank_entries(entries: Iterable[SkillProfileEntry]) -> List[SkillProfileEntry]:
    """Highest confidence first, then higher level, then name."""
    return sorted(
        entries,
        key=lambda e: (-e.confidence, -e.level.rank, skill_key(e.skill_name)),
    )


def group_by_skill(evidence_by_skill: Mapping[str, Sequence[Evidence]]) -> Dict[str, List[Evidence]]:
    """
    Merge keys that differ only by case; drop skills with no evidence.

    The first spelling seen is kept as the display name.
    """
    return {
        name: records
        for name, records in merge_evidence(evidence_by_skill).items()
        if records
    }


class SkillProfileBuilder:
    """Builds, ranks and persists a person's skill profile."""

    def __init__(
        self,
        repository: SkillRepositoryInterface,
        config: Optional[ScoringConfig] = None,
        practice_detector: Optional[PracticeDetector] = None,
        clock: Callable[[], datetime] = utc_now,
        run_id: Optional[str] = None,
    ):
        """
        Args:
            repository: Persistence collaborator (provides transactions)
            config: Scoring tables; built-in defaults when None
            practice_detector: Detector for fixed-confidence practices
            clock: Source of "now" for snapshots and recency
            run_id: Optional correlation id for log messages
        """
        self.repository = repository
        self.config = config or ScoringConfig.default()
        self.scorer = ConfidenceScorer(self.config)
        self.classifier = LevelClassifier(self.config)
        self.practice_detector = practice_detector or PracticeDetector()
        self.clock = clock
        self.logger = get_logger(__name__, run_id=run_id, component="profile_builder")

    # ------------------------------------------------------------------
    # Pure scoring
    # ------------------------------------------------------------------

    def score_skill(
        self,
        person_id: str,
        skill_name: str,
        evidence_list: Sequence[Evidence],
        as_of: datetime,
    ) -> SkillProfileEntry:
        """Aggregate, score and classify one skill."""
        merged = aggregate(evidence_list)
        confidence = self.scorer.score(merged, as_of)
        level = self.classifier.classify(confidence, merged)
        kind = dominant_kind(evidence_list)

        return SkillProfileEntry(
            person_id=person_id,
            skill_name=skill_name,
            category=kind.category(),
            confidence=confidence,
            level=level,
            source=dominant_source(evidence_list),
            aggregate=merged,
            kind=kind,
        )

    def compute_profile(
        self,
        person_id: str,
        evidence_by_skill: Mapping[str, Sequence[Evidence]],
        as_of: datetime,
    ) -> List[SkillProfileEntry]:
        """Ranked entries for every skill with at least one evidence record."""
        if not person_id:
            raise InvalidArgument("person_id is required to build a profile")

        entries = [
            self.score_skill(person_id, name, records, as_of)
            for name, records in group_by_skill(evidence_by_skill).items()
        ]
        return rank_entries(entries)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def build_profile(
        self,
        person_id: str,
        evidence_by_skill: Mapping[str, Sequence[Evidence]],
    ) -> List[SkillProfileEntry]:
        """
        Compute and persist a person's profile.

        Re-running adds a new snapshot per skill and overwrites the current
        records; nothing is deleted.

        Raises:
            InvalidArgument: If person_id is empty or evidence is malformed
            PersistenceFailure: If any write fails (the transaction is aborted)
        """
        as_of = self.clock()
        entries = self.compute_profile(person_id, evidence_by_skill, as_of)
        log = self.logger.bind(person_id=person_id)

        if not entries:
            log.info("No evidence to score; profile unchanged")
            return entries

        self.persist(person_id, entries, as_of)
        log.info(
            f"Persisted {len(entries)} skills "
            f"(top: {entries[0].skill_name} {entries[0].level.value} {entries[0].confidence:.2f})"
        )
        return entries

    def record_practices(
        self,
        person_id: str,
        repositories: Iterable[RepositorySummary],
    ) -> List[SkillProfileEntry]:
        """Detect fixed-confidence practices and persist them like scored skills."""
        if not person_id:
            raise InvalidArgument("person_id is required to record practices")

        practices = self.practice_detector.detect(person_id, repositories)
        if practices:
            self.persist(person_id, practices, self.clock())
            self.logger.bind(person_id=person_id).info(
                f"Persisted practices: {', '.join(p.skill_name for p in practices)}"
            )
        return practices

    def persist(self, person_id: str, entries: Sequence[SkillProfileEntry], as_of: datetime) -> None:
        """Write master skills, current records and snapshots in one transaction."""
        with log_on_exception(
            self.logger.logger,
            f"persist profile {person_id}",
            level=logging.ERROR,
            include_traceback=True,
        ):
            with self.repository.transaction() as session:
                for entry in entries:
                    self._persist_entry(entry, as_of, session)

    def _persist_entry(self, entry: SkillProfileEntry, as_of: datetime, session) -> None:
        skill = self.repository.upsert_skill(
            entry.skill_name,
            entry.category,
            f"{entry.skill_name} detected from {entry.source.value.replace('_', ' ')}",
            session=session,
        )
        skill_id = skill["_id"]

        self.repository.upsert_skill_record(
            entry.person_id,
            skill_id,
            {
                "level": entry.level.value,
                "confidence": entry.confidence,
                "lines_of_code": entry.lines_of_code,
                "projects_used": entry.projects_used,
                "last_used": entry.last_used,
                "is_auto_detected": True,
                "source": entry.source.value,
            },
            session=session,
        )

        self.repository.append_evolution(self._snapshot(entry, skill_id, as_of), session=session)

    def _snapshot(self, entry: SkillProfileEntry, skill_id: str, as_of: datetime) -> EvolutionSnapshotDocument:
        evidence_data = {"kind": entry.kind.value}
        if entry.aggregate is not None:
            evidence_data.update(
                {
                    "projects": entry.aggregate.total_projects,
                    "total_lines": entry.aggregate.total_lines,
                    "total_frequency": entry.aggregate.total_frequency,
                    "mean_complexity": entry.aggregate.mean_complexity,
                    "most_recent_observation": entry.aggregate.most_recent_observation,
                }
            )

        return EvolutionSnapshotDocument(
            person_id=entry.person_id,
            skill_id=skill_id,
            date=as_of,
            level=entry.level.value,
            confidence=entry.confidence,
            evidence_type=entry.source.value,
            evidence_data=evidence_data,
            total_projects=entry.projects_used,
            total_lines=entry.lines_of_code,
        )
