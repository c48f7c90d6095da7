"""
Repository Interface Definitions

Defines the abstract interface for skill persistence: master skills,
per-person skill records and the append-only evolution log.
This keeps the profile builder and recommendation service independent
of the storage technology.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ContextManager, Dict, Iterable, List, Optional

from skill_engine.common.types import (
    EvolutionSnapshotDocument,
    SkillDocument,
    SkillRecordDocument,
)


@dataclass
class WriteResult:
    """
    Result of a write operation.

    Attributes:
        matched_count: Number of documents that matched the filter
        modified_count: Number of documents actually modified
        upserted_id: ID of the inserted/upserted document (if any)
    """
    matched_count: int
    modified_count: int
    upserted_id: Optional[str] = None


class SkillRepositoryInterface(ABC):
    """
    Abstract interface for skill persistence.

    Implementations:
    - AtlasSkillRepository: MongoDB (pymongo) with multi-document transactions

    Write methods accept an optional ``session`` obtained from transaction();
    every write of one profile build must use the same session so that a
    failure leaves nothing half-written. All failures surface as
    PersistenceFailure; nothing is retried here.
    """

    @abstractmethod
    def transaction(self) -> ContextManager[Any]:
        """
        Open a transaction scope.

        Usage:
            with repo.transaction() as session:
                skill = repo.upsert_skill("Go", "Programming Language", "...", session=session)
                ...

        Commits on normal exit, aborts when the block raises.
        """
        pass

    @abstractmethod
    def upsert_skill(
        self,
        name: str,
        category: str,
        description: str,
        session: Any = None,
    ) -> SkillDocument:
        """
        Insert-or-get the master skill record for ``name``.

        Atomic at the store level: concurrent builds introducing the same new
        name converge on one record. An existing record keeps its category.

        Returns:
            The stored SkillDocument (existing or newly created)
        """
        pass

    @abstractmethod
    def upsert_skill_record(
        self,
        person_id: str,
        skill_id: str,
        fields: Dict[str, Any],
        session: Any = None,
    ) -> WriteResult:
        """
        Create or overwrite the current (person, skill) projection.

        Args:
            person_id: Person the record belongs to
            skill_id: Master skill _id
            fields: Values to set (level, confidence, lines_of_code, ...)
        """
        pass

    @abstractmethod
    def append_evolution(
        self,
        snapshot: EvolutionSnapshotDocument,
        session: Any = None,
    ) -> WriteResult:
        """Append one snapshot to the evolution log (insert only)."""
        pass

    @abstractmethod
    def find_skill_records(self, person_ids: Iterable[str]) -> List[SkillRecordDocument]:
        """
        Read the current skill records of the given people.

        Each returned record carries ``skill_name`` joined from the master record.
        """
        pass

    @abstractmethod
    def find_evolution(self, person_id: str, skill_id: str) -> List[EvolutionSnapshotDocument]:
        """History for one (person, skill), oldest first."""
        pass

    @abstractmethod
    def ensure_indexes(self) -> None:
        """
        Create the unique/lookup indexes the upserts rely on.

        Idempotent. get_skill_repository() runs it when the shared instance
        is created; directly constructed repositories must call it themselves.
        """
        pass
