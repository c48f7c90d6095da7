"""
MongoDB Skill Repository

pymongo implementation of SkillRepositoryInterface. Three collections:
- skills: master records keyed by skill_key(name)
- skill_records: current projection, unique on (person_id, skill_id)
- skill_evolution: append-only snapshot log

Multi-document transactions need a replica set (Atlas clusters are one).
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from skill_engine.common.error_handling import PersistenceFailure
from skill_engine.common.types import (
    EvolutionSnapshotDocument,
    SkillDocument,
    SkillRecordDocument,
)
from skill_engine.common.utils import skill_key, utc_now

from .base import SkillRepositoryInterface, WriteResult

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver errors into PersistenceFailure for the given operation."""
    try:
        yield
    except PyMongoError as e:
        raise PersistenceFailure(operation, str(e)) from e


class AtlasSkillRepository(SkillRepositoryInterface):
    """
    MongoDB-backed skill repository.

    Connection Management:
    - Uses a class-level MongoClient singleton for connection pooling
    - Client is created on first use and reused across requests
    - Creation is serialised by a class-level lock so parallel builds share one client

    Error Handling:
    - Fail-fast: every PyMongoError becomes PersistenceFailure
    - No retries; callers decide whether to run the build again
    """

    _client: Optional[MongoClient] = None
    _client_lock = threading.Lock()

    def __init__(
        self,
        mongodb_uri: str,
        database: str = "skills",
        skills_collection: str = "skills",
        records_collection: str = "skill_records",
        evolution_collection: str = "skill_evolution",
    ):
        """
        Args:
            mongodb_uri: MongoDB connection string
            database: Database name (default: "skills")
            skills_collection: Master skill collection name
            records_collection: Per-person record collection name
            evolution_collection: Evolution log collection name
        """
        self._mongodb_uri = mongodb_uri
        self._database_name = database
        self._skills_name = skills_collection
        self._records_name = records_collection
        self._evolution_name = evolution_collection

    def _get_client(self) -> MongoClient:
        if AtlasSkillRepository._client is None:
            with AtlasSkillRepository._client_lock:
                if AtlasSkillRepository._client is None:
                    AtlasSkillRepository._client = MongoClient(self._mongodb_uri)
                    logger.info(f"Skill repository connected: {self._database_name}")
        return AtlasSkillRepository._client

    def _collection(self, name: str) -> Collection:
        return self._get_client()[self._database_name][name]

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Yield a client session inside a started transaction."""
        client = self._get_client()
        with _store_errors("transaction"):
            with client.start_session() as session:
                with session.start_transaction():
                    yield session

    def upsert_skill(
        self,
        name: str,
        category: str,
        description: str,
        session: Any = None,
    ) -> SkillDocument:
        """Insert-or-get by skill_key(name) using $setOnInsert."""
        with _store_errors("upsert_skill"):
            return self._collection(self._skills_name).find_one_and_update(
                {"_id": skill_key(name)},
                {
                    "$setOnInsert": {
                        "name": name,
                        "category": category,
                        "description": description,
                        "created_at": utc_now(),
                    }
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
                session=session,
            )

    def upsert_skill_record(
        self,
        person_id: str,
        skill_id: str,
        fields: Dict[str, Any],
        session: Any = None,
    ) -> WriteResult:
        now = utc_now()
        update = {
            "$set": {**fields, "updated_at": now},
            "$setOnInsert": {"created_at": now},
        }
        with _store_errors("upsert_skill_record"):
            result = self._collection(self._records_name).update_one(
                {"person_id": person_id, "skill_id": skill_id},
                update,
                upsert=True,
                session=session,
            )

        return WriteResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=str(result.upserted_id) if result.upserted_id else None,
        )

    def append_evolution(
        self,
        snapshot: EvolutionSnapshotDocument,
        session: Any = None,
    ) -> WriteResult:
        # insert_one adds _id to the dict it is given
        document = dict(snapshot)
        with _store_errors("append_evolution"):
            result = self._collection(self._evolution_name).insert_one(document, session=session)

        return WriteResult(
            matched_count=0,
            modified_count=1 if result.inserted_id else 0,
            upserted_id=str(result.inserted_id) if result.inserted_id else None,
        )

    def find_skill_records(self, person_ids: Iterable[str]) -> List[SkillRecordDocument]:
        ids = list(person_ids)
        if not ids:
            return []

        with _store_errors("find_skill_records"):
            records = list(
                self._collection(self._records_name).find({"person_id": {"$in": ids}})
            )
            skill_ids = sorted({record["skill_id"] for record in records})
            names = {
                doc["_id"]: doc.get("name", doc["_id"])
                for doc in self._collection(self._skills_name).find({"_id": {"$in": skill_ids}})
            }

        for record in records:
            record["skill_name"] = names.get(record["skill_id"], record["skill_id"])
        return records

    def find_evolution(self, person_id: str, skill_id: str) -> List[EvolutionSnapshotDocument]:
        with _store_errors("find_evolution"):
            cursor = self._collection(self._evolution_name).find(
                {"person_id": person_id, "skill_id": skill_id}
            ).sort("date", ASCENDING)
            return list(cursor)

    def ensure_indexes(self) -> None:
        with _store_errors("ensure_indexes"):
            self._collection(self._records_name).create_index(
                [("person_id", ASCENDING), ("skill_id", ASCENDING)],
                unique=True,
                name="person_skill_unique",
            )
            self._collection(self._evolution_name).create_index(
                [("person_id", ASCENDING), ("skill_id", ASCENDING), ("date", ASCENDING)],
                name="person_skill_date",
            )
        logger.info("Skill repository indexes ensured")

    @classmethod
    def reset_connection(cls) -> None:
        """
        Reset the connection pool.

        Used for testing or connection recovery.
        """
        with cls._client_lock:
            if cls._client:
                cls._client.close()
            cls._client = None
        logger.info("Skill repository connection reset")
