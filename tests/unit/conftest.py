"""
Global fixtures for all unit tests.

Autouse fixtures keep unit tests away from real infrastructure:
- MongoClient is patched where the skill repository imports it, so no test
  ever opens a socket to localhost:27017
- Repository singletons are reset between tests
- Environment variables that configure the store are isolated

Shared builders (evidence, aggregates, mock repositories) live here too.
"""

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from skill_engine.common.repositories import reset_skill_repository
from skill_engine.common.repositories.atlas_repository import AtlasSkillRepository
from skill_engine.detection.types import (
    Evidence,
    EvidenceKind,
    EvidenceSource,
    SkillAggregate,
)

AS_OF = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def mock_mongodb():
    """
    Prevent MongoDB connection attempts in all unit tests.

    Setup chain: client["db"]["collection"] returns one shared collection mock.
    """
    with patch("skill_engine.common.repositories.atlas_repository.MongoClient") as mock_client:
        mock_instance = MagicMock()
        mock_db = MagicMock()
        mock_collection = MagicMock()

        mock_instance.__getitem__ = MagicMock(return_value=mock_db)
        mock_db.__getitem__ = MagicMock(return_value=mock_collection)
        mock_collection.find_one = MagicMock(return_value=None)
        mock_collection.find = MagicMock(return_value=[])

        mock_client.return_value = mock_instance
        yield mock_client

    AtlasSkillRepository._client = None


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Isolate tests from real store configuration."""
    monkeypatch.setenv("MONGODB_URI", "mongodb://test-host:27017")
    monkeypatch.setenv("DEBUG_MODE", "false")
    for name in (
        "SKILL_ENGINE_DATABASE",
        "SKILLS_COLLECTION",
        "SKILL_RECORDS_COLLECTION",
        "SKILL_EVOLUTION_COLLECTION",
        "SCORING_CONFIG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)

    reset_skill_repository()
    yield
    reset_skill_repository()


@pytest.fixture
def as_of():
    return AS_OF


def make_evidence(
    name="Python",
    frequency=1000,
    days_ago=0,
    complexity=0.5,
    lines=400,
    kind=EvidenceKind.LANGUAGE,
    source=EvidenceSource.REPOSITORY_SCAN,
    project_count=1,
):
    """Evidence observed ``days_ago`` days before AS_OF."""
    return Evidence(
        skill_name=name,
        kind=kind,
        source=source,
        frequency=frequency,
        recency=AS_OF - timedelta(days=days_ago),
        complexity=complexity,
        lines_of_code=lines,
        project_count=project_count,
    )


def make_aggregate(
    frequency=0.0,
    days_ago=0,
    complexity=0.0,
    projects=1,
    lines=0,
):
    return SkillAggregate(
        total_projects=projects,
        total_lines=lines,
        total_frequency=frequency,
        mean_complexity=complexity,
        most_recent_observation=AS_OF - timedelta(days=days_ago),
    )


@pytest.fixture
def mock_repository():
    """
    Repository mock whose transaction() is a working context manager.

    upsert_skill echoes back a master record keyed by the lowercased name.
    """
    repository = MagicMock()
    session = MagicMock(name="session")

    @contextmanager
    def transaction():
        yield session

    repository.transaction.side_effect = transaction
    repository.session = session
    repository.upsert_skill.side_effect = lambda name, category, description, session=None: {
        "_id": name.lower(),
        "name": name,
        "category": category,
        "description": description,
    }
    return repository


@pytest.fixture
def evidence_factory():
    return make_evidence


@pytest.fixture
def aggregate_factory():
    return make_aggregate
