"""
Repository Pattern for Skill Persistence

Provides an abstraction layer over MongoDB for the skill engine.

Public API:
- get_skill_repository(): Factory to get the repository instance
- SkillRepositoryInterface: Abstract interface (master skills, records, evolution log)
- WriteResult: Result dataclass for write operations

Usage:
    from skill_engine.common.repositories import get_skill_repository

    repo = get_skill_repository()
    with repo.transaction() as session:
        skill = repo.upsert_skill("Go", "Programming Language", "Go detected", session=session)
        repo.upsert_skill_record("emp-1", skill["_id"], {"level": "EXPERT"}, session=session)
"""

from .base import SkillRepositoryInterface, WriteResult
from .config import (
    get_skill_repository,
    reset_skill_repository,
    RepositoryConfig,
)

__all__ = [
    "get_skill_repository",
    "reset_skill_repository",
    "SkillRepositoryInterface",
    "WriteResult",
    "RepositoryConfig",
]
