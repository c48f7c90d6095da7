"""
Repository Configuration and Factory

Provides a factory function returning the skill repository implementation
configured through environment variables.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .base import SkillRepositoryInterface

logger = logging.getLogger(__name__)


@dataclass
class RepositoryConfig:
    """
    Configuration for repository initialization.

    Loaded from environment variables with sensible defaults.
    """
    mongodb_uri: str
    database: str = "skills"
    skills_collection: str = "skills"
    records_collection: str = "skill_records"
    evolution_collection: str = "skill_evolution"

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - MONGODB_URI (required): MongoDB connection string
        - SKILL_ENGINE_DATABASE: Database name (default "skills")
        - SKILLS_COLLECTION / SKILL_RECORDS_COLLECTION / SKILL_EVOLUTION_COLLECTION:
          Collection name overrides

        Raises:
            ValueError: If MONGODB_URI is not set
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        return cls(
            mongodb_uri=mongodb_uri,
            database=os.getenv("SKILL_ENGINE_DATABASE", "skills"),
            skills_collection=os.getenv("SKILLS_COLLECTION", "skills"),
            records_collection=os.getenv("SKILL_RECORDS_COLLECTION", "skill_records"),
            evolution_collection=os.getenv("SKILL_EVOLUTION_COLLECTION", "skill_evolution"),
        )


# Singleton repository instance
_repository_instance: Optional[SkillRepositoryInterface] = None


def get_skill_repository() -> SkillRepositoryInterface:
    """
    Get the skill repository instance.

    Uses singleton pattern for connection pooling. Indexes are ensured once,
    when the instance is first created.

    Raises:
        ValueError: If MongoDB URI is not configured
        PersistenceFailure: If the indexes cannot be created
    """
    global _repository_instance

    if _repository_instance is None:
        config = RepositoryConfig.from_env()

        from .atlas_repository import AtlasSkillRepository
        repository = AtlasSkillRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            skills_collection=config.skills_collection,
            records_collection=config.records_collection,
            evolution_collection=config.evolution_collection,
        )
        repository.ensure_indexes()
        _repository_instance = repository
        logger.info(f"Initialized skill repository ({config.database})")

    return _repository_instance


def reset_skill_repository() -> None:
    """
    Reset the repository singleton.

    Used for testing or when configuration changes.
    """
    global _repository_instance

    if _repository_instance is not None:
        from .atlas_repository import AtlasSkillRepository
        if isinstance(_repository_instance, AtlasSkillRepository):
            AtlasSkillRepository.reset_connection()

    _repository_instance = None
    logger.info("Skill repository singleton reset")
